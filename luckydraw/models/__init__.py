from luckydraw.models.participant import Participant
from luckydraw.models.prize import Prize
from luckydraw.models.setting import Setting
from luckydraw.models.winner import Winner

__all__ = ["Participant", "Prize", "Winner", "Setting"]
