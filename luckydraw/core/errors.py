"""Error hierarchy for the lucky draw service.

Every failure raised by a core transaction is one of these types. The HTTP
layer maps them to JSON responses using ``status_code``; in-process callers
catch the category they care about (``NotFoundError``, ``ConflictError``...).
"""


class LuckyDrawError(Exception):
    """Base class for all typed lucky draw failures."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def code(self) -> str:
        return type(self).__name__


class NotFoundError(LuckyDrawError):
    status_code = 404


class ParticipantNotFound(NotFoundError):
    pass


class PrizeNotFound(NotFoundError):
    pass


class WinnerNotFound(NotFoundError):
    pass


class ConflictError(LuckyDrawError):
    status_code = 409


class InsufficientQuota(ConflictError):
    pass


class InsufficientParticipants(ConflictError):
    pass


class AlreadyWinner(ConflictError):
    pass


class NotCheckedIn(ConflictError):
    pass


class DuplicateEntry(ConflictError):
    pass


class PrizeInUse(ConflictError):
    pass


class InvalidInputError(LuckyDrawError):
    status_code = 400


class FatalError(LuckyDrawError):
    """Missing configuration the service cannot run without."""

    status_code = 500


class SequenceCounterMissing(FatalError):
    pass
