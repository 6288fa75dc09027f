#!/usr/bin/env python3
"""
Create the lucky draw database and seed it with sample data.

Creates all tables and the check-in sequence row. Sample participants and
prizes are only inserted into empty tables, so the script is safe to re-run.

Usage:
    python scripts/init_db.py [--no-sample]

Options:
    --no-sample    Create the schema only
"""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlmodel import Session, func, select

from luckydraw.core.database import create_db_and_tables, engine
from luckydraw.lottery import roster
from luckydraw.models import Participant, Prize
from luckydraw.models.participant import ParticipantCreate
from luckydraw.models.prize import PrizeCreate

SAMPLE_PARTICIPANTS = [
    ("Nur Muhammad", "176781231"),
    ("Siti Aisyah", "176781232"),
    ("Budi Santoso", "176781233"),
    ("Dewi Lestari", "176781234"),
    ("Ahmad Fauzi", "176781235"),
    ("Rina Kartika", "176781236"),
    ("Hendra Wijaya", "176781237"),
    ("Fitri Handayani", "176781238"),
    ("Rizki Ramadhan", "176781239"),
    ("Maya Sari", "176781240"),
    ("Doni Pratama", "176781241"),
    ("Lina Marlina", "176781242"),
]

SAMPLE_PRIZES = [
    ("Chopper/Blender", 2),
    ("Voucher Belanja", 50),
    ("TWS", 15),
    ("Sepeda Listrik", 1),
    ("Smart Watch", 5),
    ("Magic Com", 1),
    ("Setrika Uap", 1),
]


def main(sample: bool = True):
    print("Initializing database...")
    create_db_and_tables()
    print("Tables created")

    if not sample:
        return

    with Session(engine) as session:
        participant_count = session.exec(select(func.count()).select_from(Participant)).one()
        if participant_count == 0:
            rows = [
                ParticipantCreate(name=name, external_id=external_id, category="Staff")
                for name, external_id in SAMPLE_PARTICIPANTS
            ]
            count = roster.import_participants(session, rows)
            print(f"Inserted {count} participants")
        else:
            print(f"Found {participant_count} existing participants, skipping")

        prize_count = session.exec(select(func.count()).select_from(Prize)).one()
        if prize_count == 0:
            for name, quota in SAMPLE_PRIZES:
                roster.create_prize(session, PrizeCreate(name=name, quota=quota))
            print(f"Inserted {len(SAMPLE_PRIZES)} prizes")
        else:
            print(f"Found {prize_count} existing prizes, skipping")

    print("Database setup complete")


if __name__ == "__main__":
    main(sample="--no-sample" not in sys.argv)
