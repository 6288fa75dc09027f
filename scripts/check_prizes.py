#!/usr/bin/env python3
"""
Print the remaining stock of every prize.

Usage:
    python scripts/check_prizes.py
"""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlmodel import Session

from luckydraw.core.database import engine
from luckydraw.lottery import roster


def main():
    with Session(engine) as session:
        prizes = roster.list_prizes(session)

    if not prizes:
        print("No prizes in the database")
        return

    total = 0
    for index, prize in enumerate(prizes, start=1):
        print(f"{index:2d}. {prize.name:<24} : {prize.current_quota:3d} / {prize.initial_quota:3d}")
        total += prize.current_quota
    print(f"\n{len(prizes)} prizes, {total} units left")


if __name__ == "__main__":
    main()
