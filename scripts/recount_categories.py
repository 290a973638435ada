from __future__ import annotations

import argparse

from sqlmodel import Session

from questionbank.db.base import get_engine, init_db
from questionbank.services.category_service import CategoryService


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Recompute every category's question count from the questions table "
        "and repair counters that have drifted."
    )
    parser.add_argument("--dry-run", action="store_true", help="Only report drifted categories, do not write")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    init_db()
    with Session(get_engine()) as session:
        service = CategoryService(session)
        if args.dry_run:
            drifted = service.find_drifted()
            if not drifted:
                print("All category counters are consistent.")
                return
            for category, actual in drifted:
                print(f"[DRY RUN] {category.name}: stored={category.question_count} actual={actual}")
            return
        repaired = service.recount_question_counts()
        if not repaired:
            print("All category counters are consistent.")
            return
        for category in repaired:
            print(f"Repaired {category.name}: question_count={category.question_count}")
        print(f"Repaired {len(repaired)} categor{'y' if len(repaired) == 1 else 'ies'}.")


if __name__ == "__main__":
    main()
