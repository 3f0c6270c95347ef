"""
Reset the flashcard database.

DANGEROUS: This deletes all decks, cards and review state!
Only use when you want to start fresh for testing.

Usage:
    python -m scripts.maintenance.reset_study_db
"""

from flashdeck.config import configure_logging, get_database_url
from flashdeck.storage import get_engine, reset_db


def main():
    configure_logging()

    print("=" * 60)
    print("WARNING: Reset Flashcard Database")
    print("=" * 60)
    print()
    print(f"Database: {get_database_url()}")
    print()
    print("This will DELETE:")
    print("  - All decks")
    print("  - All cards and their review state (ease, interval, status)")
    print()

    response = input("Are you sure you want to reset? (type 'yes' to confirm): ")

    if response.lower() == "yes":
        print("\nResetting database...")
        reset_db(get_engine())
        print("Database reset complete!")
        print("\nThe database now has empty tables ready for new decks.")
    else:
        print("\nCancelled. No changes made.")


if __name__ == "__main__":
    main()
