#!/usr/bin/env python3
"""Drop pending verifications and attempt counters, then recreate their indexes."""

from dotenv import load_dotenv

load_dotenv()

from auth_api import database  # noqa: E402


def reset_all_collections():
    """Drop the verification collections and start fresh."""
    db = database.get_database()

    print("Clearing verification collections...")
    for collection_name in (database.VERIFICATIONS_COLLECTION, database.ATTEMPTS_COLLECTION):
        db[collection_name].drop()
        print(f"   Dropped {collection_name}")

    database.create_indexes()
    print("\nIndexes recreated. Pending signups must request a new code.")


if __name__ == "__main__":
    print("Resetting the verification store...")
    print("   This will DELETE ALL pending verifications.")

    confirm = input("\nAre you sure? Type 'yes' to continue: ")
    if confirm.lower() == 'yes':
        reset_all_collections()
    else:
        print("Reset cancelled.")
