"""
Seed script for a ShiftDesk development database.

Creates the tables if needed, then loads two maintenance centers with
their staff and technicians. Shifts, assignments and slots are left empty
so the scheduling wizard starts from a clean slate.

Run with: python -m scripts.seed_demo
"""

import sys
from sqlalchemy import delete

from shiftdesk.db.database import SessionLocal, engine
from shiftdesk.db.models import Base, Centers, Members, MemberRole, ShiftAssignments, Slots, WorkShifts


def clear_tables(db):
    """Delete all rows, children first."""
    print("Clearing tables...")

    for model in (ShiftAssignments, Slots, WorkShifts, Members, Centers):
        db.execute(delete(model))

    db.commit()
    print("All tables cleared.")


def seed_centers(db):
    print("Seeding centers...")

    db.add_all([
        Centers(id=100001, name="North Depot", address="1 Harbour Road"),
        Centers(id=100002, name="South Depot", address="9 Quarry Lane"),
    ])
    db.commit()
    print("  Created 2 centers")


def seed_members(db):
    """Two staff and three technicians at North Depot, one of each at South Depot."""
    print("Seeding members...")

    members = [
        # North Depot
        Members(id=100001, name="Alice Reyes", email="alice@shiftdesk.dev",
                role=MemberRole.STAFF, center_id=100001),
        Members(id=100002, name="Ben Ortiz", email="ben@shiftdesk.dev",
                role=MemberRole.STAFF, center_id=100001),
        Members(id=100003, name="Cara Lind", email="cara@shiftdesk.dev",
                role=MemberRole.TECHNICIAN, center_id=100001),
        Members(id=100004, name="Dan Okafor", email="dan@shiftdesk.dev",
                role=MemberRole.TECHNICIAN, center_id=100001),
        Members(id=100005, name="Farah Nasser", email="farah@shiftdesk.dev",
                role=MemberRole.TECHNICIAN, center_id=100001),
        # South Depot
        Members(id=100006, name="Gus Hale", email="gus@shiftdesk.dev",
                role=MemberRole.STAFF, center_id=100002),
        Members(id=100007, name="Hana Sato", email="hana@shiftdesk.dev",
                role=MemberRole.TECHNICIAN, center_id=100002),
    ]
    db.add_all(members)
    db.commit()
    print(f"  Created {len(members)} members")


def main():
    print("\n" + "="*50)
    print("ShiftDesk Database Seeder")
    print("="*50 + "\n")

    response = input("This will DELETE ALL EXISTING DATA. Continue? (yes/no): ")
    if response.lower() != "yes":
        print("Aborted.")
        sys.exit(0)

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        clear_tables(db)
        seed_centers(db)
        seed_members(db)

        print("\n" + "="*50)
        print("Seeding complete!")
        print("="*50)
        print("\nCenters:")
        print("  100001 - North Depot (2 staff, 3 technicians)")
        print("  100002 - South Depot (1 staff, 1 technician)")
        print("\nStart the API with: uvicorn shiftdesk.main:app --reload")
        print("="*50 + "\n")

    except Exception as e:
        db.rollback()
        print(f"\nError during seeding: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
