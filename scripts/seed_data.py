#!/usr/bin/env python3
"""
Database seed data script for the LFG backend.

This script populates the database with demo users and groups using Faker.
Every seeded user signs in with the password ``password123``. Memberships
respect group capacity and never include the group owner.
"""

import sys
import random
from pathlib import Path
from typing import List

# Add the project root to the Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

from faker import Faker
from sqlalchemy.orm import Session

from lfg.core.database import SessionLocal, create_tables
from lfg.core.security import hash_password
from lfg.models import User, Group, GroupStatus, joined_groups

SEED_PASSWORD = "password123"

# Initialize Faker
fake = Faker()
Faker.seed(42)  # For reproducible data
random.seed(42)


class DataSeeder:
    """Class to handle database seeding operations."""

    def __init__(self):
        self.db: Session = SessionLocal()
        self.users: List[User] = []
        self.groups: List[Group] = []

    def close(self):
        """Close database session."""
        self.db.close()

    def clear_existing_data(self):
        """Clear all existing data from tables."""
        print("🧹 Clearing existing data...")

        # Delete in reverse order of dependencies
        self.db.execute(joined_groups.delete())
        self.db.query(Group).delete()
        self.db.query(User).delete()

        self.db.commit()
        print("✅ Existing data cleared")

    def create_users(self, count: int = 30):
        """Create users sharing the seed password."""
        print(f"👤 Creating {count} users...")

        # Hash once; bcrypt is deliberately slow
        password_hash = hash_password(SEED_PASSWORD)
        usernames = set()
        while len(usernames) < count:
            usernames.add(fake.user_name()[:50])

        for username in sorted(usernames):
            user = User(username=username, password=password_hash)
            self.db.add(user)
            self.users.append(user)

        self.db.commit()
        print(f"✅ Created {len(self.users)} users")

    def create_groups(self, count: int = 10):
        """Create groups owned by random users; some private, some closed."""
        print(f"👥 Creating {count} groups...")

        for _ in range(count):
            group = Group(
                title=fake.catch_phrase()[:50],
                description=fake.text(max_nb_chars=200),
                max_size=random.choice([5, 6, 8, 10, 20]),
                owner_id=random.choice(self.users).id,
                password=hash_password(fake.word()) if random.random() < 0.2 else None,
                status=GroupStatus.OPEN,
            )
            self.db.add(group)
            self.groups.append(group)

        self.db.commit()
        print(f"✅ Created {len(self.groups)} groups")

    def assign_members(self):
        """Fill groups with members up to a random share of their capacity."""
        print("🔗 Assigning users to groups...")

        assignments = 0
        for group in self.groups:
            candidates = [u for u in self.users if u.id != group.owner_id]
            target = random.randint(0, group.max_size - 1)
            for user in random.sample(candidates, min(target, len(candidates))):
                group.members.append(user)
                assignments += 1

        # Close a few groups once their members are in
        for group in random.sample(self.groups, max(1, len(self.groups) // 5)):
            group.status = GroupStatus.CLOSED

        self.db.commit()
        print(f"✅ Created {assignments} group memberships")

    def run_full_seed(self, users_count: int = 30, groups_count: int = 10):
        """Run complete database seeding process."""
        print("🌱 Starting database seeding process...")
        print("=" * 50)

        try:
            create_tables()
            self.clear_existing_data()

            # Create data in dependency order
            self.create_users(users_count)
            self.create_groups(groups_count)
            self.assign_members()

            print()
            print("✅ Database seeding completed successfully!")
            print("=" * 50)
            print(f"📊 Summary:")
            print(f"   Users: {len(self.users)} (password: {SEED_PASSWORD})")
            print(f"   Groups: {len(self.groups)}")

        except Exception as e:
            print(f"❌ Seeding failed: {e}")
            self.db.rollback()
            raise


def main():
    """Main seeding function."""
    seeder = DataSeeder()

    try:
        if len(sys.argv) > 1 and sys.argv[1] == "small":
            # Smaller dataset for quick testing
            seeder.run_full_seed(users_count=10, groups_count=4)
        else:
            seeder.run_full_seed()
    finally:
        seeder.close()


if __name__ == "__main__":
    main()
