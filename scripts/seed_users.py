"""Seed user accounts from the command line.

    python scripts/seed_users.py hr@org.com HR "Human Resources"
    python scripts/seed_users.py it.staff@org.com Staff "IT"
"""

import argparse
import os
import sys

# Add parent dir to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from intern_registry.application.services.user_service import create_user
from intern_registry.config import Settings
from intern_registry.core.exceptions import AppError
from intern_registry.domain.models.user import ROLES, User
from intern_registry.infrastructure.database import Base, create_db_engine, create_session_factory
from intern_registry.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def seed(email: str, role: str, department: str = None) -> int:
    settings = Settings()
    engine = create_db_engine(settings)
    Base.metadata.create_all(bind=engine)

    db = create_session_factory(engine)()
    try:
        user = create_user(SQLAlchemyUserRepository(db, User), email, role, department)
        print(f"Created {user.role} user {user.email} ({user.department or 'no department'})")
        return 0
    except AppError as e:
        print(f"Could not create user: {e.message} {e.details}")
        return 1
    finally:
        db.close()
        engine.dispose()


def main() -> int:
    parser = argparse.ArgumentParser(description="Create an Intern Registry user")
    parser.add_argument("email")
    parser.add_argument("role", choices=ROLES)
    parser.add_argument("department", nargs="?", default=None)
    args = parser.parse_args()
    return seed(args.email, args.role, args.department)


if __name__ == "__main__":
    sys.exit(main())
