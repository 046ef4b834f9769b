"""
Create an administrator account.

The account is created verified with the ADMIN role, or an existing account
with that email is promoted and verified.

Usage:
    python scripts/create_admin.py admin@taskflow.io "Ada Admin"
"""

import argparse
import getpass
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

load_dotenv()

from sqlmodel import Session

from taskflow.core.config import get_settings
from taskflow.core.security import hash_password, validate_password_policy
from taskflow.db.repositories.user import UserRepository
from taskflow.db.session import create_db_engine
from taskflow.models.user import User, UserRole


def main() -> int:
    parser = argparse.ArgumentParser(description="Create or promote a TaskFlow administrator.")
    parser.add_argument("email")
    parser.add_argument("name")
    args = parser.parse_args()

    settings = get_settings()
    password = getpass.getpass("Password: ")
    validate_password_policy(password, settings.PASSWORD_MIN_LENGTH)

    email = args.email.strip().lower()
    with Session(create_db_engine(settings)) as session:
        repository = UserRepository(session)
        user = repository.get_by_email(email)
        if user is None:
            user = repository.create(User(email=email, name=args.name, role=UserRole.ADMIN, email_verified=True,
                                          hashed_password=hash_password(password, settings.BCRYPT_ROUNDS)))
            print(f"Created administrator {user.email} (id={user.id})")
        else:
            user.role = UserRole.ADMIN
            user.email_verified = True
            user.hashed_password = hash_password(password, settings.BCRYPT_ROUNDS)
            repository.update(user)
            print(f"Promoted {user.email} (id={user.id}) to administrator")
    return 0


if __name__ == "__main__":
    sys.exit(main())
