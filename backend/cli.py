"""CLI tool for admin operations.

Usage:
    python -m backend.cli create-user
"""

import sys
import getpass

from sqlmodel import Session, select

from backend.database import engine, create_db_and_tables
from backend.models.user import User
from backend.services.users import create_user as provision_user
from backend.utils.constants import DEFAULT_CURRENCY, ROLE_TRADER, VALID_ROLES
from backend.utils.logging import setup_logging


def create_user():
    """Create a trader or investor account."""
    setup_logging()
    create_db_and_tables()

    username = input("Username: ").strip()
    if not username:
        print("Username cannot be empty.")
        sys.exit(1)

    with Session(engine) as session:
        existing = session.exec(select(User).where(User.username == username)).first()
        if existing:
            print(f"User '{username}' already exists.")
            sys.exit(1)

    role = input(f"Role ({'/'.join(VALID_ROLES)}): ").strip().lower()
    if role not in VALID_ROLES:
        print(f"Role must be one of: {', '.join(VALID_ROLES)}")
        sys.exit(1)

    currency = input(f"Currency [{DEFAULT_CURRENCY}]: ").strip() or DEFAULT_CURRENCY

    password = getpass.getpass("Password: ")
    password_confirm = getpass.getpass("Confirm password: ")
    if password != password_confirm:
        print("Passwords do not match.")
        sys.exit(1)

    with Session(engine) as session:
        try:
            user = provision_user(session, username, password, role, currency)
        except (ValueError, RuntimeError) as e:
            print(str(e))
            sys.exit(1)

    print(f"\n{role.capitalize()} '{username}' created successfully.")
    if role == ROLE_TRADER:
        print(f"\nTrader UID: {user.trader_uid}")
        print("Share this code with investors so they can send a binding request.")


def main():
    if len(sys.argv) < 2:
        print("Usage: python -m backend.cli <command>")
        print("Commands: create-user")
        sys.exit(1)

    command = sys.argv[1]
    if command == "create-user":
        create_user()
    else:
        print(f"Unknown command: {command}")
        sys.exit(1)


if __name__ == "__main__":
    main()
