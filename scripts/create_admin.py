#!/usr/bin/env python3
"""
Create Administrator Script

Bootstraps an admin account without going through the HTTP API.
Usage: python scripts/create_admin.py <username> [--password PASSWORD]
"""
import argparse
import getpass
import sys
sys.path.insert(0, '.')

from app.core.config import get_settings
from app.core.container import build_container
from app.core.exceptions import UsernameConflict


def main():
    parser = argparse.ArgumentParser(description="Create an administrator account")
    parser.add_argument("username")
    parser.add_argument("--password", help="prompted for when omitted")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")
    if len(password) < 8:
        print("❌ Password must be at least 8 characters")
        return 1

    container = build_container(get_settings())
    container.database.create_all()
    try:
        container.auth_service.register(args.username.strip(), password)
    except UsernameConflict:
        print(f"❌ Admin '{args.username}' already exists")
        return 1

    print(f"✅ Admin '{args.username}' created")
    return 0


if __name__ == "__main__":
    sys.exit(main())
