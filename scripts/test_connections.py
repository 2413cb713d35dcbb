#!/usr/bin/env python3
"""
Connection Test Script

Run this to verify the database connection is working.
Usage: python scripts/test_connections.py
"""
import sys
sys.path.insert(0, '.')

from app.core.config import get_settings
from app.db.postgres import Database, mask_url


def main():
    settings = get_settings()
    print("=" * 50)
    print("STUDENT ROSTER - CONNECTION TEST")
    print("=" * 50)

    print("\n[1] Testing database...")
    print(f"    URL: {mask_url(settings.sqlalchemy_url)}")
    database = Database(settings.sqlalchemy_url)
    if database.ping():
        print("    ✅ Database: CONNECTED")
    else:
        print("    ❌ Database: FAILED")

    print("\n" + "=" * 50)
    print("Connection test complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
