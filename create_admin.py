#!/usr/bin/env python3
"""
Create an admin user, or promote an existing user to admin.

Usage:
    python create_admin.py [email] [password] [name]

Running it again for an account that is already an admin changes nothing.
"""

import argparse
import asyncio
import sys

from app.database import AsyncSessionLocal, engine
from app.domains.user.service import DEFAULT_ADMIN_PASSWORD, UserService
from models import Base


async def create_admin(email: str, password: str, name: str) -> int:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        async with AsyncSessionLocal() as db:
            user, outcome = await UserService(db).ensure_admin(email, password, name)
    except Exception as e:
        print(f"❌ Error creating admin user: {str(e)}")
        return 1
    finally:
        await engine.dispose()

    if outcome == "exists":
        print(f"Admin user with email {email} already exists!")
    elif outcome == "promoted":
        print(f"✅ User {email} has been promoted to admin!")
        print(f"📧 Email: {user.email}")
        print(f"👤 Name: {user.name}")
        if password and password != DEFAULT_ADMIN_PASSWORD:
            print("🔑 Password updated")
    else:
        print("✅ Admin user created successfully!")
        print(f"📧 Email: {user.email}")
        print(f"👤 Name: {user.name}")
        print(f"🔑 Password: {password}")
        print("⚠️  Please change the password after first login!")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Create or promote an admin user")
    parser.add_argument("email", nargs="?", default="admin@example.com")
    parser.add_argument("password", nargs="?", default=DEFAULT_ADMIN_PASSWORD)
    parser.add_argument("name", nargs="?", default="Admin User")
    args = parser.parse_args()

    sys.exit(asyncio.run(create_admin(args.email, args.password, args.name)))


if __name__ == "__main__":
    main()
