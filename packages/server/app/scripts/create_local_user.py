"""
Script to create a user with a password for local testing.
"""

import argparse
import asyncio

from fastapi import HTTPException

from app.core.database import get_session_context, init_db
from app.services import users as user_service
from soupbox_shared.schemas.users import UserCreateRequest


async def create_user(email: str, password: str, name: str, *, init: bool = False) -> bool:
    """Create the account. Returns False if the email is already registered."""
    if init:
        await init_db()
        print("Tables created.")

    req = UserCreateRequest(email=email, password=password, name=name)
    async with get_session_context() as session:
        existing = await user_service.find_one(session, req.email)
        if existing:
            print(f"User {email} already exists.")
            return False
        try:
            user = await user_service.create_user(session, req)
        except HTTPException as exc:
            print(f"Could not create {email}: {exc.detail}")
            return False
        print(f"Created user: {email} ({user.id})")
    return True


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Create a local user.")
    parser.add_argument("--email", required=True, help="Email address for the user")
    parser.add_argument("--password", required=True, help="Password for the user")
    parser.add_argument("--name", help="Display name (defaults to the email's local part)")
    parser.add_argument("--init-db", action="store_true", help="Create tables first (development only)")

    args = parser.parse_args(argv)
    name = args.name or args.email.split("@")[0]
    asyncio.run(create_user(args.email, args.password, name, init=args.init_db))


if __name__ == "__main__":
    main()
