"""CLI for the biens service: create tables, manage users."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import sys


async def cmd_init_db(args):
    """Create all tables on the configured database."""
    from app.db.engine import init_db

    await init_db()
    print("Database tables created.")


async def cmd_create_user(args):
    """Create a user account (seller, buyer or admin)."""
    from app.db.engine import async_session_factory, init_db
    from app.db import crud
    from app.services.auth import ROLES, hash_password

    if args.role not in ROLES:
        print(f"Role must be one of: {', '.join(ROLES)}")
        sys.exit(1)

    # Get password interactively if not provided
    password = args.password
    if not password:
        password = getpass.getpass("Password: ")
        confirm = getpass.getpass("Confirm password: ")
        if password != confirm:
            print("Passwords do not match")
            sys.exit(1)

    if len(password) < 8:
        print("Password must be at least 8 characters")
        sys.exit(1)

    await init_db()

    async with async_session_factory() as db:
        if await crud.get_user_by_email(db, args.email):
            print(f"A user with email {args.email} already exists")
            sys.exit(1)
        user = await crud.create_user(
            db, args.email, hash_password(password), role=args.role,
            nom=args.nom, prenom=args.prenom, telephone=args.telephone,
        )

    print(f"User created: {user.email} (id={user.id}, role={user.role})")


def main():
    parser = argparse.ArgumentParser(description="Biens service CLI")
    subparsers = parser.add_subparsers(dest="command")

    # init-db
    subparsers.add_parser("init-db", help="Create database tables")

    # create-user
    cu = subparsers.add_parser("create-user", help="Create a user account")
    cu.add_argument("--email", required=True, help="Login email")
    cu.add_argument("--role", default="vendeur", help="vendeur | acheteur | admin")
    cu.add_argument("--password", default="", help="Password (prompted if not given)")
    cu.add_argument("--nom", default="", help="Last name")
    cu.add_argument("--prenom", default="", help="First name")
    cu.add_argument("--telephone", default="", help="Phone number")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "init-db":
        asyncio.run(cmd_init_db(args))
    elif args.command == "create-user":
        asyncio.run(cmd_create_user(args))


if __name__ == "__main__":
    main()
