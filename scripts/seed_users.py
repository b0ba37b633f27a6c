"""Utility script to seed users and print development access tokens."""

from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from peerlink.domain.entities import User
from peerlink.infrastructure.database import SessionLocal, initialize_database
from peerlink.infrastructure.repositories import UserRepository
from peerlink.infrastructure.security import create_user_token
from peerlink.utils import app_now


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for user seeding."""

    parser = argparse.ArgumentParser(
        description="Create users for local PeerLink development.",
    )
    parser.add_argument(
        "users",
        nargs="+",
        metavar="NAME:EMAIL",
        help="User to create, as display name and email separated by a colon",
    )
    parser.add_argument(
        "--id-prefix",
        default=None,
        help="Use '<prefix><n>' as identifiers instead of random ones (e.g. 'u' -> u1, u2)",
    )
    return parser.parse_args()


def _parse_user(raw: str) -> tuple[str, str]:
    name, separator, email = raw.partition(":")
    if not separator or not name.strip() or "@" not in email:
        raise SystemExit(f"Invalid user '{raw}'; expected NAME:EMAIL")
    return name.strip(), email.strip()


def main() -> None:
    """Create the requested users, skipping emails that already exist."""

    args = parse_args()
    entries = [_parse_user(raw) for raw in args.users]

    initialize_database()

    session = SessionLocal()
    repository = UserRepository(session)
    try:
        for index, (name, email) in enumerate(entries, start=1):
            existing = repository.get_by_email(email)
            if existing is not None:
                print(f"Skipping {email}: already registered as {existing.id}")
                continue
            user_id = f"{args.id_prefix}{index}" if args.id_prefix else None
            user = repository.create(
                User(id=user_id, name=name, email=email, created_at=app_now())
            )
            print(
                "User created:\n"
                f"  ID: {user.id}\n"
                f"  Name: {user.name}\n"
                f"  Email: {user.email}\n"
                f"  Token: {create_user_token(user.id)}"
            )
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not store the users: {exc}") from exc
    finally:
        session.close()


if __name__ == "__main__":
    main()
