# src/civic_commons/scripts/tokens.py
"""
Mint a bearer token for an existing user.

Useful for operators and for exercising the API by hand:

    civic-commons-token --email someone@example.org
"""

from __future__ import annotations

import argparse
import sys

from sqlalchemy.orm import Session

from civic_commons.core.security import create_access_token
from civic_commons.db.session import SessionLocal
from civic_commons.models import User


def find_user(db: Session, *, user_id: str | None = None, email: str | None = None) -> User | None:
    """Look a user up by id or, failing that, by email."""
    if user_id:
        return db.get(User, user_id)
    if email:
        return db.query(User).filter(User.email == email.strip().lower()).first()
    return None


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Issue an access token for a user")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--user-id", help="Primary key of the user")
    group.add_argument("--email", help="Registered email address of the user")
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user = find_user(db, user_id=args.user_id, email=args.email)
    finally:
        db.close()

    if user is None:
        print("[tokens] ERROR: no such user", file=sys.stderr)
        return 1
    print(create_access_token(user.id))
    return 0


if __name__ == "__main__":
    sys.exit(main())
