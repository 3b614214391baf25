"""Utility script to issue a demo access token for a portal user."""

from __future__ import annotations

import argparse
from datetime import timedelta

from hostel_notify.domain.entities import Actor
from hostel_notify.infrastructure.security import create_actor_token


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for token creation."""

    parser = argparse.ArgumentParser(
        description="Issue a bearer token accepted by the notification API.",
    )
    parser.add_argument("--user-id", type=int, required=True, help="Portal user id")
    parser.add_argument(
        "--role",
        default="student",
        help="Role carried by the token (default: student; use admin for full access)",
    )
    parser.add_argument(
        "--minutes",
        type=int,
        default=None,
        help="Token lifetime in minutes (default: ACCESS_TOKEN_EXPIRE_MINUTES)",
    )
    return parser.parse_args()


def main() -> None:
    """Print a token for the provided user id and role."""

    args = parse_args()
    if args.user_id <= 0:
        raise SystemExit("The user id must be a positive integer.")
    expires = timedelta(minutes=args.minutes) if args.minutes else None
    print(create_actor_token(Actor(id=args.user_id, role=args.role), expires))


if __name__ == "__main__":
    main()
