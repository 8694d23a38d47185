"""Print a bearer token for local development and manual testing."""

from __future__ import annotations

import argparse
import sys
from datetime import timedelta

from printdesk.auth.auth_models import Role
from printdesk.auth.auth_service import AuthService
from printdesk.config import PrintDeskSettings


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Issue a signed PrintDesk bearer token.")
    parser.add_argument("--user-id", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument("--role", choices=[role.value for role in Role], default=Role.STUDENT.value)
    parser.add_argument("--ttl-hours", type=float, default=12.0)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or [])
    settings = PrintDeskSettings()
    service = AuthService(
        signing_key=settings.jwt_signing_key,
        algorithm=settings.jwt_algorithm,
        token_ttl=timedelta(hours=args.ttl_hours),
    )
    token = service.issue_token(user_id=args.user_id, email=args.email, role=args.role)
    print(token, file=sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
