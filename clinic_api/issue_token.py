"""Print a bearer token for a local identity.

Usage:
    python -m clinic_api.issue_token <open_id> [--name NAME] [--email EMAIL]

Meant for development against a shared JWT secret; production tokens come from
the identity provider.
"""
import argparse
import sys

from clinic_api.auth.jwt_handler import create_access_token
from clinic_api.core import config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Issue a development access token.")
    parser.add_argument("open_id")
    parser.add_argument("--name")
    parser.add_argument("--email")
    parser.add_argument("--expires-minutes", type=int, default=None)
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    if config.APP_ENV.lower() == "production":
        print("Refusing to issue development tokens in production.", file=sys.stderr)
        sys.exit(1)

    claims = {key: value for key, value in {"name": args.name, "email": args.email}.items() if value}
    print(create_access_token(args.open_id, claims=claims, expires_minutes=args.expires_minutes))


if __name__ == "__main__":
    main()
