#!/usr/bin/env python3
"""
Contact List -- multi-tenant contact list API with bearer-token auth.

Usage:
  python main.py serve
  python main.py serve --host 0.0.0.0 --port 8000
  python main.py serve --reload
  python main.py create-user --name "Ada Lovelace" --email ada@example.com

Environment variables (or .env):
  SECRET_KEY     Required unless DEBUG=true. At least 32 characters.
  DATABASE_URL   SQLAlchemy URL (default: sqlite:///./contact_list.db)
  DEBUG          Development mode; auto-generates a throwaway SECRET_KEY.
"""

import argparse
import getpass
import sys

import uvicorn
from pydantic import ValidationError

from api.models import RegisterRequest
from auth.passwords import PasswordHasher
from auth.service import AuthService
from auth.store import UserStore
from auth.tokens import TokenIssuer
from core.config import get_settings
from core.errors import ConflictError


def _read_password() -> str:
    """Prompt twice for a password. Returns "" if the two entries differ."""
    first = getpass.getpass("  Password: ")
    second = getpass.getpass("  Confirm password: ")
    if first != second:
        print("  [!] Passwords do not match.")
        return ""
    return first


def create_user(name: str, email: str) -> int:
    """Register an account from the terminal. Returns a process exit code."""
    password = _read_password()
    if not password:
        return 1
    try:
        body = RegisterRequest(name=name, email=email, password=password)
    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"])
            print(f"  [!] {field}: {err['msg']}")
        return 1

    try:
        settings = get_settings()
    except ValidationError as e:
        for err in e.errors():
            print(f"  [!] {err['msg']}")
        return 1

    store = UserStore(settings.database_url)
    try:
        service = AuthService(
            store,
            PasswordHasher(rounds=settings.bcrypt_rounds),
            TokenIssuer(settings.secret_key, expire_days=settings.token_expire_days),
        )
        result = service.register(body.name, body.email, body.password)
    except ConflictError as e:
        print(f"  [!] {e.message}")
        return 1
    finally:
        store.close()

    print(f"  Created user {result.user.email} (id={result.user.id})")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="contact-list",
        description="Multi-tenant contact list API.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py serve --reload
  python main.py create-user --name "Ada Lovelace" --email ada@example.com
  SECRET_KEY=... python main.py serve --host 0.0.0.0
        """,
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    serve = sub.add_parser("serve", help="Run the API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    serve.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")

    add_user = sub.add_parser("create-user", help="Register an account; the password is prompted for")
    add_user.add_argument("--name", required=True, help="Display name")
    add_user.add_argument("--email", required=True, help="Login email (must be unique)")

    args = parser.parse_args()

    if args.command == "serve":
        uvicorn.run("asgi:app", host=args.host, port=args.port, reload=args.reload)
    elif args.command == "create-user":
        sys.exit(create_user(args.name, args.email))
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
