#!/usr/bin/env python3
"""
Register a user agent in the local agent registry (SQLite).

In production agents come from the identity system; this script seeds
the registry used by ``SQLiteIdentityResolver`` for development and
testing deployments.

Usage:
    python register_agent.py --login adam [--id 5f0c2a9e] [--db ./contact_service_api/contact_service.db]
"""

import argparse
import os
import sys

from contact_service_api.app.core.db import init_db
from contact_service_api.app.core.errors import StorageFailure, UnknownAgentError
from contact_service_api.app.identity.sqlite_resolver import SQLiteIdentityResolver


def main() -> None:
    ap = argparse.ArgumentParser(description="Register a contact service agent (SQLite).")
    ap.add_argument("--login", required=True, help="Login name of the new agent")
    ap.add_argument("--id", help="Agent id to use; a random one is generated if omitted")
    ap.add_argument("--db", help="Path to the SQLite DB file; defaults to DATABASE_URL")
    args = ap.parse_args()

    db_path = os.path.abspath(args.db) if args.db else None
    init_db(db_path)
    resolver = SQLiteIdentityResolver(db_path)

    try:
        existing = resolver.resolve_login(args.login)
        print(f"[!] Login name {args.login} is already taken by {existing}", file=sys.stderr)
        sys.exit(2)
    except UnknownAgentError:
        pass

    try:
        agent_id = resolver.register(args.login, args.id)
    except StorageFailure as e:
        print(f"[!] Could not register {args.login}: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"[+] Registered {args.login} as {agent_id}")


if __name__ == "__main__":
    main()
