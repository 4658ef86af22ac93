"""Print a bearer token for an agent of the local agent registry.

Usage:
    python create_token.py --login adam [--days 365]
"""

import argparse
import sys

from contact_service_api.app.core.db import init_db
from contact_service_api.app.core.errors import UnknownAgentError
from contact_service_api.app.core.security import create_access_token
from contact_service_api.app.identity.sqlite_resolver import SQLiteIdentityResolver


def main() -> None:
    ap = argparse.ArgumentParser(description="Issue a contact service token for an agent.")
    ap.add_argument("--login", required=True, help="Login name of the agent")
    ap.add_argument("--days", type=int, default=365, help="Token lifetime in days")
    args = ap.parse_args()

    init_db()
    try:
        agent_id = SQLiteIdentityResolver().resolve_login(args.login)
    except UnknownAgentError:
        print(f"[!] No agent with login name: {args.login}", file=sys.stderr)
        sys.exit(2)
    print(create_access_token(agent_id, expires_delta=args.days * 24 * 60 * 60))


if __name__ == "__main__":
    main()
