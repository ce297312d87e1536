import sys
import os
from datetime import timedelta

# Add current directory to path
sys.path.append(os.getcwd())

from fieldservice.core.security import create_access_token


def issue_token(owner_id, days=7):
    """Mint a bearer token for an owning account, for local testing against the API."""
    token = create_access_token(owner_id, expires_delta=timedelta(days=days))
    print(f"Owner: {owner_id}")
    print(f"Authorization: Bearer {token}")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python scripts/issue_owner_token.py <owner_id> [days]")
        sys.exit(1)
    issue_token(sys.argv[1], int(sys.argv[2]) if len(sys.argv) > 2 else 7)
