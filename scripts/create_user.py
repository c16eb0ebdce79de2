"""Seed a credential row into the SQLite users table.

Usage:
  python scripts/create_user.py --email a@x.com --password '...'

Reads HASH_SECRET (and JWT_SECRET, which must differ) from the environment or .env.
"""

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from usergate.apigateway.settings import GatewaySettings
from usergate.authservice import PasswordHasher, SqliteCredentialStore, load_auth_settings


def create_user(store: SqliteCredentialStore, hasher: PasswordHasher, *, email: str, password: str):
    store.init_schema()
    return store.insert(email=email, password_hash=hasher.hash(password))


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--email", required=True)
    ap.add_argument("--password", required=True)
    ap.add_argument("--db", default=None, help="SQLite path (defaults to DATABASE_PATH)")
    args = ap.parse_args()

    auth = load_auth_settings()
    store = SqliteCredentialStore(args.db or GatewaySettings().DATABASE_PATH)
    hasher = PasswordHasher(
        auth.HASH_SECRET,
        time_cost=auth.ARGON2_TIME_COST,
        memory_cost=auth.ARGON2_MEMORY_COST,
        parallelism=auth.ARGON2_PARALLELISM,
    )
    record = create_user(store, hasher, email=args.email, password=args.password)
    print(f"Created user id={record.id} email={record.email}")


if __name__ == "__main__":
    main()
