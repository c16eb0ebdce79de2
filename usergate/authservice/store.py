from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from .contracts import CredentialRecord
from .hashing import PasswordHasher


class InMemoryCredentialStore:
    """
    Test/dev store keyed by exact email. Thread-safe within one process.
    """

    def __init__(self, hasher: Optional[PasswordHasher] = None) -> None:
        self._lock = threading.RLock()
        self._by_email: Dict[str, CredentialRecord] = {}
        self._next_id = 1
        self._hasher = hasher

    def add_user(self, *, email: str, password: str, id: Optional[int] = None) -> CredentialRecord:
        if self._hasher is None:
            raise RuntimeError("InMemoryCredentialStore needs a hasher to add users")
        return self.add_record(email=email, password_hash=self._hasher.hash(password), id=id)

    def add_record(self, *, email: str, password_hash: str, id: Optional[int] = None) -> CredentialRecord:
        with self._lock:
            if email in self._by_email:
                raise ValueError("email_exists")
            rec_id = id if id is not None else self._next_id
            self._next_id = max(self._next_id, rec_id + 1)
            record = CredentialRecord(id=rec_id, email=email, password_hash=password_hash)
            self._by_email[email] = record
            return record

    # Satisfy CredentialStorePort
    def find_by_email(self, email: str) -> Optional[CredentialRecord]:
        with self._lock:
            return self._by_email.get(email)


_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email TEXT NOT NULL UNIQUE,
    password TEXT NOT NULL
)
"""


class SqliteCredentialStore:
    """
    Credential lookup over the `users` table. One connection per call, so
    concurrent requests never share a connection.
    """

    def __init__(self, path: str, *, timeout: float = 5.0) -> None:
        self._path = path
        self._timeout = timeout

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self._path, timeout=self._timeout)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(_SCHEMA)

    def insert(self, *, email: str, password_hash: str) -> CredentialRecord:
        with self._connect() as conn:
            cur = conn.execute(
                "INSERT INTO users (email, password) VALUES (?, ?)",
                (email, password_hash),
            )
            return CredentialRecord(id=int(cur.lastrowid), email=email, password_hash=password_hash)

    # Satisfy CredentialStorePort
    def find_by_email(self, email: str) -> Optional[CredentialRecord]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, email, password FROM users WHERE email = ?",
                (email,),
            ).fetchone()
        if row is None:
            return None
        return CredentialRecord(id=int(row["id"]), email=row["email"], password_hash=row["password"])
