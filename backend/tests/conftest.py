"""
backend/tests/conftest.py

Purpose:
    Shared pytest bootstrap: import paths for backend modules and an
    in-memory stand-in for the three Motor ledger collections.
"""

from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest
from bson import ObjectId

_THIS_FILE = Path(__file__).resolve()
_BACKEND_DIR = _THIS_FILE.parents[1]
_REPO_ROOT = _THIS_FILE.parents[2]

for candidate in (str(_BACKEND_DIR), str(_REPO_ROOT)):
    if candidate not in sys.path:
        sys.path.insert(0, candidate)


def _matches(doc: dict, query: dict) -> bool:
    for key, expected in query.items():
        value = doc.get(key)
        if isinstance(expected, dict) and "$in" in expected:
            if value not in expected["$in"]:
                return False
        elif value != expected:
            return False
    return True


class _Cursor:
    def __init__(self, docs: list[dict]):
        self._docs = list(docs)

    def sort(self, key: str, direction: int):
        self._docs.sort(key=lambda d: d.get(key), reverse=int(direction) < 0)
        return self

    async def to_list(self, length: int | None = None):
        if length is None:
            return list(self._docs)
        return list(self._docs)[:length]


class FakeCollection:
    def __init__(self, docs: list[dict] | None = None):
        self.docs: list[dict] = []
        for doc in docs or []:
            self.seed(doc)

    def seed(self, doc: dict) -> dict:
        stored = dict(doc)
        stored.setdefault("_id", ObjectId())
        self.docs.append(stored)
        return stored

    def find(self, query: dict, projection: dict | None = None, session=None):
        return _Cursor([dict(d) for d in self.docs if _matches(d, query)])

    async def insert_many(self, docs: list[dict], ordered: bool = True, session=None):
        ids = []
        for doc in docs:
            doc.setdefault("_id", ObjectId())
            self.docs.append(dict(doc))
            ids.append(doc["_id"])
        return SimpleNamespace(inserted_ids=ids)

    async def delete_many(self, query: dict, session=None):
        before = len(self.docs)
        self.docs = [d for d in self.docs if not _matches(d, query)]
        return SimpleNamespace(deleted_count=before - len(self.docs))

    async def delete_one(self, query: dict, session=None):
        for idx, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[idx]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def create_index(self, *_args, **_kwargs):
        return "ok"


@pytest.fixture
def ledger_db(monkeypatch):
    import app.database as _db

    fake_db = SimpleNamespace(
        pending_wagers=FakeCollection(),
        settled_entries=FakeCollection(),
        deficits=FakeCollection(),
    )
    monkeypatch.setattr(_db, "db", fake_db, raising=False)
    return fake_db


def wager(team: str, side: str, *, sport: str = "NBA", date: str = "2024-01-01",
          risk: float = 10.0, to_win: float = 8.0, **extra) -> dict:
    doc = {"sport": sport, "team": team, "type": side, "risk": risk, "to_win": to_win, "date": date}
    doc.update(extra)
    return doc
