"""
backend/app/models/common.py

Purpose:
    Shared Pydantic V2 model base for API payloads. The wire format is
    camelCase (``toWin``, ``gameId``, ``settledAt``) while Python attributes and
    stored MongoDB documents stay snake_case.

Dependencies:
    - pydantic
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts both camelCase aliases and snake_case names; serializes camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def doc_id(doc: dict) -> str:
    """Stringify a Mongo ``_id`` for API responses."""
    raw = doc.get("_id")
    return str(raw) if raw is not None else ""
