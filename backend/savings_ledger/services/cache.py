from __future__ import annotations

from typing import Protocol

from sqlalchemy import select, func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from savings_ledger.models.cache_entry import CacheEntry


class KeyValueStore(Protocol):
    def get(self, key: str) -> bytes | None: ...

    def set(self, key: str, value: bytes) -> None: ...


class MemoryKeyValueStore:
    def __init__(self, initial: dict[str, bytes] | None = None):
        self._data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)


class SqlKeyValueStore:
    def __init__(self, s: Session):
        self.s = s

    def _insert(self):
        if self.s.get_bind().dialect.name == "sqlite":
            return sqlite_insert(CacheEntry)
        return pg_insert(CacheEntry)

    def get(self, key: str) -> bytes | None:
        row = self.s.execute(select(CacheEntry).where(CacheEntry.key == key)).scalar_one_or_none()
        if row is None:
            return None
        return bytes(row.value)

    def set(self, key: str, value: bytes) -> None:
        ins = self._insert().values(key=key, value=bytes(value))
        stmt = ins.on_conflict_do_update(
            index_elements=["key"],
            set_={"value": ins.excluded.value, "updated_at": func.now()},
        )
        self.s.execute(stmt)
        self.s.commit()
