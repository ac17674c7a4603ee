from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from savings_ledger.core.config import settings
from savings_ledger.db.session import SessionLocal
from savings_ledger.services.bank_data import BankDataRepository
from savings_ledger.services.cache import SqlKeyValueStore


def _iso_now() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


@dataclass
class _Job:
    status: str = "idle"  # idle|running|done|error
    users_loaded: int = 0
    started_at: Optional[str] = None
    updated_at: Optional[str] = None
    message: Optional[str] = None


_lock = threading.Lock()
_job = _Job()


def get_status() -> Dict[str, Any]:
    with _lock:
        return asdict(_job)


def _set_status(**kwargs) -> None:
    with _lock:
        for k, v in kwargs.items():
            setattr(_job, k, v)
        _job.updated_at = _iso_now()


def reset_status() -> None:
    global _job
    with _lock:
        _job = _Job()


def refresh(repo: BankDataRepository) -> Dict[str, Any]:
    _set_status(status="running", started_at=_iso_now(), message=None)
    try:
        users = repo.fetch_users()
    except Exception as e:
        _set_status(status="error", message=str(e))
        raise
    repo.users = users
    _set_status(status="done", users_loaded=len(users))
    return get_status()


def sync_bank_data_once() -> None:
    with SessionLocal() as s:
        repo = BankDataRepository(SqlKeyValueStore(s))
        try:
            refresh(repo)
        finally:
            repo.close()


async def bank_data_sync_loop() -> None:
    if not getattr(settings, "bank_data_sync_enabled", True):
        return

    interval = int(getattr(settings, "bank_data_sync_interval_seconds", 3600) or 3600)
    await asyncio.sleep(3)

    while True:
        try:
            await asyncio.to_thread(sync_bank_data_once)
        except Exception as e:
            logging.exception("bank_data_sync failed", exc_info=e)

        await asyncio.sleep(interval)
