from __future__ import annotations

from pydantic import BaseModel
from typing import Literal, Optional


class SyncStatusOut(BaseModel):
    status: Literal["idle", "running", "done", "error"] = "idle"
    users_loaded: int = 0
    started_at: Optional[str] = None
    updated_at: Optional[str] = None
    message: Optional[str] = None
