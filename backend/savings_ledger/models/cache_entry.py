from sqlalchemy import String, DateTime, LargeBinary, func
from sqlalchemy.orm import Mapped, mapped_column
from savings_ledger.db.base import Base

class CacheEntry(Base):
    __tablename__ = "cache_entries"
    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[bytes] = mapped_column(LargeBinary)
    updated_at: Mapped[DateTime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())
