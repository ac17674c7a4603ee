import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("BANK_DATA_SYNC_ENABLED", "false")
os.environ.setdefault("TIMEZONE", "UTC")
