import os
from pathlib import Path
from savings_ledger.db.session import SessionLocal
from savings_ledger.schemas.bank_data import BankData
from savings_ledger.services.bank_data import BankDataRepository
from savings_ledger.services.cache import SqlKeyValueStore

def seed_from_file(repo: BankDataRepository, path: Path) -> int:
    if repo.get_cached_users():
        return 0
    data = BankData.model_validate_json(path.read_bytes())
    repo.save_users(data.users)
    return len(data.users)

def main():
    path = Path(os.environ.get("SEED_BANK_DATA_FILE", "bank_data.json"))

    db = SessionLocal()
    try:
        seed_from_file(BankDataRepository(SqlKeyValueStore(db)), path)
    finally:
        db.close()

if __name__ == "__main__":
    main()
