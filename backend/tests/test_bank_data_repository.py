import json
import threading
from datetime import date

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from savings_ledger.core.config import Settings
from savings_ledger.db.base import Base
from savings_ledger.models.cache_entry import CacheEntry
from savings_ledger.schemas.bank_data import InterestRate, Transaction, User, dump_users, load_users
from savings_ledger.services.bank_data import BankDataRepository, bank_data_url
from savings_ledger.services.cache import MemoryKeyValueStore, SqlKeyValueStore
from savings_ledger.services.errors import RemoteFetchFailure

PAYLOAD = {
    "users": [
        {
            "name": "Alice",
            "transactions": [
                {"date": "2026-01-01", "type": "deposit", "amount": 1000.0},
                {"date": "2026-01-15", "type": "withdrawal", "amount": 250.0},
            ],
            "interestRates": [
                {"startDate": "2026-01-01", "endDate": "2026-01-31", "rate": 0.05},
            ],
        },
        {"name": "Bob", "transactions": [], "interestRates": []},
    ]
}


@pytest.fixture(scope="session")
def engine():
    eng = create_engine("sqlite+pysqlite:///:memory:", future=True)
    Base.metadata.create_all(eng)
    return eng


@pytest.fixture()
def session(engine):
    connection = engine.connect()
    trans = connection.begin()
    Session = sessionmaker(bind=connection, autoflush=False, autocommit=False, future=True)
    s = Session()
    try:
        yield s
    finally:
        s.close()
        trans.rollback()
        connection.close()


class _Remote:
    def __init__(self, status_code: int = 200, body=PAYLOAD, error: Exception | None = None):
        self.status_code = status_code
        self.body = body
        self.error = error
        self.calls: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(str(request.url))
        if self.error is not None:
            raise self.error
        if isinstance(self.body, (bytes, str)):
            return httpx.Response(self.status_code, content=self.body)
        return httpx.Response(self.status_code, json=self.body)


def _mk_repo(store, remote: _Remote) -> BankDataRepository:
    client = httpx.Client(transport=httpx.MockTransport(remote))
    return BankDataRepository(store, client=client, settings=Settings())


def _alice() -> User:
    return User(
        name="Alice",
        transactions=(
            Transaction(date="2026-01-01", type="deposit", amount=1000.0),
            Transaction(date="2026-01-15", type="withdrawal", amount=250.0),
        ),
        intervals=(InterestRate(start_date="2026-01-01", end_date="2026-01-31", rate=0.05),),
    )


def test_bank_data_url_joins_base_and_path():
    cfg = Settings(bank_data_base_url="https://example.test/", bank_data_path="/files/state.json")
    assert bank_data_url(cfg) == "https://example.test/files/state.json"


def test_empty_cache_fetches_remote_and_writes_back():
    store = MemoryKeyValueStore()
    remote = _Remote()
    repo = _mk_repo(store, remote)

    users = repo.load_data()

    assert [u.name for u in users] == ["Alice", "Bob"]
    assert remote.calls == ["https://www.dankolab.org/files/dbstatefile.json"]
    assert load_users(store.get("users")) == users
    assert repo.users == users


def test_populated_cache_skips_remote():
    store = MemoryKeyValueStore({"users": dump_users([_alice()])})
    remote = _Remote()
    repo = _mk_repo(store, remote)

    assert repo.load_data() == [_alice()]
    assert remote.calls == []


def test_empty_cached_list_counts_as_miss():
    store = MemoryKeyValueStore({"users": b"[]"})
    remote = _Remote()
    repo = _mk_repo(store, remote)

    assert len(repo.load_data()) == 2
    assert len(remote.calls) == 1


def test_unreadable_cache_falls_back_to_remote():
    store = MemoryKeyValueStore({"users": b"{not json"})
    remote = _Remote()
    repo = _mk_repo(store, remote)

    assert repo.get_cached_users() == []
    assert len(repo.load_data()) == 2
    assert len(remote.calls) == 1


@pytest.mark.parametrize(
    "remote",
    [
        _Remote(status_code=500, body={"error": "boom"}),
        _Remote(body=b""),
        _Remote(body=b"<html>nope</html>"),
        _Remote(error=httpx.ConnectError("unreachable")),
    ],
)
def test_fetch_failures_surface_as_remote_fetch_failure(remote):
    store = MemoryKeyValueStore()
    repo = _mk_repo(store, remote)

    with pytest.raises(RemoteFetchFailure):
        repo.fetch_users()

    assert repo.load_data() == []
    assert store.get("users") is None


def test_get_user_by_name_loads_on_demand():
    repo = _mk_repo(MemoryKeyValueStore(), _Remote())

    assert repo.get_user("Bob").name == "Bob"
    assert repo.get_user("Mallory") is None


def test_round_trip_preserves_wire_keys():
    raw = dump_users([_alice()])
    data = json.loads(raw)

    assert "interestRates" in data[0]
    assert data[0]["interestRates"][0]["startDate"] == "2026-01-01"
    assert load_users(raw) == [_alice()]


def test_sql_store_round_trip_gives_identical_series(session):
    store = SqlKeyValueStore(session)
    repo = _mk_repo(store, _Remote(error=httpx.ConnectError("offline")))
    original = [_alice()]

    repo.save_users(original)
    restored = repo.get_cached_users()

    assert restored == original
    today = date(2026, 2, 10)
    assert repo.get_account_values_series(restored[0], today=today) == repo.get_account_values_series(
        original[0], today=today
    )


def test_sql_store_overwrites_existing_key(session):
    store = SqlKeyValueStore(session)

    assert store.get("users") is None
    store.set("users", b"one")
    store.set("users", b"two")

    assert store.get("users") == b"two"
    assert session.query(CacheEntry).count() == 1


def test_repository_delegates_current_rate():
    repo = _mk_repo(MemoryKeyValueStore(), _Remote())
    assert repo.get_current_interest_rate(_alice(), today=date(2026, 2, 1)) == 0.05
    assert repo.get_current_interest_rate(_alice(), today=date(2026, 1, 30)) == 0.0


def test_sql_store_concurrent_first_writes_do_not_collide(tmp_path):
    eng = create_engine(f"sqlite+pysqlite:///{tmp_path / 'cache.db'}", future=True)
    Base.metadata.create_all(eng)
    Session = sessionmaker(bind=eng, autoflush=False, autocommit=False, future=True)

    barrier = threading.Barrier(2, timeout=10)
    errors: list[str] = []

    def _writer(payload: bytes):
        with Session() as s:
            store = SqlKeyValueStore(s)
            assert store.get("users") is None
            barrier.wait()
            try:
                store.set("users", payload)
            except Exception as e:
                errors.append(type(e).__name__)

    threads = [threading.Thread(target=_writer, args=(p,)) for p in (b"first", b"second")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    with Session() as s:
        assert s.query(CacheEntry).count() == 1
        assert SqlKeyValueStore(s).get("users") in (b"first", b"second")
    eng.dispose()


def test_sql_store_set_after_another_session_inserted(tmp_path):
    eng = create_engine(f"sqlite+pysqlite:///{tmp_path / 'cache.db'}", future=True)
    Base.metadata.create_all(eng)
    Session = sessionmaker(bind=eng, autoflush=False, autocommit=False, future=True)

    with Session() as a, Session() as b:
        late = SqlKeyValueStore(b)
        assert late.get("users") is None

        SqlKeyValueStore(a).set("users", b"from-a")
        late.set("users", b"from-b")

        assert SqlKeyValueStore(a).get("users") == b"from-b"
    eng.dispose()
