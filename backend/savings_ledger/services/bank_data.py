from __future__ import annotations

import logging
from datetime import date

import httpx
from pydantic import ValidationError

from savings_ledger.core.config import Settings, settings as default_settings
from savings_ledger.schemas.bank_data import BankData, User, dump_users, load_users
from savings_ledger.services.cache import KeyValueStore
from savings_ledger.services.errors import CacheReadFailure, RemoteFetchFailure
from savings_ledger.services.ledger import (
    LedgerObserver,
    LoggingObserver,
    Series,
    account_values_series,
    current_interest_rate,
)
from savings_ledger.utils.timezone import today_ledger

logger = logging.getLogger(__name__)


def bank_data_url(cfg: Settings) -> str:
    return cfg.bank_data_base_url.rstrip("/") + "/" + cfg.bank_data_path.lstrip("/")


def fetch_bank_data(client: httpx.Client, url: str) -> BankData:
    try:
        r = client.get(url)
    except httpx.HTTPError as e:
        raise RemoteFetchFailure(f"request_failed: {e}") from e

    if r.status_code < 200 or r.status_code >= 300:
        raise RemoteFetchFailure(f"request_failed: status {r.status_code}")
    if not r.content:
        raise RemoteFetchFailure("invalid_response: empty body")

    try:
        return BankData.model_validate_json(r.content)
    except ValidationError as e:
        raise RemoteFetchFailure("invalid_response") from e


class BankDataRepository:
    def __init__(
        self,
        store: KeyValueStore,
        client: httpx.Client | None = None,
        settings: Settings | None = None,
    ):
        self.store = store
        self.settings = settings or default_settings
        self._client = client
        self.users: list[User] = []

    def _http(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.settings.bank_data_timeout_seconds,
                follow_redirects=True,
            )
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def _read_cache(self) -> list[User]:
        raw = self.store.get(self.settings.cache_key)
        if not raw:
            return []
        try:
            return load_users(raw)
        except ValidationError as e:
            raise CacheReadFailure(f"cache_decode_failed: {self.settings.cache_key}") from e

    def get_cached_users(self) -> list[User]:
        try:
            return self._read_cache()
        except CacheReadFailure as e:
            logger.warning("ignoring unreadable cache entry (%s)", e)
            return []

    def save_users(self, users: list[User]) -> None:
        self.store.set(self.settings.cache_key, dump_users(users))

    def fetch_users(self) -> list[User]:
        url = bank_data_url(self.settings)
        data = fetch_bank_data(self._http(), url)
        self.save_users(data.users)
        logger.info("fetched and cached %d users from %s", len(data.users), url)
        return data.users

    def load_data(self) -> list[User]:
        cached = self.get_cached_users()
        if cached:
            logger.debug("using %d cached users", len(cached))
            self.users = cached
            return self.users

        try:
            self.users = self.fetch_users()
        except RemoteFetchFailure as e:
            logger.warning("bank data fetch failed: %s", e)
            self.users = []
        return self.users

    def get_user(self, name: str) -> User | None:
        if not self.users:
            self.load_data()
        for u in self.users:
            if u.name == name:
                return u
        return None

    def get_account_values_series(
        self,
        user: User,
        today: date | None = None,
        observer: LedgerObserver | None = None,
    ) -> Series:
        return account_values_series(
            user,
            today or today_ledger(),
            observer=observer or LoggingObserver(user.name),
        )

    def get_current_interest_rate(self, user: User, today: date | None = None) -> float:
        rate = current_interest_rate(user.intervals, today or today_ledger())
        logger.debug("current interest rate for %s: %s", user.name, rate)
        return rate
