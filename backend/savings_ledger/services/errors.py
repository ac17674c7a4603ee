from __future__ import annotations


class LedgerError(Exception):
    pass


class MalformedDate(LedgerError, ValueError):
    def __init__(self, value: str):
        super().__init__(f"malformed_date: {value!r}")
        self.value = value


class EmptyLedger(LedgerError):
    def __init__(self, name: str | None = None):
        msg = "empty_ledger" if name is None else f"empty_ledger: {name}"
        super().__init__(msg)
        self.name = name


class RemoteFetchFailure(LedgerError):
    pass


class CacheReadFailure(LedgerError):
    pass
