"""Investment records as seen by the projection engine, plus an in-memory store."""

import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Hashable, Mapping

from invest_projection.config import DEFAULT_ANALYSIS_OPTIONS, DEFAULT_ANALYSIS_TYPE
from invest_projection.errors import InvestmentNotFound


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(when: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if when.tzinfo is None:
        return when.replace(tzinfo=timezone.utc)
    return when


@dataclass(frozen=True)
class InvestmentRecord:
    investment_id: Hashable
    base_price: Decimal
    last_modified: datetime = field(default_factory=utcnow)
    analysis_type: str = DEFAULT_ANALYSIS_TYPE
    analysis_options: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "last_modified", as_utc(self.last_modified))

    def effective_options(self, overrides: Mapping[str, str] | None = None) -> dict[str, str]:
        """Defaults, then the investment's stored options, then ``overrides``."""
        options = dict(DEFAULT_ANALYSIS_OPTIONS)
        options.update(self.analysis_options)
        if overrides:
            options.update(overrides)
        return options


class InMemoryInvestmentStore:
    """Thread-safe dict of investment records keyed by id."""

    def __init__(self, records=()):
        self._records: dict[Hashable, InvestmentRecord] = {}
        self._lock = threading.Lock()
        for record in records:
            self.add(record)

    def add(self, record: InvestmentRecord) -> None:
        with self._lock:
            self._records[record.investment_id] = record

    def get(self, investment_id: Hashable) -> InvestmentRecord | None:
        with self._lock:
            return self._records.get(investment_id)

    def touch(self, investment_id: Hashable, when: datetime | None = None, **changes) -> InvestmentRecord:
        """Apply ``changes`` and bump ``last_modified``."""
        with self._lock:
            record = self._records.get(investment_id)
            if record is None:
                raise InvestmentNotFound(investment_id)
            record = replace(record, last_modified=when or utcnow(), **changes)
            self._records[investment_id] = record
            return record

    def __len__(self):
        return len(self._records)
