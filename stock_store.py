"""In-memory stock price history used by the stock API server.

Each entry is a dict ``{"price": float, "lastUpdatedAt": "<ISO-8601 UTC>"}``,
kept in chronological order per ticker. Ticker lookups are case-insensitive.
"""
from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Dict, List, Optional

DEFAULT_PRICE_HISTORY: Dict[str, List[Dict]] = {
    "NVDA": [
        {"price": 231.95, "lastUpdatedAt": "2025-05-08T04:26:27Z"},
        {"price": 124.95, "lastUpdatedAt": "2025-05-08T04:30:23Z"},
        {"price": 459.09, "lastUpdatedAt": "2025-05-08T04:39:14Z"},
        {"price": 998.27, "lastUpdatedAt": "2025-05-08T04:50:03Z"},
    ],
    "PYPL": [
        {"price": 680.59, "lastUpdatedAt": "2025-05-09T02:04:27Z"},
        {"price": 368.12, "lastUpdatedAt": "2025-05-09T02:10:27Z"},
        {"price": 457.09, "lastUpdatedAt": "2025-05-09T02:12:27Z"},
    ],
}


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; a trailing 'Z' means UTC."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    ts = datetime.fromisoformat(value)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


class StockPriceStore:
    def __init__(self, history: Optional[Dict[str, List[Dict]]] = None):
        source = DEFAULT_PRICE_HISTORY if history is None else history
        self._history = {ticker.upper(): copy.deepcopy(entries) for ticker, entries in source.items()}

    def tickers(self) -> List[str]:
        return sorted(self._history)

    def history(self, ticker: str) -> Optional[List[Dict]]:
        entries = self._history.get(ticker.upper())
        return None if entries is None else list(entries)

    def latest(self, ticker: str) -> Optional[Dict]:
        entries = self._history.get(ticker.upper())
        return entries[-1] if entries else None

    def within_minutes(self, ticker: str, minutes: float, now: Optional[datetime] = None) -> List[Dict]:
        """Entries last updated at most `minutes` before `now`."""
        now = now or datetime.now(timezone.utc)
        result = []
        for entry in self._history.get(ticker.upper(), []):
            age_minutes = (now - parse_timestamp(entry["lastUpdatedAt"])).total_seconds() / 60
            if age_minutes <= minutes:
                result.append(entry)
        return result
