"""
Number Feed Client
==================
Fetches number batches from the third-party evaluation service.

* Every request carries the bearer token plus the client credentials.
* A 401 means the token expired: refresh it once and retry the request once.
* Anything else that goes wrong (timeouts, network errors, bad payloads) is
  logged and turned into an empty batch so callers never see an exception.
"""
from __future__ import annotations

import asyncio
import logging
import math
from typing import Any, Dict, List, Optional

import aiohttp

import config

logger = logging.getLogger(__name__)


class TokenExpiredError(Exception):
    """Upstream rejected the access token (HTTP 401)."""


class NumberFeedClient:
    def __init__(
        self,
        auth_url: str = config.AUTH_URL,
        client_id: str = config.CLIENT_ID,
        client_secret: str = config.CLIENT_SECRET,
        access_token: Optional[str] = config.ACCESS_TOKEN,
        timeout_ms: int = config.NUMBER_API_TIMEOUT_MS,
    ):
        self.auth_url = auth_url
        self.client_id = client_id
        self.client_secret = client_secret
        self.access_token = access_token
        self.timeout = aiohttp.ClientTimeout(total=timeout_ms / 1000)
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def start(self) -> None:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession()

    async def close(self) -> None:
        if self.session:
            await self.session.close()
            self.session = None

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "clientID": self.client_id,
            "clientSecret": self.client_secret,
        }

    async def refresh_access_token(self) -> Optional[str]:
        """Request a new access token; returns None when the refresh fails."""
        await self.start()
        payload = {"clientID": self.client_id, "clientSecret": self.client_secret}
        try:
            async with self.session.post(self.auth_url, json=payload, timeout=self.timeout) as response:
                response.raise_for_status()
                data = await response.json()
            token = data.get("access_token") if isinstance(data, dict) else None
            if not token:
                logger.error("❌ Failed to refresh token: response has no access_token")
                return None
            self.access_token = token
            logger.info("✅ Access token refreshed")
            return token
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"❌ Failed to refresh token: {e}")
            return None

    async def _try_fetch(self, url: str) -> List[Any]:
        async with self.session.get(url, headers=self._headers(), timeout=self.timeout) as response:
            if response.status == 401:
                raise TokenExpiredError(url)
            response.raise_for_status()
            data = await response.json()
        numbers = data.get("numbers") if isinstance(data, dict) else None
        return _clean_numbers(numbers or [])

    async def fetch_numbers(self, url: str) -> List[Any]:
        """Fetch one batch from url, or [] if it cannot be obtained."""
        await self.start()
        try:
            try:
                return await self._try_fetch(url)
            except TokenExpiredError:
                logger.warning("⚠️ Access token expired. Refreshing...")
                if await self.refresh_access_token() is None:
                    return []
                return await self._try_fetch(url)
        except TokenExpiredError:
            logger.error(f"❌ Error fetching numbers from {url}: token rejected after refresh")
            return []
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"❌ Error fetching numbers from {url}: {e!r}")
            return []


def _clean_numbers(values: List[Any]) -> List[Any]:
    if not isinstance(values, list):
        return []
    cleaned = []
    for value in values:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if isinstance(value, float) and not math.isfinite(value):
            continue
        cleaned.append(value)
    dropped = len(values) - len(cleaned)
    if dropped:
        logger.warning(f"Dropped {dropped} non-numeric values from upstream batch")
    return cleaned
