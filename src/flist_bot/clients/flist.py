"""
F-List JSON API client.

Endpoints used:

- ``/json/getApiTicket.php``: exchange account/password for a ticket
- ``/json/api/kink-list.php``: global kink taxonomy
- ``/json/api/character-data.php``: one character's profile, kinks included

Every failure (transport error, non-200 status, undecodable body, or an
``error`` field in the payload) surfaces as :class:`UpstreamError`.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict
from urllib.parse import unquote

import aiohttp

from ..errors import UpstreamError
from ..kinks import Catalog, PreferenceCatalog, Profile

logger = logging.getLogger(__name__)

_PROFILE_URL_RE = re.compile(r"^https?://(?:www\.)?f-list\.net/c/([^/?#]+)/?", re.IGNORECASE)


def canonicalize_identifier(raw: str) -> str:
    """Reduce a ``.../c/<name>`` profile URL to ``<name>``; pass names through."""
    raw = str(raw or "").strip()
    match = _PROFILE_URL_RE.match(raw)
    if match:
        return unquote(match.group(1)).strip()
    return raw


class FListClient:
    """Async client bound to one account; shares its ticket via ``PreferenceCatalog``."""

    def __init__(
        self,
        account: str,
        password: str,
        catalog: PreferenceCatalog,
        *,
        api_url: str = "https://www.f-list.net",
        user_agent: str = "FListBot/request",
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.account = account
        self.password = password
        self.catalog = catalog
        self.api_url = api_url.rstrip("/")
        self.user_agent = user_agent
        self._session = session

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(headers={"User-Agent": self.user_agent})
        return self._session

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _request(self, method: str, path: str, form: Dict[str, Any] | None = None) -> Dict[str, Any]:
        url = f"{self.api_url}{path}"
        session = self._get_session()
        try:
            async with session.request(method, url, data=form) as resp:
                if resp.status != 200:
                    raise UpstreamError(f"{path} returned status {resp.status}")
                body = await resp.json(content_type=None)
        except aiohttp.ClientError as exc:
            raise UpstreamError(f"{path} request failed: {exc}") from exc
        except ValueError as exc:
            raise UpstreamError(f"{path} returned invalid JSON: {exc}") from exc

        if not isinstance(body, dict):
            raise UpstreamError(f"{path} returned unexpected payload")
        if body.get("error"):
            raise UpstreamError(f"{path} reported: {body['error']}")
        return body

    async def renew_ticket(self) -> str:
        """Fetch a fresh API ticket and publish it on the catalog holder."""
        form = {
            "account": self.account,
            "password": self.password,
            # only the ticket is needed
            "no_characters": "true",
            "no_bookmarks": "true",
            "no_friends": "true",
        }
        body = await self._request("POST", "/json/getApiTicket.php", form)
        ticket = body.get("ticket")
        if not ticket:
            raise UpstreamError("Ticket response did not include a ticket")
        self.catalog.set_ticket(str(ticket))
        logger.info("F-List API ticket renewed")
        return self.catalog.ticket

    async def fetch_kink_list(self) -> Dict[str, Any]:
        body = await self._request("GET", "/json/api/kink-list.php")
        kinks = body.get("kinks")
        if kinks is None:
            raise UpstreamError("Kink list response did not include kinks")
        return kinks

    async def refresh_catalog(self) -> int:
        """Reload the global kink list and swap it in; return the kink count."""
        logger.info("Retrieving global kink list...")
        catalog = Catalog.load(await self.fetch_kink_list())
        self.catalog.replace(catalog)
        return len(catalog)

    async def fetch_profile(self, identifier: str) -> Profile:
        """Fetch a character by name or profile URL."""
        name = canonicalize_identifier(identifier)
        if not name:
            raise UpstreamError("Empty character name")
        if not self.catalog.ticket:
            await self.renew_ticket()

        form = {"account": self.account, "ticket": self.catalog.ticket, "name": name}
        body = await self._request("POST", "/json/api/character-data.php", form)
        if "kinks" not in body:
            raise UpstreamError(f"Character data for {name!r} did not include kinks")
        return Profile.from_raw(name, body)


__all__ = ["FListClient", "canonicalize_identifier"]
