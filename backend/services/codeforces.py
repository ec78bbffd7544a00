"""
Codeforces API client

Thin async wrapper over the public Codeforces API. Every call unwraps the
``{"status": ..., "result": ...}`` envelope and raises a ``CodeforcesError``
subclass when the request cannot be turned into a result.
"""

import httpx
import logging
from typing import Any, Dict, List, Optional

from cf_analytics.models import UserProfile

from config import CF_API_BASE, CF_TIMEOUT, SUBMISSION_FETCH_COUNT

logger = logging.getLogger(__name__)


# ── Errors ──────────────────────────────────────────────────────────────

class CodeforcesError(Exception):
    """Base class for every failed Codeforces request."""

    def __init__(self, method: str, message: str):
        super().__init__(f"{method}: {message}")
        self.method = method


class CodeforcesTransportError(CodeforcesError):
    """Network failure, timeout or non-2xx response without an API verdict."""


class CodeforcesResponseError(CodeforcesError):
    """Body was not JSON or did not have the expected shape."""


class CodeforcesAPIError(CodeforcesError):
    """The API answered with ``status != "OK"``."""

    def __init__(self, method: str, comment: str):
        super().__init__(method, comment or "request failed")
        self.comment = comment


# ── Client ──────────────────────────────────────────────────────────────

class CodeforcesClient:
    """
    Usage:
        client = CodeforcesClient()
        profile = await client.fetch_user_info("tourist")
        submissions = await client.fetch_user_submissions("tourist")

    ``transport`` is handed to ``httpx.AsyncClient``; tests pass an
    ``httpx.MockTransport``.
    """

    def __init__(
        self,
        base_url: str = CF_API_BASE,
        timeout: float = CF_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def _call(self, method: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}/{method}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.get(url, params=params)
        except httpx.HTTPError as e:
            raise CodeforcesTransportError(method, f"{type(e).__name__}: {e}") from e

        try:
            data = resp.json()
        except ValueError:
            data = None

        # Codeforces reports bad handles as HTTP 400 with a FAILED envelope
        if isinstance(data, dict) and data.get("status") == "FAILED":
            raise CodeforcesAPIError(method, data.get("comment", ""))
        if resp.status_code != 200:
            raise CodeforcesTransportError(method, f"HTTP {resp.status_code}")
        if not isinstance(data, dict) or "status" not in data:
            raise CodeforcesResponseError(method, "response is not an API envelope")
        if data["status"] != "OK":
            raise CodeforcesAPIError(method, data.get("comment", ""))
        if "result" not in data:
            raise CodeforcesResponseError(method, "missing result")

        logger.debug(f"{method} {params or ''} -> OK")
        return data["result"]

    async def _call_list(self, method: str, params: Optional[Dict[str, Any]] = None) -> List[Any]:
        result = await self._call(method, params)
        if not isinstance(result, list):
            raise CodeforcesResponseError(method, "expected a list result")
        return result

    async def fetch_user_info(self, handle: str) -> UserProfile:
        """Profile of a single handle."""
        result = await self._call_list("user.info", {"handles": handle})
        if not result or not isinstance(result[0], dict):
            raise CodeforcesResponseError("user.info", f"no profile for {handle}")
        return UserProfile.from_api(result[0])

    async def fetch_user_submissions(self, handle: str, count: int = SUBMISSION_FETCH_COUNT) -> List[Dict]:
        """Newest ``count`` submissions of ``handle``, newest first."""
        return await self._call_list("user.status", {"handle": handle, "from": 1, "count": count})

    async def fetch_user_rating(self, handle: str) -> List[Dict]:
        """Rating change history of ``handle`` as served by the API."""
        return await self._call_list("user.rating", {"handle": handle})

    async def fetch_contests(self) -> List[Dict]:
        """Contest catalog (gym contests excluded)."""
        return await self._call_list("contest.list", {"gym": "false"})

    async def fetch_problemset(self) -> List[Dict]:
        """Problem catalog; the API nests it under ``result.problems``."""
        result = await self._call("problemset.problems")
        problems = result.get("problems") if isinstance(result, dict) else None
        if not isinstance(problems, list):
            raise CodeforcesResponseError("problemset.problems", "missing problems list")
        return problems
