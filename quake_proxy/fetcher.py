"""HTTP access to the Kandilli bulletin page."""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)

KANDILLI_URL = "http://www.koeri.boun.edu.tr/scripts/lst2.asp"
DEFAULT_USER_AGENT = "KandilliQuakeProxy/0.1"
DEFAULT_ACCEPT_HEADER = "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8"


class UpstreamFetchError(RuntimeError):
    """Raised when the bulletin cannot be retrieved."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BulletinFetcher:
    """Async client issuing a single GET per call for the bulletin bytes."""

    def __init__(
        self,
        *,
        url: str = KANDILLI_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        connect_timeout: float = 10.0,
        read_timeout: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url

        timeout = httpx.Timeout(
            connect=connect_timeout,
            read=read_timeout,
            write=read_timeout,
            pool=connect_timeout,
        )
        self._client = httpx.AsyncClient(
            headers={
                "User-Agent": user_agent,
                "Accept": DEFAULT_ACCEPT_HEADER,
                "Accept-Language": "tr-TR,tr;q=0.9,en;q=0.8",
            },
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    async def __aenter__(self) -> "BulletinFetcher":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch(self) -> bytes:
        """Return the raw bulletin body; the bytes are left undecoded."""

        try:
            response = await self._client.get(self.url)
        except httpx.RequestError as exc:
            logger.debug("Request error for %s: %s", self.url, exc)
            raise UpstreamFetchError(f"Request to {self.url} failed: {exc}") from exc

        if not response.is_success:
            raise UpstreamFetchError(
                f"Bulletin returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response.content
