"""HTTP client that delivers activity reports to the collection endpoint."""

import logging

import httpx

log = logging.getLogger("pulse.client")


class ReportError(Exception):
    """A report could not be delivered."""


class ReportClient:
    def __init__(self, password: str, timeout: float | None = None,
                 transport: httpx.AsyncBaseTransport | None = None):
        self.password = password
        kwargs = {}
        if timeout is not None:
            kwargs["timeout"] = timeout
        if transport is not None:
            kwargs["transport"] = transport
        self._client = httpx.AsyncClient(**kwargs)

    async def put(self, url: str, payload: dict):
        """PUT the payload as JSON with the credential embedded. Raises ReportError."""
        if not url:
            raise ReportError("no endpoint URL configured")

        body = {"password": self.password, **payload}
        try:
            r = await self._client.put(url, json=body)
            r.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ReportError(f"PUT {url} failed: {e}") from e
        log.debug(f"PUT {url} -> {r.status_code}")

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()
