"""Bot OpenAPI transport over HTTP (httpx)."""

from __future__ import annotations

import time
from typing import Any

import httpx

from qqcodec.config import BotConfig
from qqcodec.core.encoder import Encoder
from qqcodec.transports.base import Transport, TransportError
from qqcodec.utils.logging import get_logger

log = get_logger(__name__)

# Refresh the access token this many seconds before it expires
_TOKEN_REFRESH_MARGIN = 60


class HttpTransport(Transport):
    def __init__(
        self,
        config: BotConfig,
        encoder: Encoder | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(encoder)
        self._config = config
        self._http_transport = http_transport
        self._http_client: httpx.AsyncClient | None = None
        self._access_token = ""
        self._token_expires_at = 0.0

    @property
    def platform_name(self) -> str:
        return "qq"

    async def start(self) -> None:
        self._http_client = httpx.AsyncClient(
            base_url=self._config.base_url.rstrip("/"),
            timeout=self._config.timeout,
            transport=self._http_transport,
        )
        log.info("http_transport_started", base_url=self._config.base_url)

    async def stop(self) -> None:
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None
        log.info("http_transport_stopped")

    async def get_access_token(self) -> str:
        """Return a cached app access token, fetching a new one near expiry."""
        if self._access_token and time.monotonic() < self._token_expires_at:
            return self._access_token

        assert self._http_client is not None
        resp = await self._http_client.post(
            self._config.token_url,
            json={"appId": self._config.app_id, "clientSecret": self._config.secret},
        )
        if resp.status_code != 200:
            raise TransportError(resp.status_code, resp.text, self._config.token_url)

        data = resp.json()
        self._access_token = data["access_token"]
        expires_in = int(data.get("expires_in", 0))
        self._token_expires_at = time.monotonic() + max(expires_in - _TOKEN_REFRESH_MARGIN, 0)
        log.info("access_token_refreshed", expires_in=expires_in)
        return self._access_token

    async def request(
        self, method: str, path: str, payload: dict[str, Any] | None = None
    ) -> Any:
        if self._http_client is None:
            raise RuntimeError("HttpTransport.start() must be called before sending")

        token = await self.get_access_token()
        resp = await self._http_client.request(
            method,
            path,
            json=payload,
            headers={
                "Authorization": f"QQBot {token}",
                "X-Union-Appid": self._config.app_id,
            },
        )
        if resp.status_code not in (200, 201, 202, 204):
            log.error(
                "openapi_request_error",
                method=method,
                path=path,
                status=resp.status_code,
                body=resp.text[:200],
            )
            raise TransportError(resp.status_code, resp.text, path)
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()
