"""SSL Labs analyze client.

Starts a fresh assessment for a host, then polls the cached result at a fixed
interval until it is READY or ERROR, or the attempt budget runs out.
"""

from __future__ import annotations

import asyncio
import json
from typing import Optional

import httpx

from ..models.scan import SslScanResult
from ..utils.sanitize import sanitize_error


class SslLabsError(Exception):
    """The SSL Labs API failed or reported an analysis error."""


class SslLabsTimeout(SslLabsError):
    """The analysis did not finish within the polling budget."""


class SslLabsClient:
    name = "ssllabs"

    def __init__(
        self,
        config: Optional[dict] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        config = config or {}
        self.endpoint = config.get("endpoint", "https://api.ssllabs.com/api/v3").rstrip("/")
        self.poll_interval = config.get("poll_interval_seconds", 10)
        self.max_attempts = config.get("max_attempts", 30)
        self.timeout = config.get("timeout_seconds", 30)
        self.transport = transport

    def _params(self, host: str, start_new: bool) -> dict:
        params = {"host": host, "publish": "off", "all": "done"}
        if start_new:
            params["startNew"] = "on"
        else:
            params["fromCache"] = "on"
        return params

    async def _poll(self, client: httpx.AsyncClient, host: str) -> dict:
        response = await client.get(f"{self.endpoint}/analyze", params=self._params(host, start_new=False))
        if response.is_error:
            raise SslLabsError(
                f"The SSL Labs API returned an error: {response.status_code}. Please try again later."
            )
        try:
            return response.json()
        except json.JSONDecodeError as e:
            raise SslLabsError("Received an invalid (non-JSON) response from the SSL Labs server.") from e

    async def analyze(self, host: str) -> SslScanResult:
        """Run a full assessment of ``host`` and return the graded result.

        Raises:
            SslLabsError: HTTP error, non-JSON body or ERROR status.
            SslLabsTimeout: still running after ``max_attempts`` polls.
        """
        if not host:
            raise ValueError("Hostname is required")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                # Only kicks off the assessment; the body is not needed
                await client.get(f"{self.endpoint}/analyze", params=self._params(host, start_new=True))

                for _ in range(self.max_attempts):
                    await asyncio.sleep(self.poll_interval)
                    data = await self._poll(client, host)

                    status = data.get("status")
                    if status == "READY":
                        return SslScanResult.from_api(data)
                    if status == "ERROR":
                        message = data.get("statusMessage") or "Unknown error"
                        raise SslLabsError(f"Analysis failed: {sanitize_error(message)}")
            except httpx.HTTPError as e:
                raise SslLabsError(sanitize_error(str(e))) from e

        total = self.poll_interval * self.max_attempts
        raise SslLabsTimeout(f"Analysis timed out after {total} seconds.")
