import logging
from typing import Any, Dict, Optional

import httpx

from ....core.exceptions import RemoteCallError


class TradeSimulationHttpClient:
    """
    Thin async HTTP wrapper around the trade-simulation endpoint.

    POST {url}
    body:
    {
      "Signal Message": "buy",
      "Token Mentioned": str,
      "TP1": float|null, "TP2": float|null, "SL": float|null,
      "Current Price": float|null,
      "Max Exit Time": ISO-8601,
      "username": str,
      "safeAddress": str
    }

    This client does *no* simulation logic, only raw HTTP. Network errors,
    timeouts, non-2xx answers and non-JSON bodies raise RemoteCallError.
    """

    def __init__(
        self,
        url: str,
        timeout_sec: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._url = url
        self._timeout = timeout_sec
        self._transport = transport
        self._logger = logging.getLogger(self.__class__.__name__)

    async def simulate(self, payload: Dict[str, Any]) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                r = await client.post(self._url, json=payload)
        except httpx.HTTPError as exc:
            self._logger.warning("simulate error for %s: %s", self._url, exc)
            raise RemoteCallError(f"Simulation service unreachable: {exc}") from exc

        if not r.is_success:
            self._logger.warning("simulate non-2xx %s: %s %s", self._url, r.status_code, r.text[:300])
            raise RemoteCallError(
                f"Simulation service returned HTTP {r.status_code}",
                status_code=r.status_code,
                body=r.text[:1000],
            )

        try:
            return r.json()
        except ValueError as exc:
            self._logger.warning("simulate invalid JSON from %s: %s", self._url, r.text[:300])
            raise RemoteCallError(
                "Simulation service returned an invalid JSON body",
                status_code=r.status_code,
                body=r.text[:1000],
            ) from exc
