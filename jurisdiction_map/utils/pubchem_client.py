"""Client for the upstream chemistry API that serves PubChem envelopes."""

from typing import Any, Optional

import httpx
import structlog

from .errors import UpstreamFetchFailure

logger = structlog.get_logger(__name__)


class PubChemClient:
    """Fetches compound envelopes (``{pubchemResults: {...}}``) by compound id."""

    def __init__(self, base_url: str, timeout: float = 10.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def fetch_compound(self, cid: int) -> Any:
        """Fetch and decode the envelope for one compound."""
        url = f"{self.base_url}/{cid}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url, headers={"Accept": "application/json"})
                response.raise_for_status()
                data = response.json()

        except httpx.TimeoutException as e:
            logger.error("Upstream fetch timed out", url=url, timeout=self.timeout)
            raise UpstreamFetchFailure(f"Upstream API timed out after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            logger.error("Upstream fetch failed", url=url, status_code=e.response.status_code)
            raise UpstreamFetchFailure(
                f"Upstream API returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error("Upstream fetch failed", url=url, error=str(e))
            raise UpstreamFetchFailure(f"Upstream API request failed: {e}") from e
        except ValueError as e:
            logger.error("Upstream returned invalid JSON", url=url, error=str(e))
            raise UpstreamFetchFailure("Upstream API returned a non-JSON body") from e

        logger.info("Fetched compound from upstream", cid=cid, url=url)
        return data
