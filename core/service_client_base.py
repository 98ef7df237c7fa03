"""
Base Service Client for Internal Microservice Communication

Base class for the clients user_service and order_service use to call
each other's public API.
"""

import httpx
import logging
from typing import Optional, Dict, Any
from abc import ABC
from urllib.parse import quote

from .request_context import RequestContext

logger = logging.getLogger(__name__)


def path_segment(value: str) -> str:
    """
    Percent-encode a value as exactly one URL path segment.

    `/`, `?`, `#` and `%` are escaped so the value cannot change the
    route, add a query or drop the rest of the URL.

    Raises:
        ValueError: For `.` and `..`, which URL normalization removes
    """
    if value in (".", ".."):
        raise ValueError(f"Invalid path segment: {value!r}")
    return quote(value, safe="")


class BaseServiceClient(ABC):
    """
    Microservice client base class

    Handles:
    1. Base URL resolution (fixed per deployment)
    2. HTTP client management
    3. Timeout control
    4. Request id propagation

    The transport is injectable so tests can swap the network for an
    ``httpx.MockTransport``.

    Example:
        class UserServiceClient(BaseServiceClient):
            service_name = "user_service"
            default_port = 8081

            async def get_user(self, user_id: str, ctx: RequestContext):
                response = await self.get(f"/api/v1/users/{user_id}", ctx=ctx)
                return response.json()
    """

    # Subclasses define these
    service_name: str = None  # e.g. "user_service"
    default_port: int = None  # e.g. 8081

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize service client

        Args:
            base_url: Service base URL (defaults to localhost:default_port)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        if not self.service_name:
            raise ValueError(f"{self.__class__.__name__} must define 'service_name'")

        if base_url:
            self.base_url = base_url.rstrip('/')
        else:
            self.base_url = f"http://localhost:{self.default_port}" if self.default_port else "http://localhost:8000"
            logger.warning(f"No base URL given for {self.service_name}, using default: {self.base_url}")

        self.client = httpx.AsyncClient(
            timeout=timeout,
            headers=self._build_default_headers(),
            transport=transport,
        )

        logger.debug(f"Initialized {self.service_name} client: {self.base_url}")

    def _build_default_headers(self) -> Dict[str, str]:
        """Build default request headers"""
        return {
            "Content-Type": "application/json",
            "User-Agent": f"internal-client/{self.service_name}",
        }

    def _request_headers(
        self,
        ctx: Optional[RequestContext],
        headers: Optional[Dict[str, str]] = None,
    ) -> Optional[Dict[str, str]]:
        merged = dict(headers or {})
        if ctx is not None:
            merged.update(ctx.outbound_headers())
        return merged or None

    async def close(self):
        """Close HTTP client"""
        await self.client.aclose()
        logger.debug(f"Closed {self.service_name} client")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # ========================================
    # HTTP method wrappers
    # ========================================

    async def get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        ctx: Optional[RequestContext] = None,
    ) -> httpx.Response:
        """GET request"""
        url = f"{self.base_url}{path}"
        return await self.client.get(url, params=params, headers=self._request_headers(ctx, headers))

    async def health_check(self) -> bool:
        """
        Health check

        Returns:
            Whether the service answered /health with 200
        """
        try:
            response = await self.get("/health")
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning(f"{self.service_name} health check failed: {e}")
            return False


__all__ = ["BaseServiceClient", "path_segment"]
