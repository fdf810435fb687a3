"""
HTTP client for the remote order store.

This module provides an async client for the order store endpoints and maps
transport failures and HTTP statuses onto the order desk error types.
"""

import asyncio
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from loguru import logger
from pydantic import ValidationError

from ..config import Settings, get_settings
from ..errors import (
    AccessRestricted,
    RecordNotFound,
    RemoteError,
    RemoteProtocolError,
    RemoteRequestError,
    RemoteServerError,
    RemoteUnreachable,
)
from ..models import OrderDraft, Record


def _error_for_status(status_code: int, message: str) -> RemoteError:
    if status_code == 404:
        return RecordNotFound(message, status_code)
    if status_code == 403:
        return AccessRestricted(message, status_code)
    if status_code >= 500:
        return RemoteServerError(message, status_code)
    return RemoteRequestError(message, status_code)


class OrderStoreClient:
    """
    Async HTTP client for the remote order store.

    Every call makes a single attempt bounded by the configured timeout;
    retrying is left to the caller's fallback logic.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: Base URL of the order store
            timeout: Request timeout in seconds
            settings: Settings to read defaults from
            transport: Optional httpx transport, e.g. a MockTransport in tests
        """
        settings = settings or get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout or settings.request_timeout
        self.health_timeout = settings.health_timeout
        self.health_path = settings.health_path
        self.orders_path = settings.orders_path
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport,
        )

        logger.debug(f"Initialized OrderStoreClient with base_url: {self.base_url}")

    async def __aenter__(self) -> "OrderStoreClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        json_data: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Make one HTTP request and decode its JSON body.

        Args:
            method: HTTP method (GET, POST)
            path: Endpoint path relative to the base URL
            json_data: JSON request body
            timeout: Override of the client timeout

        Returns:
            Dict[str, Any]: Decoded JSON object

        Raises:
            RemoteError: A subclass describing the failure
        """
        logger.debug(f"Making {method} request to {self.base_url}{path}")
        limit = timeout if timeout is not None else self.timeout
        try:
            response = await asyncio.wait_for(
                self._http.request(method, path, json=json_data, timeout=limit),
                limit,
            )
        except asyncio.TimeoutError as e:
            raise RemoteUnreachable(f"Request timed out after {limit}s") from e
        except httpx.TimeoutException as e:
            raise RemoteUnreachable(f"Request timed out: {e}") from e
        except httpx.HTTPError as e:
            raise RemoteUnreachable(f"Request failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.is_success:
            message = None
            if isinstance(data, dict) and data.get("message"):
                message = str(data["message"])
            raise _error_for_status(
                response.status_code, message or f"Request failed ({response.status_code})"
            )

        if not isinstance(data, dict):
            raise RemoteProtocolError(
                f"Unexpected response body from {path}", response.status_code
            )
        return data

    async def health(self, timeout: Optional[float] = None) -> bool:
        """
        Check whether the order store is up.

        Args:
            timeout: Upper bound in seconds, defaults to the health timeout

        Returns:
            True only for a 2xx answer whose body does not report ``ok: false``.
        """
        limit = timeout if timeout is not None else self.health_timeout
        try:
            response = await asyncio.wait_for(self._http.get(self.health_path, timeout=limit), limit)
        except asyncio.TimeoutError:
            logger.debug(f"Health check exceeded {limit}s")
            return False
        except httpx.HTTPError as e:
            logger.debug(f"Health check failed: {e}")
            return False

        if not response.is_success:
            return False
        try:
            data = response.json()
        except ValueError:
            return True
        return not (isinstance(data, dict) and data.get("ok") is False)

    async def create_order(self, draft: OrderDraft) -> str:
        """
        Submit a draft to the order store.

        Args:
            draft: Order or blood request draft

        Returns:
            str: Identifier assigned by the store

        Raises:
            RemoteError: If the request fails or no identifier comes back
        """
        data = await self._request("POST", self.orders_path, json_data={"order": draft.to_wire()})
        order_id = data.get("orderId")
        if not order_id and isinstance(data.get("order"), dict):
            order_id = data["order"].get("id")
        if not order_id:
            raise RemoteProtocolError("Order store did not return an order id")
        return str(order_id)

    async def get_order(self, order_id: str) -> Record:
        """
        Fetch one record by id.

        Args:
            order_id: Identifier to look up

        Returns:
            Record: The stored record

        Raises:
            RecordNotFound: If the store has no such record
            RemoteError: For any other failure
        """
        path = f"{self.orders_path}/{quote(order_id, safe='')}"
        data = await self._request("GET", path)
        order = data.get("order")
        if not order:
            raise RecordNotFound("Order not found.")
        try:
            return Record.model_validate(order)
        except ValidationError as e:
            raise RemoteProtocolError(f"Failed to parse order response: {e}") from e

    async def list_orders(self) -> List[Record]:
        """
        Fetch every record the store is willing to enumerate.

        Returns:
            List[Record]: Records in the order the store returned them

        Raises:
            AccessRestricted: If the admin listing is refused for this caller
            RemoteError: For any other failure
        """
        data = await self._request("GET", self.orders_path)
        orders = data.get("orders")
        if not isinstance(orders, list):
            return []
        try:
            return [Record.model_validate(item) for item in orders]
        except ValidationError as e:
            raise RemoteProtocolError(f"Failed to parse orders response: {e}") from e
