"""
WorkWave SDK - High-level client with typed per-resource operations.

This layer provides a clean, typed interface for the WorkWave Route
Manager endpoints. Built on top of the core APIClient.
"""

import builtins
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

import httpx

from workwave.core.client import DEFAULT_TIMEOUT, APIClient, CallbackError
from workwave.core.types import Callback, Driver, Order, Route, RouteList

CALLBACK_PATH = "/api/v1/callback"

T = TypeVar("T")


def _flatten(key: str, parser: Callable[[dict[str, Any]], T]) -> Callable[[dict[str, Any]], builtins.list[T]]:
    """
    Build a parser for ``{key: {id: record}}`` responses.

    Records come back in response order; a record missing its id takes it
    from the mapping key.
    """

    def parse(data: dict[str, Any]) -> builtins.list[T]:
        records = []
        for record_id, raw in (data.get(key) or {}).items():
            record = parser(raw)
            if not record.id:
                record.id = record_id
            records.append(record)
        return records

    return parse


class WorkWaveClient:
    """
    High-level WorkWave API client with typed methods.

    Example:
        client = WorkWaveClient(api_key="...", territory_id="...")

        orders = client.orders.list(include="assigned", eligible_on="20191019")
        routes = client.routes.list_approved(date="20191019")
        client.callback.set(Callback(url="https://my.server.com/callback"))

    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        territory_id: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the WorkWave client.

        Args:
            api_key: WorkWave API key (or WORKWAVE_API_KEY env var)
            base_url: API base URL (or WORKWAVE_BASE_URL env var)
            territory_id: Default territory ID (or WORKWAVE_TERRITORY_ID env var)
            timeout: Request timeout in seconds
            transport: Optional httpx transport override

        """
        self._client = APIClient(
            api_key=api_key,
            base_url=base_url,
            territory_id=territory_id,
            timeout=timeout,
            transport=transport,
        )

        # Sub-clients for different resources
        self.callback = CallbackOperations(self._client)
        self.orders = OrderOperations(self._client)
        self.routes = RouteOperations(self._client)
        self.drivers = DriverOperations(self._client)

    @property
    def territory_id(self) -> str | None:
        """Get the default territory ID."""
        return self._client.territory_id

    @territory_id.setter
    def territory_id(self, value: str) -> None:
        """Set the default territory ID."""
        self._client.territory_id = value

    def close(self) -> None:
        """Release pooled connections."""
        self._client.close()

    def __enter__(self) -> "WorkWaveClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


# =============================================================================
# Callback Operations
# =============================================================================


class CallbackOperations:
    """Operations for the account callback URL."""

    def __init__(self, client: APIClient):
        self._client = client

    def get(self, callback: Callback | None = None, timeout: float | None = None) -> Callback:
        """
        Get the current callback configuration.

        Args:
            callback: Optional record sent as the request body
            timeout: Per-call timeout in seconds

        Returns:
            Callback with the configured URL

        """
        return self._client.get(CALLBACK_PATH, Callback.from_dict, body=callback, timeout=timeout)

    def set(self, callback: Callback, timeout: float | None = None) -> Callback:
        """
        Set the callback URL.

        If ``callback.test`` is true WorkWave posts a test message to the URL
        before accepting it.

        Args:
            callback: The new configuration
            timeout: Per-call timeout in seconds

        Returns:
            Callback with the new and previous URL

        Raises:
            CallbackError: The test failed; ``error.callback`` holds the
                error code and message from the reply

        """
        result = self._client.post(CALLBACK_PATH, callback, Callback.from_dict, timeout=timeout)
        if result.error_code != 0:
            raise CallbackError(f"failed to set callback: {result.error_message}", result)
        return result

    def delete(self, callback: Callback | None = None, timeout: float | None = None) -> Callback:
        """
        Remove the callback URL.

        Returns:
            Callback whose previous_url is the removed URL

        """
        return self._client.delete(CALLBACK_PATH, callback, Callback.from_dict, timeout=timeout)


# =============================================================================
# Order Operations
# =============================================================================


class OrderOperations:
    """Operations for territory orders."""

    def __init__(self, client: APIClient):
        self._client = client

    def _path(self, territory_id: str | None) -> str:
        return f"{self._client.territory_path(territory_id)}/orders"

    def list(
        self,
        territory_id: str | None = None,
        include: str | None = None,
        eligible_on: str | None = None,
        assigned_on: str | None = None,
        timeout: float | None = None,
    ) -> builtins.list[Order]:
        """
        List orders in a territory.

        Args:
            territory_id: Territory ID (defaults to the client's territory)
            include: Which orders to include (e.g. "assigned", "unassigned", "all")
            eligible_on: Only orders eligible on this date (yyyyMMdd)
            assigned_on: Only orders assigned on this date (yyyyMMdd)
            timeout: Per-call timeout in seconds

        Returns:
            List of Orders

        """
        return self._client.get(
            self._path(territory_id),
            _flatten("orders", Order.from_dict),
            params={"include": include, "eligibleOn": eligible_on, "assignedOn": assigned_on},
            timeout=timeout,
        )

    def get(
        self,
        ids: Iterable[str],
        territory_id: str | None = None,
        timeout: float | None = None,
    ) -> builtins.list[Order]:
        """
        Get orders by ID.

        Args:
            ids: Order IDs to fetch
            territory_id: Territory ID (defaults to the client's territory)
            timeout: Per-call timeout in seconds

        Returns:
            List of the requested Orders

        """
        return self._client.get(
            self._path(territory_id),
            _flatten("orders", Order.from_dict),
            body=builtins.list(ids),
            timeout=timeout,
        )

    def add(
        self,
        orders: Iterable[Order],
        territory_id: str | None = None,
        strict: bool = False,
        accept_bad_geocodes: bool = False,
        timeout: float | None = None,
    ) -> str:
        """
        Add orders to a territory.

        The API processes the orders asynchronously and reports the outcome
        through the callback URL.

        Args:
            orders: Orders to add (ids left empty)
            territory_id: Territory ID (defaults to the client's territory)
            strict: Reject the whole batch if any order is invalid
            accept_bad_geocodes: Accept orders whose address failed to geocode
            timeout: Per-call timeout in seconds

        Returns:
            The request ID of the asynchronous operation

        """
        return self._client.post(
            self._path(territory_id),
            {"orders": builtins.list(orders)},
            _request_id,
            params={"strict": strict, "acceptBadGeocodes": accept_bad_geocodes},
            timeout=timeout,
        )


def _request_id(data: dict[str, Any]) -> str:
    return data["requestId"]


# =============================================================================
# Route Operations
# =============================================================================


class RouteOperations:
    """Operations for current (live) and approved routes."""

    def __init__(self, client: APIClient):
        self._client = client

    def list_current(
        self,
        territory_id: str | None = None,
        date: str | None = None,
        vehicle: str | None = None,
        timeout: float | None = None,
    ) -> builtins.list[Route]:
        """
        List current routes, including live tracking data.

        Args:
            territory_id: Territory ID (defaults to the client's territory)
            date: Route date (yyyyMMdd)
            vehicle: Only the route of this vehicle ID
            timeout: Per-call timeout in seconds

        Returns:
            List of Routes

        """
        return self._client.get(
            f"{self._client.territory_path(territory_id)}/toa/routes",
            _flatten("routes", Route.from_dict),
            params={"date": date, "vehicle": vehicle},
            timeout=timeout,
        )

    def list_approved(
        self,
        territory_id: str | None = None,
        date: str | None = None,
        timeout: float | None = None,
    ) -> builtins.list[Route]:
        """
        List approved routes.

        Args:
            territory_id: Territory ID (defaults to the client's territory)
            date: Route date (yyyyMMdd)
            timeout: Per-call timeout in seconds

        Returns:
            List of Routes

        """
        return builtins.list(self.get_approved(territory_id, date=date, timeout=timeout).routes.values())

    def get_approved(
        self,
        territory_id: str | None = None,
        date: str | None = None,
        timeout: float | None = None,
    ) -> RouteList:
        """
        Get approved routes with the vehicles and drivers they reference.

        Returns:
            RouteList keyed by route, vehicle and driver ID

        """
        return self._client.get(
            f"{self._client.territory_path(territory_id)}/approved/routes",
            _route_list,
            params={"date": date},
            timeout=timeout,
        )


def _route_list(data: dict[str, Any]) -> RouteList:
    routes = RouteList.from_dict(data)
    for mapping in (routes.routes, routes.vehicles, routes.drivers):
        for record_id, record in mapping.items():
            if not record.id:
                record.id = record_id
    return routes


# =============================================================================
# Driver Operations
# =============================================================================


class DriverOperations:
    """Operations for territory drivers."""

    def __init__(self, client: APIClient):
        self._client = client

    def list(self, territory_id: str | None = None, timeout: float | None = None) -> builtins.list[Driver]:
        """
        List drivers in a territory.

        Returns:
            List of Drivers

        """
        return self._client.get(
            f"{self._client.territory_path(territory_id)}/drivers",
            _flatten("drivers", Driver.from_dict),
            timeout=timeout,
        )
