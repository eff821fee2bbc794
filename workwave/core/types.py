"""
Core types for the WorkWave Route Manager API.

These dataclasses provide type safety and IDE support for API payloads.
Serialization drops empty fields, so a record built with only a few
attributes set sends only those attributes.
"""

from dataclasses import dataclass, field
from typing import Any


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    """Drop zero-valued fields (None, "", 0, False, empty containers)."""
    return {k: v for k, v in data.items() if v}


def _records(data: dict[str, Any] | None, parser) -> dict[str, Any]:
    """Parse a mapping of id -> record, keeping response order."""
    return {key: parser(value) for key, value in (data or {}).items()}


def _lat_lng(value: Any) -> tuple[int, int]:
    """Parse a ``[lat, lng]`` micro-degree pair."""
    if (
        not isinstance(value, list)
        or len(value) != 2
        or not all(isinstance(v, int) and not isinstance(v, bool) for v in value)
    ):
        raise ValueError(f"latLng must be a pair of integers, got {value!r}")
    return value[0], value[1]


# =============================================================================
# Order Types
# =============================================================================


@dataclass
class Eligibility:
    """Which calendar dates an order may be served on."""

    type: str = ""  # One of: on, by, any
    by_date: str = ""  # Used when type = by, format: yyyyMMdd
    on_dates: list[str] = field(default_factory=list)  # Used when type = on

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Eligibility":
        """Create from API response dict."""
        return cls(
            type=data.get("type") or "",
            by_date=data.get("byDate") or "",
            on_dates=list(data.get("onDates") or []),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _compact({"type": self.type, "byDate": self.by_date, "onDates": self.on_dates})


@dataclass
class Location:
    """A geocoded or free-text location."""

    address: str = ""
    lat_lng: tuple[int, int] | None = None  # micro-degrees, ie (33817872, -87266893)
    status: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Location":
        """Create from API response dict."""
        lat_lng = data.get("latLng")
        return cls(
            address=data.get("address") or "",
            lat_lng=_lat_lng(lat_lng) if lat_lng else None,
            status=data.get("status") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _compact(
            {
                "address": self.address,
                "latLng": list(self.lat_lng) if self.lat_lng is not None else None,
                "status": self.status,
            }
        )


@dataclass
class TimeWindow:
    """A permitted service interval, in seconds from midnight."""

    start_sec: int = 0
    end_sec: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TimeWindow":
        """Create from API response dict."""
        return cls(start_sec=data.get("startSec") or 0, end_sec=data.get("endSec") or 0)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _compact({"startSec": self.start_sec, "endSec": self.end_sec})


@dataclass
class OrderStep:
    """The pickup or delivery half of an order."""

    depot_id: str = ""
    location: Location = field(default_factory=Location)
    time_windows: list[TimeWindow] = field(default_factory=list)
    time_window_exceptions: dict[str, TimeWindow] = field(default_factory=dict)
    notes: str = ""
    service_time_sec: int = 0
    tags_in: list[str] = field(default_factory=list)
    tags_out: list[str] = field(default_factory=list)
    custom_fields: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OrderStep":
        """Create from API response dict."""
        return cls(
            depot_id=data.get("depotId") or "",
            location=Location.from_dict(data.get("location") or {}),
            time_windows=[TimeWindow.from_dict(tw) for tw in data.get("timeWindows") or []],
            time_window_exceptions=_records(data.get("timeWindowExceptions"), TimeWindow.from_dict),
            notes=data.get("notes") or "",
            service_time_sec=data.get("serviceTimeSec") or 0,
            tags_in=list(data.get("tagsIn") or []),
            tags_out=list(data.get("tagsOut") or []),
            custom_fields=dict(data.get("customFields") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _compact(
            {
                "depotId": self.depot_id,
                "location": self.location.to_dict(),
                "timeWindows": [tw.to_dict() for tw in self.time_windows],
                "timeWindowExceptions": {d: tw.to_dict() for d, tw in self.time_window_exceptions.items()},
                "notes": self.notes,
                "serviceTimeSec": self.service_time_sec,
                "tagsIn": self.tags_in,
                "tagsOut": self.tags_out,
                "customFields": self.custom_fields,
            }
        )


@dataclass
class Order:
    """
    An order in WorkWave.

    The same type is used as input for adding orders by leaving id empty.
    """

    id: str = ""
    name: str = ""
    eligibility: Eligibility = field(default_factory=Eligibility)
    force_vehicle_id: Any = None
    priority: int = 0
    loads: dict[str, int] = field(default_factory=dict)
    pickup: OrderStep | None = None
    delivery: OrderStep | None = None
    is_service: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Order":
        """Create from API response dict."""
        pickup = data.get("pickup")
        delivery = data.get("delivery")
        return cls(
            id=data.get("id") or "",
            name=data.get("name") or "",
            eligibility=Eligibility.from_dict(data.get("eligibility") or {}),
            force_vehicle_id=data.get("forceVehicleId"),
            priority=data.get("priority") or 0,
            loads={name: int(qty) for name, qty in (data.get("loads") or {}).items()},
            pickup=OrderStep.from_dict(pickup) if pickup else None,
            delivery=OrderStep.from_dict(delivery) if delivery else None,
            is_service=bool(data.get("isService")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _compact(
            {
                "id": self.id,
                "name": self.name,
                "eligibility": self.eligibility.to_dict(),
                "forceVehicleId": self.force_vehicle_id,
                "priority": self.priority,
                "loads": self.loads,
                "pickup": self.pickup.to_dict() if self.pickup else None,
                "delivery": self.delivery.to_dict() if self.delivery else None,
                "isService": self.is_service,
            }
        )


# =============================================================================
# Driver / Vehicle Types
# =============================================================================


@dataclass
class Driver:
    """A driver in WorkWave."""

    id: str = ""
    name: str = ""
    email: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Driver":
        """Create from API response dict."""
        return cls(id=data.get("id") or "", name=data.get("name") or "", email=data.get("email") or "")

    def to_dict(self) -> dict[str, Any]:
        return _compact({"id": self.id, "name": self.name, "email": self.email})


@dataclass
class Vehicle:
    """A vehicle in WorkWave, as embedded in route listings."""

    id: str = ""
    external_id: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Vehicle":
        """Create from API response dict."""
        return cls(id=data.get("id") or "", external_id=data.get("externalId") or "")

    def to_dict(self) -> dict[str, Any]:
        return _compact({"id": self.id, "externalId": self.external_id})


# =============================================================================
# Route Types
# =============================================================================


@dataclass
class TrackingData:
    """Live status of a route step."""

    status: str = ""
    status_sec: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TrackingData":
        """Create from API response dict."""
        return cls(status=data.get("status") or "", status_sec=data.get("statusSec") or 0)

    def to_dict(self) -> dict[str, Any]:
        return _compact({"status": self.status, "statusSec": self.status_sec})


@dataclass
class RouteStep:
    """One step along a route: departure, arrival, pickup, delivery or brk."""

    type: str = ""
    order_id: str = ""
    arrival_sec: int = 0
    start_sec: int = 0
    end_sec: int = 0
    display_label: str = ""
    tracking_data: TrackingData | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RouteStep":
        """Create from API response dict."""
        tracking = data.get("trackingData")
        return cls(
            type=data.get("type") or "",
            order_id=data.get("orderId") or "",
            arrival_sec=data.get("arrivalSec") or 0,
            start_sec=data.get("startSec") or 0,
            end_sec=data.get("endSec") or 0,
            display_label=data.get("displayLabel") or "",
            tracking_data=TrackingData.from_dict(tracking) if tracking else None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _compact(
            {
                "type": self.type,
                "orderId": self.order_id,
                "arrivalSec": self.arrival_sec,
                "startSec": self.start_sec,
                "endSec": self.end_sec,
                "displayLabel": self.display_label,
                "trackingData": self.tracking_data.to_dict() if self.tracking_data else None,
            }
        )


@dataclass
class Route:
    """A route for one date, vehicle and driver, with its ordered steps."""

    id: str = ""
    revision: int = 0
    date: str = ""  # yyyyMMdd
    steps: list[RouteStep] = field(default_factory=list)
    driver_id: str = ""
    vehicle_id: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Route":
        """Create from API response dict."""
        return cls(
            id=data.get("id") or "",
            revision=data.get("revision") or 0,
            date=data.get("date") or "",
            steps=[RouteStep.from_dict(step) for step in data.get("steps") or []],
            driver_id=data.get("driverId") or "",
            vehicle_id=data.get("vehicleId") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _compact(
            {
                "id": self.id,
                "revision": self.revision,
                "date": self.date,
                "steps": [step.to_dict() for step in self.steps],
                "driverId": self.driver_id,
                "vehicleId": self.vehicle_id,
            }
        )


@dataclass
class RouteList:
    """Approved routes together with the vehicles and drivers they reference."""

    routes: dict[str, Route] = field(default_factory=dict)
    vehicles: dict[str, Vehicle] = field(default_factory=dict)
    drivers: dict[str, Driver] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RouteList":
        """Create from API response dict."""
        return cls(
            routes=_records(data.get("routes"), Route.from_dict),
            vehicles=_records(data.get("vehicles"), Vehicle.from_dict),
            drivers=_records(data.get("drivers"), Driver.from_dict),
        )


# =============================================================================
# Callback Types
# =============================================================================


@dataclass
class Callback:
    """
    Callback configuration, used both to set the callback URL and to read
    the API's reply.

    Fields:
        url: Callback target URL
        previous_url: URL being replaced (reply only)
        signature_password: Optional secret used to sign callback posts
        test: Ask WorkWave to test the URL synchronously when setting it
        headers: Extra headers added to each callback post
        error_code, error_message: Present only if a requested test failed
    """

    url: str = ""
    previous_url: str = ""
    signature_password: str = ""
    test: bool = False
    headers: dict[str, str] = field(default_factory=dict)
    error_code: int = 0
    error_message: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Callback":
        """Create from API response dict."""
        return cls(
            url=data.get("url") or "",
            previous_url=data.get("previousUrl") or "",
            signature_password=data.get("signaturePassword") or "",
            test=bool(data.get("test")),
            headers=dict(data.get("headers") or {}),
            error_code=data.get("errorCode") or 0,
            error_message=data.get("errorMessage") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _compact(
            {
                "url": self.url,
                "previousUrl": self.previous_url,
                "signaturePassword": self.signature_password,
                "test": self.test,
                "headers": self.headers,
                "errorCode": self.error_code,
                "errorMessage": self.error_message,
            }
        )
