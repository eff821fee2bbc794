"""
Core layer - Raw types and HTTP client.

This layer provides:
- Typed dataclasses matching the WorkWave API payloads
- Low-level HTTP client with auth, status checking and decoding
"""

from workwave.core.client import (
    APIClient,
    APIError,
    CallbackError,
    DecodeError,
    RequestError,
    ValidationError,
    WorkWaveError,
    check_response,
)
from workwave.core.types import (
    Callback,
    Driver,
    Eligibility,
    Location,
    Order,
    OrderStep,
    Route,
    RouteList,
    RouteStep,
    TimeWindow,
    TrackingData,
    Vehicle,
)

__all__ = [
    "APIClient",
    "APIError",
    "CallbackError",
    "Callback",
    "DecodeError",
    "Driver",
    "Eligibility",
    "Location",
    "Order",
    "OrderStep",
    "RequestError",
    "Route",
    "RouteList",
    "RouteStep",
    "TimeWindow",
    "TrackingData",
    "ValidationError",
    "Vehicle",
    "WorkWaveError",
    "check_response",
]
