"""Orders endpoint tests."""

import json

import pytest

from workwave.core.client import DecodeError, RequestError
from workwave.core.types import Eligibility, Location, Order, OrderStep, TimeWindow

ORDERS_PATH = "/api/v1/territories/territory/orders"


def test_orders_list(api, client):
    api.fixture("/", "orders-list.json")

    orders = client.orders.list(
        "territory",
        include="assigned",
        eligible_on="20191019",
        assigned_on="20191018",
    )

    assert len(orders) == 7
    assert api.last.method == "GET"
    assert api.last.url.path == ORDERS_PATH
    assert dict(api.last.url.params) == {
        "include": "assigned",
        "eligibleOn": "20191019",
        "assignedOn": "20191018",
    }


def test_orders_list_omits_empty_filters(api, client):
    api.fixture(ORDERS_PATH, "orders-list.json")

    client.orders.list("territory", include="assigned", eligible_on="")

    assert dict(api.last.url.params) == {"include": "assigned"}
    assert "eligibleOn" not in str(api.last.url)
    assert "assignedOn" not in str(api.last.url)


def test_orders_list_decodes_records(api, client):
    api.fixture(ORDERS_PATH, "orders-list.json")

    orders = {o.id: o for o in client.orders.list("territory")}

    order = orders["4516b2e1-43dc-49a8-8bfb-7190fa60df21"]
    assert order.name == "Order 6 - Kansas City"
    assert order.eligibility == Eligibility(type="on", on_dates=["20191019"])
    assert order.loads == {"people": 2, "bags": 4}
    assert order.pickup is None
    assert order.delivery.location.lat_lng == (39099727, -94578567)
    assert order.delivery.time_windows == [TimeWindow(start_sec=43200, end_sec=54000)]
    assert order.delivery.time_window_exceptions == {"20191020": TimeWindow(start_sec=36000, end_sec=39600)}
    assert order.delivery.custom_fields == {"phone": "555-0100"}

    assert orders["b7f0de57-7f1d-4c1e-9a57-2b5d71ed9e22"].is_service is True


def test_orders_list_uses_default_territory(api, client):
    api.fixture("/", "orders-list.json")
    client.territory_id = "default-territory"

    client.orders.list()

    assert api.last.url.path == "/api/v1/territories/default-territory/orders"


def test_orders_list_requires_territory(api, client):
    client.territory_id = None

    with pytest.raises(RequestError, match="Territory ID required"):
        client.orders.list()
    assert api.requests == []


def test_orders_get(api, client):
    api.fixture("/", "orders-get.json")
    ids = ["4516b2e1-43dc-49a8-8bfb-7190fa60df21", "0d56e7a3-c737-472e-bec9-e2f19d4865d3"]

    orders = client.orders.get(ids, "territory")

    assert len(orders) == 2
    assert api.last.method == "GET"
    assert api.last.url.path == ORDERS_PATH
    assert json.loads(api.last.content) == ids
    # id missing from the record body is taken from the mapping key
    assert sorted(o.id for o in orders) == sorted(ids)


def test_orders_add(api, client):
    api.json("/", {"requestId": "509900a5-392e-4d34-bcfe-90cc6bf3ad47"})

    request_id = client.orders.add([], "territory", strict=False, accept_bad_geocodes=False)

    assert request_id == "509900a5-392e-4d34-bcfe-90cc6bf3ad47"
    assert api.last.method == "POST"
    assert api.last.url.query == b""
    assert json.loads(api.last.content) == {"orders": []}


def test_orders_add_sends_orders_and_flags(api, client):
    api.json(ORDERS_PATH, {"requestId": "509900a5-392e-4d34-bcfe-90cc6bf3ad47"})
    order = Order(
        name="Order 1",
        eligibility=Eligibility(type="by", by_date="20191021"),
        loads={"people": 2},
        delivery=OrderStep(
            location=Location(address="1 Grand Blvd, Kansas City, MO"),
            time_windows=[TimeWindow(start_sec=43200, end_sec=54000)],
        ),
    )

    client.orders.add([order], "territory", strict=True, accept_bad_geocodes=True)

    assert dict(api.last.url.params) == {"strict": "true", "acceptBadGeocodes": "true"}
    assert json.loads(api.last.content) == {
        "orders": [
            {
                "name": "Order 1",
                "eligibility": {"type": "by", "byDate": "20191021"},
                "loads": {"people": 2},
                "delivery": {
                    "location": {"address": "1 Grand Blvd, Kansas City, MO"},
                    "timeWindows": [{"startSec": 43200, "endSec": 54000}],
                },
            }
        ]
    }


def test_orders_add_without_request_id(api, client):
    api.json(ORDERS_PATH, {})

    with pytest.raises(DecodeError):
        client.orders.add([], "territory")


@pytest.mark.parametrize("lat_lng", [[1], [1.5, 2], "39099727,-94578567"])
def test_orders_list_malformed_lat_lng(api, client, lat_lng):
    api.json(ORDERS_PATH, {"orders": {"o1": {"delivery": {"location": {"latLng": lat_lng}}}}})

    with pytest.raises(DecodeError, match="cannot unmarshal"):
        client.orders.list("territory")
