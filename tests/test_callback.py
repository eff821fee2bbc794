"""Callback endpoint tests."""

import json

import httpx
import pytest

from workwave.core.client import APIError, CallbackError
from workwave.core.types import Callback

CALLBACK_PATH = "/api/v1/callback"
TEST_FAILURE = "Server at URL [https://my.server.com/callback] failed to respond to the test message."


def test_callback_get(api, client):
    api.json("/", {"url": "https://my.server.com/callback"})

    cb = client.callback.get()

    assert cb.url == "https://my.server.com/callback"
    assert api.last.method == "GET"
    assert api.last.url.path == CALLBACK_PATH


def test_callback_response_decodes_only_present_fields(api, client):
    api.json(CALLBACK_PATH, {"url": "https://x/callback"})

    assert client.callback.get() == Callback(url="https://x/callback")


class TestCallbackSet:
    """Setting the callback URL, with and without a synchronous test."""

    @pytest.fixture(autouse=True)
    def routes(self, api):
        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            if body.get("test"):
                return httpx.Response(200, json={"errorCode": 2000, "errorMessage": TEST_FAILURE})
            return httpx.Response(
                200,
                json={"url": "https://my.server.com/new-callback", "previousUrl": "https://my.server.com/callback"},
            )

        api.add("/", handler)

    def test_simple(self, api, client):
        cb = client.callback.set(Callback(url="https://my.server.com/new-callback"))

        assert cb.url == "https://my.server.com/new-callback"
        assert cb.previous_url == "https://my.server.com/callback"
        assert api.last.method == "POST"
        assert json.loads(api.last.content) == {"url": "https://my.server.com/new-callback"}

    def test_sends_optional_fields(self, api, client):
        client.callback.set(
            Callback(
                url="https://my.server.com/new-callback",
                signature_password="secret",
                headers={"X-Tenant": "acme"},
            )
        )

        assert json.loads(api.last.content) == {
            "url": "https://my.server.com/new-callback",
            "signaturePassword": "secret",
            "headers": {"X-Tenant": "acme"},
        }

    def test_with_test_and_error_response(self, client):
        with pytest.raises(CallbackError, match="failed to set callback") as exc_info:
            client.callback.set(Callback(url="https://my.server.com/new-callback", test=True))

        assert exc_info.value.callback == Callback(error_code=2000, error_message=TEST_FAILURE)
        assert exc_info.value.error_code == 2000
        assert exc_info.value.to_dict()["details"] == {"errorCode": 2000, "errorMessage": TEST_FAILURE}


def test_callback_delete(api, client):
    api.json("/", {"previousUrl": "https://my.server.com/callback"})

    cb = client.callback.delete()

    assert cb.previous_url == "https://my.server.com/callback"
    assert api.last.method == "DELETE"


def test_callback_status_error_is_raised(api, client):
    api.json(CALLBACK_PATH, {"error": "forbidden"}, status=403)

    with pytest.raises(APIError, match="HTTP 403 error"):
        client.callback.get()
