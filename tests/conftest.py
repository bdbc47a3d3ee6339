# tests/conftest.py

import json
from typing import Callable, List

import httpx
import pytest

from backend.gemini_client import GeminiImageClient

API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_KEY = "default-test-key"


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it has seen."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def make_client() -> Callable[..., GeminiImageClient]:
    """
    Builds a GeminiImageClient wired to a RecordingTransport.
    The transport is reachable as client.transport.
    """

    def _make(handler, default_api_key=DEFAULT_KEY, redact_api_key=False) -> GeminiImageClient:
        return GeminiImageClient(
            api_base=API_BASE,
            default_api_key=default_api_key,
            timeout=5.0,
            redact_api_key=redact_api_key,
            transport=RecordingTransport(handler),
        )

    return _make


def json_response(status_code: int, body) -> Callable[[httpx.Request], httpx.Response]:
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, content=json.dumps(body).encode("utf-8"))

    return _handler


def api_error(status_code: int, status: str, message: str):
    return json_response(
        status_code, {"error": {"code": status_code, "message": message, "status": status}}
    )
