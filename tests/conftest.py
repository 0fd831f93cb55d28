"""Shared fixtures for relaydash tests."""

import json
from typing import Any

import httpx
import pytest

from relaydash.models import Snapshot
from relaydash.monitor import StatsFetcher

BASE_URL = "http://relay.test/"


class FakeTable:
    """In-memory stand-in for a DataTable."""

    def __init__(self) -> None:
        self.rows: list[tuple[Any, ...]] = []
        self.clears = 0

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def add_row(self, *cells: Any) -> None:
        self.rows.append(cells)

    def clear(self) -> None:
        self.clears += 1
        self.rows.clear()


def stats_payload(**overrides: Any) -> dict[str, Any]:
    """A well-formed stats.json document."""
    payload = {
        "general": {"startTime": 1_700_000_000, "rateLimitExceeded": 3},
        "bridges": {"connected": 5, "remoteControllersConnected": 2},
        "remoteControllers": {"connected": 7},
        "traffic": {
            "bridgesToRemoteControllers": {"totalBytes": 2048, "currentBitrate": 1_500_000},
            "remoteControllersToBridges": {"totalBytes": 512, "currentBitrate": 800},
        },
    }
    payload.update(overrides)
    return payload


def make_fetcher(handler, base_url: str = BASE_URL, **kwargs: Any) -> StatsFetcher:
    """Build a StatsFetcher whose requests are answered by handler."""
    return StatsFetcher(base_url, transport=httpx.MockTransport(handler), **kwargs)


def json_handler(payload: Any, status_code: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, content=json.dumps(payload).encode())

    return handler


@pytest.fixture
def payload() -> dict[str, Any]:
    return stats_payload()


@pytest.fixture
def snapshot(payload) -> Snapshot:
    return Snapshot.from_dict(payload)


@pytest.fixture
def table() -> FakeTable:
    return FakeTable()
