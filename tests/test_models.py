"""Tests for relaydash data models."""

import json

import pytest

from conftest import stats_payload
from relaydash.models import (
    DisplayRow,
    Snapshot,
    SnapshotSchemaError,
    TrafficDirection,
    parse_snapshot,
)


def test_snapshot_from_dict(payload):
    """Test Snapshot maps every stats.json field."""
    snapshot = Snapshot.from_dict(payload)

    assert snapshot.general.start_time == 1_700_000_000
    assert snapshot.general.rate_limit_exceeded == 3
    assert snapshot.bridges.connected == 5
    assert snapshot.bridges.remote_controllers_connected == 2
    assert snapshot.remote_controllers.connected == 7
    assert snapshot.traffic.bridges_to_remote_controllers == TrafficDirection(2048, 1_500_000)
    assert snapshot.traffic.remote_controllers_to_bridges == TrafficDirection(512, 800)


def test_snapshot_is_frozen(snapshot):
    """Test that Snapshot is immutable (frozen)."""
    with pytest.raises(AttributeError):
        snapshot.general = None


def test_snapshot_uses_slots(snapshot):
    """Test that Snapshot uses __slots__."""
    assert not hasattr(snapshot, "__dict__")
    assert not hasattr(snapshot.traffic, "__dict__")


def test_unknown_keys_are_ignored():
    """Test extra counters from newer relays do not break parsing."""
    payload = stats_payload()
    payload["bridges"]["kicked"] = 4
    payload["version"] = "2"

    snapshot = Snapshot.from_dict(payload)
    assert snapshot.bridges.connected == 5


def test_negative_counts_pass_through():
    """Test counters are not range-checked."""
    payload = stats_payload(remoteControllers={"connected": -1})
    assert Snapshot.from_dict(payload).remote_controllers.connected == -1


def test_parse_snapshot_accepts_bytes_and_str(payload):
    body = json.dumps(payload)
    assert parse_snapshot(body) == parse_snapshot(body.encode())


def test_parse_snapshot_rejects_invalid_json():
    with pytest.raises(SnapshotSchemaError, match="not valid JSON"):
        parse_snapshot(b"<html>502 Bad Gateway</html>")


def test_schema_error_is_value_error():
    with pytest.raises(ValueError):
        parse_snapshot("not json")


@pytest.mark.parametrize(
    "payload, path",
    [
        ([], "general"),
        ({}, "general"),
        (stats_payload(bridges=None), "bridges"),
        (stats_payload(traffic={}), "traffic.bridgesToRemoteControllers"),
        (stats_payload(general={"startTime": 1}), "general.rateLimitExceeded"),
        (stats_payload(general={"startTime": "1", "rateLimitExceeded": 0}), "general.startTime"),
        (stats_payload(remoteControllers={"connected": True}), "remoteControllers.connected"),
        (stats_payload(remoteControllers={"connected": 1.5}), "remoteControllers.connected"),
    ],
)
def test_from_dict_rejects_wrong_shape(payload, path):
    """Test missing sections and non-integer counters are reported by path."""
    with pytest.raises(SnapshotSchemaError) as excinfo:
        Snapshot.from_dict(payload)
    assert path in str(excinfo.value)


def test_display_row_creation():
    row = DisplayRow(label="Bridges / Connected", value="5")
    assert row.label == "Bridges / Connected"
    assert row.value == "5"


@pytest.mark.parametrize("start_time", [10**20, -(10**20)])
def test_out_of_range_start_time_rejected(start_time):
    """Test a start time no datetime can hold is a schema error, not a crash later."""
    payload = stats_payload(general={"startTime": start_time, "rateLimitExceeded": 0})
    with pytest.raises(SnapshotSchemaError, match="general.startTime"):
        Snapshot.from_dict(payload)
