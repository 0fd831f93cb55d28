"""Data models for relaydash."""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


class SnapshotSchemaError(ValueError):
    """Raised when a stats payload does not have the expected shape."""


@dataclass(slots=True, frozen=True)
class GeneralStats:
    """Service-wide counters."""

    start_time: int  # Epoch seconds
    rate_limit_exceeded: int


@dataclass(slots=True, frozen=True)
class BridgeStats:
    """Counters for connected bridges."""

    connected: int
    remote_controllers_connected: int


@dataclass(slots=True, frozen=True)
class RemoteControllerStats:
    """Counters for connected remote controllers."""

    connected: int


@dataclass(slots=True, frozen=True)
class TrafficDirection:
    """Traffic counters for one direction through the relay."""

    total_bytes: int
    current_bitrate: int  # Bits per second


@dataclass(slots=True, frozen=True)
class TrafficStats:
    """Traffic counters in both directions."""

    bridges_to_remote_controllers: TrafficDirection
    remote_controllers_to_bridges: TrafficDirection


@dataclass(slots=True, frozen=True)
class Snapshot:
    """Immutable point-in-time view of the relay's counters."""

    general: GeneralStats
    bridges: BridgeStats
    remote_controllers: RemoteControllerStats
    traffic: TrafficStats

    @classmethod
    def from_dict(cls, data: Any) -> "Snapshot":
        """
        Build a Snapshot from decoded ``stats.json`` data.

        Unknown keys are ignored. Missing sections, non-integer counters and
        out-of-range timestamps raise SnapshotSchemaError.
        """
        general = _section(data, "general")
        bridges = _section(data, "bridges")
        remote_controllers = _section(data, "remoteControllers")
        traffic = _section(data, "traffic")
        outbound = _section(traffic, "bridgesToRemoteControllers", "traffic")
        inbound = _section(traffic, "remoteControllersToBridges", "traffic")

        return cls(
            general=GeneralStats(
                start_time=_timestamp(general, "startTime", "general"),
                rate_limit_exceeded=_count(general, "rateLimitExceeded", "general"),
            ),
            bridges=BridgeStats(
                connected=_count(bridges, "connected", "bridges"),
                remote_controllers_connected=_count(
                    bridges, "remoteControllersConnected", "bridges"
                ),
            ),
            remote_controllers=RemoteControllerStats(
                connected=_count(remote_controllers, "connected", "remoteControllers"),
            ),
            traffic=TrafficStats(
                bridges_to_remote_controllers=_direction(
                    outbound, "traffic.bridgesToRemoteControllers"
                ),
                remote_controllers_to_bridges=_direction(
                    inbound, "traffic.remoteControllersToBridges"
                ),
            ),
        )


@dataclass(slots=True, frozen=True)
class DisplayRow:
    """A labeled, formatted counter ready for the statistics table."""

    label: str
    value: str


def parse_snapshot(body: str | bytes) -> Snapshot:
    """Decode a ``stats.json`` response body into a Snapshot."""
    try:
        data = json.loads(body)
    except ValueError as exc:
        raise SnapshotSchemaError(f"response is not valid JSON: {exc}") from exc
    return Snapshot.from_dict(data)


def _section(data: Any, key: str, parent: str | None = None) -> dict[str, Any]:
    path = f"{parent}.{key}" if parent else key
    if not isinstance(data, dict):
        raise SnapshotSchemaError(f"expected an object containing '{path}'")
    section = data.get(key)
    if not isinstance(section, dict):
        raise SnapshotSchemaError(f"'{path}' is missing or not an object")
    return section


def _count(section: dict[str, Any], key: str, parent: str) -> int:
    value = section.get(key)
    # bool is an int subclass but never a valid counter
    if isinstance(value, bool) or not isinstance(value, int):
        raise SnapshotSchemaError(f"'{parent}.{key}' is missing or not an integer")
    return value


def _timestamp(section: dict[str, Any], key: str, parent: str) -> int:
    value = _count(section, key, parent)
    try:
        datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise SnapshotSchemaError(f"'{parent}.{key}' is not a valid timestamp: {value}") from exc
    return value


def _direction(section: dict[str, Any], parent: str) -> TrafficDirection:
    return TrafficDirection(
        total_bytes=_count(section, "totalBytes", parent),
        current_bitrate=_count(section, "currentBitrate", parent),
    )
