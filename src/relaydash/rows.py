"""Formatters that turn a Snapshot into statistics table rows."""

from datetime import datetime
from typing import Any, Protocol

from relaydash.models import DisplayRow, Snapshot, TrafficDirection
from relaydash.units import format_bitrate, format_bytes, format_time_ago

OUTBOUND_GROUP = "Traffic / Bridges to remote controllers"
INBOUND_GROUP = "Traffic / Remote controllers to bridges"


class RowTarget(Protocol):
    """Anything rows can be appended to, such as a Textual DataTable."""

    @property
    def row_count(self) -> int: ...

    def add_row(self, *cells: Any) -> Any: ...

    def clear(self) -> Any: ...


def append_row(target: RowTarget, group: str, name: str, value: object) -> None:
    """Append a ``<group> / <name>`` row to the end of the target."""
    target.add_row(f"{group} / {name}", str(value))


def update_stats_general(
    target: RowTarget, stats: Snapshot, now: datetime | None = None
) -> None:
    """Append the Started and Rate limit exceeded rows."""
    append_row(target, "General", "Started", format_time_ago(stats.general.start_time, now))
    append_row(target, "General", "Rate limit exceeded", stats.general.rate_limit_exceeded)


def update_stats_bridges(target: RowTarget, stats: Snapshot) -> None:
    """Append the connected bridge counters."""
    append_row(target, "Bridges", "Connected", stats.bridges.connected)
    append_row(
        target,
        "Bridges",
        "Remote controllers connected",
        stats.bridges.remote_controllers_connected,
    )


def update_stats_remote_controllers(target: RowTarget, stats: Snapshot) -> None:
    """Append the connected remote controller count."""
    append_row(target, "Remote controllers", "Connected", stats.remote_controllers.connected)


def _append_traffic(target: RowTarget, group: str, direction: TrafficDirection) -> None:
    append_row(target, group, "Total bytes", format_bytes(direction.total_bytes))
    append_row(target, group, "Current bitrate", format_bitrate(direction.current_bitrate))


def update_stats_traffic_bridges_to_remote_controllers(
    target: RowTarget, stats: Snapshot
) -> None:
    """Append traffic rows for bridges to remote controllers."""
    _append_traffic(target, OUTBOUND_GROUP, stats.traffic.bridges_to_remote_controllers)


def update_stats_traffic_remote_controllers_to_bridges(
    target: RowTarget, stats: Snapshot
) -> None:
    """Append traffic rows for remote controllers to bridges."""
    _append_traffic(target, INBOUND_GROUP, stats.traffic.remote_controllers_to_bridges)


def update_stats(target: RowTarget, stats: Snapshot, now: datetime | None = None) -> None:
    """Append every statistics row for a snapshot, in display order."""
    update_stats_general(target, stats, now)
    update_stats_bridges(target, stats)
    update_stats_remote_controllers(target, stats)
    update_stats_traffic_bridges_to_remote_controllers(target, stats)
    update_stats_traffic_remote_controllers_to_bridges(target, stats)


class _RowCollector:
    """Minimal in-memory target used by snapshot_rows."""

    def __init__(self) -> None:
        self.rows: list[DisplayRow] = []

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def add_row(self, *cells: Any) -> None:
        label, value = cells
        self.rows.append(DisplayRow(label=label, value=value))

    def clear(self) -> None:
        self.rows.clear()


def snapshot_rows(stats: Snapshot, now: datetime | None = None) -> list[DisplayRow]:
    """Return the rows update_stats would append, without a table."""
    collector = _RowCollector()
    update_stats(collector, stats, now)
    return collector.rows
