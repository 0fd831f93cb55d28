"""Dashboard state: the single owner of the statistics table."""

from datetime import datetime, timezone

from relaydash.models import Snapshot
from relaydash.rows import RowTarget, snapshot_rows


class DashboardState:
    """
    Owns the rendering target and mediates every change to it.

    By default each render replaces the previous rows. With ``accumulate``
    set, rows are only ever appended, so the table keeps every row of every
    snapshot rendered so far.
    """

    def __init__(self, target: RowTarget, accumulate: bool = False) -> None:
        self._target = target
        self._accumulate = accumulate
        self._render_count = 0
        self._last_rendered: datetime | None = None

    @property
    def accumulate(self) -> bool:
        return self._accumulate

    @property
    def row_count(self) -> int:
        """Number of rows currently in the target."""
        return self._target.row_count

    @property
    def render_count(self) -> int:
        return self._render_count

    @property
    def last_rendered(self) -> datetime | None:
        """When the last snapshot was rendered, or None before the first."""
        return self._last_rendered

    def render(self, snapshot: Snapshot, now: datetime | None = None) -> int:
        """
        Render a snapshot into the target.

        Returns:
            The number of rows appended.
        """
        if now is None:
            now = datetime.now(tz=timezone.utc)
        # Rows are fully built before the target is cleared
        rows = snapshot_rows(snapshot, now)
        if not self._accumulate:
            self._target.clear()
        for row in rows:
            self._target.add_row(row.label, row.value)

        self._render_count += 1
        self._last_rendered = now
        return len(rows)
