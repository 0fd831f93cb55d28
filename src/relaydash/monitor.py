"""Stats polling engine for relaydash."""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from queue import Queue

import httpx

from relaydash.models import Snapshot, SnapshotSchemaError, parse_snapshot

logger = logging.getLogger(__name__)

STATS_PATH = "stats.json"


class FetchStatus(Enum):
    """Outcome of one fetch cycle."""

    OK = "ok"
    TRANSPORT_ERROR = "transport_error"
    SCHEMA_ERROR = "schema_error"


@dataclass(slots=True, frozen=True)
class FetchResult:
    """Result of one fetch: a snapshot on success, an error message otherwise."""

    status: FetchStatus
    snapshot: Snapshot | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.OK


class StatsFetcher:
    """
    Retrieves and parses ``stats.json`` from the relay.

    The stats path is resolved relative to ``base_url``, so a relay served
    under a reverse-proxy prefix only needs the prefix in the base URL.
    """

    def __init__(
        self,
        base_url: str,
        stats_path: str = STATS_PATH,
        timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the StatsFetcher.

        Args:
            base_url: URL that the stats path is relative to.
            stats_path: Relative path of the stats resource.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, mainly for tests.
        """
        self._stats_path = stats_path.lstrip("/")
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    @property
    def url(self) -> str:
        """Absolute URL of the stats resource."""
        return str(self._client.build_request("GET", self._stats_path).url)

    def fetch(self) -> FetchResult:
        """Perform one GET of the stats resource."""
        try:
            response = self._client.get(self._stats_path)
        except httpx.HTTPError as exc:
            logger.debug("Fetching %s failed: %s", self._stats_path, exc)
            return FetchResult(FetchStatus.TRANSPORT_ERROR, error=str(exc) or type(exc).__name__)

        if not response.is_success:
            logger.debug("Fetching %s returned HTTP %d", self._stats_path, response.status_code)
            return FetchResult(
                FetchStatus.TRANSPORT_ERROR, error=f"HTTP {response.status_code}"
            )

        try:
            snapshot = parse_snapshot(response.content)
        except SnapshotSchemaError as exc:
            logger.warning("Discarding malformed stats from %s: %s", response.url, exc)
            return FetchResult(FetchStatus.SCHEMA_ERROR, error=str(exc))

        return FetchResult(FetchStatus.OK, snapshot=snapshot)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "StatsFetcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class StatsMonitor:
    """
    Polls the relay for stats snapshots.

    Runs in a separate daemon thread and pushes one FetchResult per cycle to
    a thread-safe Queue. A cycle only starts once the previous one finished.
    """

    def __init__(
        self,
        update_queue: Queue[FetchResult],
        fetcher: StatsFetcher,
        poll_rate: float = 2.0,
    ) -> None:
        """
        Initialize the StatsMonitor.

        Args:
            update_queue: Thread-safe queue to push results to.
            fetcher: Fetcher used for every cycle.
            poll_rate: Seconds between the end of one cycle and the next.
        """
        self._queue = update_queue
        self._fetcher = fetcher
        self._poll_rate = max(0.1, poll_rate)
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._cycles = 0
        self._cycle_lock = threading.Lock()

    @property
    def poll_rate(self) -> float:
        """Get the current poll rate."""
        return self._poll_rate

    @poll_rate.setter
    def poll_rate(self, value: float) -> None:
        """Set the poll rate."""
        self._poll_rate = max(0.1, value)  # Minimum 0.1 seconds

    @property
    def is_running(self) -> bool:
        """Check if the monitor thread is running."""
        return self._thread is not None and self._thread.is_alive()

    @property
    def cycles(self) -> int:
        """Number of completed polling cycles."""
        return self._cycles

    def start(self) -> None:
        """Start the monitoring thread."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._poll_loop,
            daemon=True,
            name="StatsMonitor",
        )
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """
        Stop the monitoring thread.

        Args:
            timeout: How long to wait for thread to stop (seconds).
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    def poll_once(self) -> FetchResult:
        """
        Run a single fetch cycle and return its result.

        Cycles are serialized, so a manual refresh never overlaps a
        scheduled poll.
        """
        with self._cycle_lock:
            try:
                result = self._fetcher.fetch()
            except Exception as exc:
                logger.exception("Unexpected error while polling stats")
                result = FetchResult(
                    FetchStatus.TRANSPORT_ERROR, error=str(exc) or type(exc).__name__
                )
            self._cycles += 1
        return result

    def refresh(self) -> FetchResult:
        """Run one cycle outside the schedule and queue its result."""
        result = self.poll_once()
        self._queue.put(result)
        return result

    def _poll_loop(self) -> None:
        """Main polling loop running in the background thread."""
        while not self._stop_event.is_set():
            self._queue.put(self.poll_once())

            # Wait for poll_rate seconds or until stop is requested
            self._stop_event.wait(timeout=self._poll_rate)
