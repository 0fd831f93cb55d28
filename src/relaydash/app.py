"""relaydash - Main Textual application."""

import logging
from datetime import datetime
from queue import Empty, Queue

from rich.markup import escape
from textual.app import App, ComposeResult
from textual.widgets import DataTable, Footer, Static

from relaydash.config import DashboardConfig, parse_args
from relaydash.dashboard import DashboardState
from relaydash.monitor import FetchResult, FetchStatus, StatsFetcher, StatsMonitor

logger = logging.getLogger(__name__)


class StatusLine(Static):
    """One-line summary of the last polling cycle."""

    DEFAULT_CSS = """
    StatusLine {
        dock: top;
        height: 1;
        padding: 0 1;
        background: $surface;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize StatusLine."""
        super().__init__("Waiting for data...", *args, **kwargs)
        self._last_update: datetime | None = None
        self._text = "Waiting for data..."

    @property
    def text(self) -> str:
        return self._text

    def show_result(self, result: FetchResult) -> None:
        """Show the outcome of the newest cycle."""
        if result.ok:
            self._last_update = datetime.now()
            text = f"[green]Updated {self._last_update:%H:%M:%S}[/green]"
        elif self._last_update is None:
            text = f"[yellow]Waiting for data ({escape(result.error or '')})[/yellow]"
        else:
            text = (
                f"[red]Stale ({escape(result.error or '')}), "
                f"last update {self._last_update:%H:%M:%S}[/red]"
            )
        self._text = text
        self.update(text)


class RelayDashApp(App):
    """Main relaydash application."""

    TITLE = "relaydash"

    CSS = """
    Screen {
        layout: vertical;
    }

    #statistics {
        height: 1fr;
        border: solid $primary;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("r", "refresh", "Refresh"),
    ]

    def __init__(
        self,
        config: DashboardConfig | None = None,
        fetcher: StatsFetcher | None = None,
    ) -> None:
        """
        Initialize the RelayDashApp.

        Args:
            config: Dashboard settings. Defaults to DashboardConfig().
            fetcher: Fetcher to poll with. Built from the config if omitted.
        """
        super().__init__()
        self._config = config or DashboardConfig()
        self._fetcher = fetcher or StatsFetcher(
            self._config.base_url,
            stats_path=self._config.stats_path,
            timeout=self._config.timeout,
        )
        self._update_queue: Queue[FetchResult] = Queue()
        self._monitor = StatsMonitor(
            self._update_queue, self._fetcher, poll_rate=self._config.poll_rate
        )
        self._dashboard: DashboardState | None = None
        self.sub_title = self._fetcher.url

    @property
    def dashboard(self) -> DashboardState | None:
        """The dashboard state, available once the app is mounted."""
        return self._dashboard

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield StatusLine(id="status")
        yield DataTable(id="statistics", zebra_stripes=True)
        yield Footer()

    def on_mount(self) -> None:
        """Start the stats monitor when the app is mounted."""
        table = self.query_one("#statistics", DataTable)
        table.add_columns("Statistic", "Value")
        self._dashboard = DashboardState(table, accumulate=self._config.accumulate)

        self._monitor.start()
        # Set up a timer to poll the queue for updates
        self.set_interval(0.5, self._check_for_updates)

    def _check_for_updates(self) -> None:
        """Check the queue for results and refresh the UI."""
        latest: FetchResult | None = None
        latest_ok: FetchResult | None = None
        while True:
            try:
                result = self._update_queue.get_nowait()
            except Empty:
                break
            latest = result
            if result.ok:
                latest_ok = result

        if latest is None:
            return

        # Only the newest snapshot of a batch is rendered
        status = self.query_one("#status", StatusLine)
        if latest_ok is not None and self._dashboard is not None:
            try:
                self._dashboard.render(latest_ok.snapshot)
            except (OverflowError, OSError, ValueError) as exc:
                logger.exception("Could not render stats snapshot")
                latest = FetchResult(FetchStatus.SCHEMA_ERROR, error=str(exc))
            else:
                status.show_result(latest_ok)
        if latest is not latest_ok:
            status.show_result(latest)

    def action_refresh(self) -> None:
        """Poll once right away, off the UI thread."""
        self.run_worker(self._monitor.refresh, thread=True, group="refresh", exclusive=True)

    def action_quit(self) -> None:
        """Handle quit action with graceful cleanup."""
        self._monitor.stop()
        self.exit()

    def on_unmount(self) -> None:
        """Stop polling and release the HTTP client."""
        self._monitor.stop()
        self._fetcher.close()


def main(argv: list[str] | None = None) -> None:
    """Entry point for the relaydash application."""
    config = parse_args(argv)
    if config.log_file:
        logging.basicConfig(
            filename=config.log_file,
            level=config.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    logger.info("Polling %s every %.1fs", config.base_url, config.poll_rate)
    app = RelayDashApp(config)
    app.run()


if __name__ == "__main__":
    main()
