import datetime
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Tuple

from rich import box
from rich.columns import Columns
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from yaps_dashboard.config import MAX_USERS
from yaps_dashboard.errors import GENERIC_ERROR, YapsError
from yaps_dashboard.models import (
    SERIES_COLORS,
    STAT_CARDS,
    YapsData,
    chart_rows,
    format_yaps,
)


logger = logging.getLogger("yaps.dashboard")

# --- State ---

class DashboardState:
    """Username inputs and the record fetched for each of them.

    ``results`` always has one slot per entry in ``usernames``.
    """

    def __init__(self, client, usernames: Optional[List[str]] = None):
        self.client = client
        self.usernames: List[str] = [""]
        self.results: List[Optional[YapsData]] = [None]
        self.loading = False
        self.error = ""
        for index, name in enumerate((usernames or [])[:MAX_USERS]):
            if index > 0:
                self.add_user_input()
            self.set_username(index, name)

    def set_username(self, index: int, value: str) -> None:
        self.usernames[index] = (value or "").strip()
        self.results[index] = None

    @property
    def has_results(self) -> bool:
        return any(self.results)

    @property
    def can_add_user(self) -> bool:
        return self.has_results and len(self.usernames) < MAX_USERS

    @property
    def can_submit(self) -> bool:
        return not self.loading and any(self.usernames)

    def add_user_input(self) -> bool:
        if len(self.usernames) >= MAX_USERS:
            return False
        self.usernames.append("")
        self.results.append(None)
        return True

    def remove_user_input(self, index: int) -> bool:
        # The first box has no remove control
        if index <= 0 or index >= len(self.usernames):
            return False
        del self.usernames[index]
        del self.results[index]
        return True

    def submit(self) -> None:
        """Fetch every non-empty username in parallel.

        A failure only clears its own slot; the message of the last failing
        input (by position) ends up in ``error``.
        """
        targets = [(i, name) for i, name in enumerate(self.usernames) if name]
        if not targets:
            return

        self.loading = True
        self.error = ""
        for index, _ in targets:
            self.results[index] = None

        try:
            with ThreadPoolExecutor(max_workers=MAX_USERS) as pool:
                futures = [(index, pool.submit(self._fetch_one, name)) for index, name in targets]
                for index, future in futures:
                    record, error = future.result()
                    self.results[index] = record
                    if error:
                        self.error = error
        finally:
            self.loading = False

    def _fetch_one(self, username: str) -> Tuple[Optional[YapsData], str]:
        try:
            return self.client.fetch(username), ""
        except YapsError as e:
            logger.warning(f"API error for @{username}: {e.message}")
            return None, e.message
        except Exception:
            logger.exception(f"Unexpected error fetching @{username}")
            return None, GENERIC_ERROR

    # --- Derived views ---

    def loaded(self) -> List[Tuple[int, YapsData]]:
        return [(i, r) for i, r in enumerate(self.results) if r]

    def title(self) -> str:
        return " vs ".join(f"@{r.username}" for _, r in self.loaded())

    def user_ids(self) -> str:
        return ", ".join(r.user_id for _, r in self.loaded() if r.user_id)

    def chart_data(self) -> List[Dict[str, object]]:
        return chart_rows(self.results)

    def stat_cards(self, index: int) -> List[Tuple[str, str]]:
        record = self.results[index]
        if record is None:
            return []
        return [(title, format_yaps(getattr(record, field))) for title, field in STAT_CARDS]


# --- Formatting Utils ---

def create_bar(value, maximum, width=20, color="green"):
    completed = int(width * (value / maximum)) if maximum > 0 else 0
    completed = max(0, min(width, completed))
    bar = "█" * completed + "░" * (width - completed)
    return f"[{color}]{bar}[/{color}]"

# --- UI Components ---

def make_header(state: DashboardState):
    grid = Table.grid(expand=True)
    grid.add_column(justify="center", ratio=1)
    stamp = datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')
    grid.add_row(Text(f"YAPS ANALYTICS DASHBOARD - {stamp}", style="bold black on #7CFFD3", justify="center"))
    if state.has_results:
        grid.add_row(Text(state.title(), style="bold white", justify="center"))
        ids = state.user_ids()
        if ids:
            grid.add_row(Text(f"User IDs: {ids}", style="grey62", justify="center"))
    return grid

def make_chart_panel(state: DashboardState):
    table = Table(box=None, padding=(0, 1), show_header=True, header_style="bold white")
    table.add_column("Window", style="cyan")

    loaded = state.loaded()
    peak = max((v for _, r in loaded for _, v in r.window_values()), default=0)
    for i, record in loaded:
        table.add_column(f"@{record.username}", style=SERIES_COLORS[i])
        table.add_column("", style="white")

    for row in state.chart_data():
        cells = [row["name"]]
        for i, _ in loaded:
            value = row[f"yaps{i + 1}"]
            cells.append(format_yaps(value))
            cells.append(create_bar(value, peak, width=20, color=SERIES_COLORS[i]))
        table.add_row(*cells)

    return Panel(
        table,
        title="[#7CFFD3]ATTENTION METRICS OVER TIME[/#7CFFD3]",
        border_style="#7CFFD3",
        box=box.ROUNDED
    )

def make_stat_panel(state: DashboardState, index: int):
    record = state.results[index]
    color = SERIES_COLORS[index]
    grid = Table.grid(padding=(0, 2))
    cards = state.stat_cards(index)
    for _ in cards:
        grid.add_column(justify="left")
    grid.add_row(*[Text(title, style="grey62") for title, _ in cards])
    grid.add_row(*[Text(value, style=f"bold {color}") for _, value in cards])

    return Panel(
        grid,
        title=f"[{color}]@{record.username}[/{color}]",
        border_style=color,
        box=box.ROUNDED
    )

def make_error_panel(message: str):
    return Panel(Text(message, style="red"), title="ERROR", border_style="red", box=box.ROUNDED)

def render_dashboard(state: DashboardState):
    parts = [make_header(state)]
    if state.loading:
        parts.append(Text("Loading...", style="yellow"))
    if state.error:
        parts.append(make_error_panel(state.error))
    if state.has_results:
        parts.append(make_chart_panel(state))
        parts.append(Columns([make_stat_panel(state, i) for i, _ in state.loaded()]))
    elif not state.error:
        parts.append(Text("No data loaded", style="grey62"))
    return Group(*parts)

def run_dashboard(client, usernames, interval=None, duration=None, console=None):
    """Fetch once and print, or keep refreshing every ``interval`` seconds."""
    console = console or Console()
    state = DashboardState(client, usernames)
    if not state.can_submit:
        raise ValueError("At least one username is required")

    if not interval:
        state.submit()
        console.print(render_dashboard(state))
        return state

    start_time = time.time()
    with Live(render_dashboard(state), console=console, refresh_per_second=4) as live:
        while True:
            state.submit()
            live.update(render_dashboard(state))
            if duration and (time.time() - start_time > duration):
                break
            time.sleep(interval)
    return state
