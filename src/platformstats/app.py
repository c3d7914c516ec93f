"""platformstats - interactive Textual viewer."""

from queue import Empty, Queue

from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.widgets import Footer, Static

from platformstats.collector import SnapshotCollector
from platformstats.config import StatsConfig
from platformstats.models import PlatformSnapshot
from platformstats.sysfs import milli

BAR_WIDTH = 20


def format_kb(size_kb: int) -> str:
    """Format a kB figure as a human-readable string."""
    size = float(size_kb)
    for unit in ["K", "M", "G", "T"]:
        if size < 1024:
            return f"{size:5.1f}{unit}"
        size = size / 1024
    return f"{size:.1f}P"


def render_bar(percent: float, color: str) -> str:
    """Render a percentage as a fixed-width markup bar."""
    filled = min(max(int(percent / 5), 0), BAR_WIDTH)
    return f"[{color}]█[/{color}]" * filled + "[dim]░[/dim]" * (BAR_WIDTH - filled)


def _used_percent(total: int, free: int) -> float:
    """Percentage of ``total`` in use, 0 when there is nothing to use."""
    return (total - free) * 100 / total if total > 0 else 0.0


class CpuPanel(Static):
    """Per-CPU utilization bars and frequency."""

    def update_snapshot(self, snapshot: PlatformSnapshot) -> None:
        """Redraw the panel from ``snapshot``."""
        self.update(self.render_snapshot(snapshot))

    @staticmethod
    def render_snapshot(snapshot: PlatformSnapshot) -> str:
        """Markup for the CPU lines: online count, then one bar per CPU."""
        if not snapshot.cpu_utilization:
            return "CPU utilization unavailable"
        lines = [f"{snapshot.cpu_online}/{len(snapshot.cpu_utilization)} CPUs online"]
        for i, usage in enumerate(snapshot.cpu_utilization):
            freqs = snapshot.cpu_frequency_mhz
            freq = freqs[i] if i < len(freqs) else None
            freq_str = f"{freq:7.1f} MHz" if freq is not None else "    n/a MHz"
            if usage is None:
                lines.append(f"CPU{i:<2} \\[{render_bar(0, 'green')}]   n/a  {freq_str}")
            else:
                # Escaped bracket keeps the bar container literal
                lines.append(f"CPU{i:<2} \\[{render_bar(usage, 'green')}] {usage:5.1f}% {freq_str}")
        return "\n".join(lines)


class MemoryPanel(Static):
    """RAM, swap and CMA usage bars."""

    def update_snapshot(self, snapshot: PlatformSnapshot) -> None:
        """Redraw the panel from ``snapshot``."""
        self.update(self.render_snapshot(snapshot))

    @staticmethod
    def render_snapshot(snapshot: PlatformSnapshot) -> str:
        """Markup for the RAM, swap and CMA bars."""
        if snapshot.ram is None:
            return "Memory info unavailable"

        ram = snapshot.ram
        ram_pct = _used_percent(ram.total, ram.available)
        lines = [
            f"Mem\\[{render_bar(ram_pct, 'cyan')}] "
            f"{format_kb(ram.total - ram.available)}/{format_kb(ram.total)}"
        ]
        if snapshot.swap is not None:
            swap = snapshot.swap
            swap_pct = _used_percent(swap.total, swap.free)
            lines.append(
                f"Swp\\[{render_bar(swap_pct, 'yellow')}] "
                f"{format_kb(swap.total - swap.free)}/{format_kb(swap.total)}"
            )
        if snapshot.cma is not None:
            cma = snapshot.cma
            cma_pct = _used_percent(cma.total, cma.free)
            lines.append(
                f"Cma\\[{render_bar(cma_pct, 'magenta')}] "
                f"{format_kb(cma.total - cma.free)}/{format_kb(cma.total)}"
            )
        return "\n".join(lines)


class PowerPanel(Static):
    """SOM power and AMS sysmon readings."""

    def update_snapshot(self, snapshot: PlatformSnapshot) -> None:
        """Redraw the panel from ``snapshot``."""
        self.update(self.render_snapshot(snapshot))

    @staticmethod
    def render_snapshot(snapshot: PlatformSnapshot) -> str:
        """Markup for the SOM power and AMS sysmon lines."""
        lines = []
        if snapshot.power is not None:
            p = snapshot.power
            lines.append(f"SOM power {p.power_mw} mW  current {p.current_ma} mA  voltage {p.voltage_mv} mV")
        else:
            lines.append("No SOM power monitor")
        if snapshot.sysmon is not None:
            s = snapshot.sysmon
            lines.append(
                f"LPD {milli(s.lpd_temp)} C  FPD {milli(s.fpd_temp)} C  "
                f"PL {milli(s.pl_temp)} C"
            )
            lines.append(
                f"VCC_PSPLL {s.vcc_pspll} mV  VCC_PS_FPD {s.vcc_ps_fpd} mV  "
                f"VCC_PS_GTR {s.vcc_ps_gtr} mV  VTT_PS_GTR {s.vtt_ps_gtr} mV"
            )
        else:
            lines.append("No AMS sysmon")
        return "\n".join(lines)


class PlatformStatsApp(App):
    """Shows one snapshot at a time; press r for a fresh one."""

    TITLE = "platformstats"
    SUB_TITLE = "Platform Statistics"

    CSS = """
    Screen {
        layout: vertical;
    }

    Horizontal {
        height: auto;
    }

    #cpu-panel {
        width: 1fr;
        padding: 1 2 1 1;
    }

    #memory-panel {
        width: 1fr;
        padding: 1 1 1 2;
    }

    #power-panel {
        padding: 1;
        border: solid $primary;
    }

    #status {
        dock: bottom;
        height: auto;
        color: $warning;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("r", "refresh", "Refresh"),
    ]

    def __init__(self, config: StatsConfig | None = None) -> None:
        """Initialize the PlatformStatsApp."""
        super().__init__()
        self._update_queue: Queue[PlatformSnapshot] = Queue()
        self._collector = SnapshotCollector(self._update_queue, config or StatsConfig())
        self._snapshot: PlatformSnapshot | None = None

    @property
    def snapshot(self) -> PlatformSnapshot | None:
        """The snapshot currently displayed."""
        return self._snapshot

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield Horizontal(
            CpuPanel("Sampling CPU...", id="cpu-panel"),
            MemoryPanel("Reading memory...", id="memory-panel"),
        )
        yield PowerPanel("Reading sensors...", id="power-panel")
        yield Static("", id="status")
        yield Footer()

    def on_mount(self) -> None:
        """Collect the first snapshot and start polling for results."""
        self._collector.request()
        self.set_interval(0.2, self._check_for_updates)

    def _check_for_updates(self) -> None:
        """Show the most recent snapshot waiting in the queue."""
        snapshot = None
        while True:
            try:
                snapshot = self._update_queue.get_nowait()
            except Empty:
                break

        if snapshot is not None:
            self._update_ui(snapshot)

    def _update_ui(self, snapshot: PlatformSnapshot) -> None:
        """Update every panel and the status line from a new snapshot."""
        self._snapshot = snapshot
        self.query_one(CpuPanel).update_snapshot(snapshot)
        self.query_one(MemoryPanel).update_snapshot(snapshot)
        self.query_one(PowerPanel).update_snapshot(snapshot)
        self.query_one("#status", Static).update("\n".join(snapshot.errors))

    def action_refresh(self) -> None:
        """Collect a new snapshot unless one is already on its way."""
        if self._collector.request():
            self.notify("Refreshing...")

    def action_quit(self) -> None:
        """Handle quit action, letting a running collection pass finish."""
        self._collector.wait(timeout=5.0)
        self.exit()
