"""Single-pass snapshot collection for the interactive viewer."""

import logging
import threading
from queue import Queue

from platformstats.config import StatsConfig
from platformstats.cpu import (
    configured_cpu_count,
    online_cpu_count,
    read_cpu_frequency,
    sample_utilization,
)
from platformstats.errors import PlatformStatsError
from platformstats.hwmon import NOT_FOUND, HwmonLocator
from platformstats.memory import read_meminfo
from platformstats.models import CmaUsage, PlatformSnapshot, RamUsage, SwapUsage
from platformstats.power import read_power_sample, read_sysmon

logger = logging.getLogger(__name__)


def collect_snapshot(config: StatsConfig) -> PlatformSnapshot:
    """
    Gather every metric once.

    Failures are recorded in ``snapshot.errors`` and leave the matching
    field empty; one missing sensor never hides the others. Power is read
    once rather than averaged over ``config.duration``.
    """
    snapshot = PlatformSnapshot()
    cpu_count = config.cpu_count or configured_cpu_count(config.cpu_sysfs_root)
    snapshot.cpu_online = online_cpu_count()

    try:
        _, second = sample_utilization(cpu_count, config.interval, config.proc_stat)
        snapshot.cpu_utilization = [stat.total_util for stat in second]
    except PlatformStatsError as e:
        snapshot.errors.append(str(e))

    for cpu_id in range(cpu_count):
        try:
            snapshot.cpu_frequency_mhz.append(read_cpu_frequency(cpu_id, config.cpu_sysfs_root))
        except PlatformStatsError as e:
            snapshot.cpu_frequency_mhz.append(None)
            logger.debug("CPU%d frequency unavailable: %s", cpu_id, e)

    try:
        fields = read_meminfo(config.meminfo)
    except PlatformStatsError as e:
        snapshot.errors.append(str(e))
    else:
        snapshot.ram = RamUsage(
            total=fields.get("MemTotal", 0),
            free=fields.get("MemFree", 0),
            available=fields.get("MemAvailable", 0),
        )
        snapshot.swap = SwapUsage(total=fields.get("SwapTotal", 0), free=fields.get("SwapFree", 0))
        if "CmaTotal" in fields:
            snapshot.cma = CmaUsage(total=fields["CmaTotal"], free=fields.get("CmaFree", 0))

    locator = HwmonLocator(config.hwmon_root)
    try:
        power_id = locator.resolve_id(config.power_device)
        if power_id != NOT_FOUND:
            snapshot.power = read_power_sample(locator.device_base, power_id)
    except PlatformStatsError as e:
        snapshot.errors.append(str(e))

    try:
        sysmon_id = locator.resolve_id(config.sysmon_device)
        if sysmon_id != NOT_FOUND:
            snapshot.sysmon = read_sysmon(locator.device_base, sysmon_id)
    except PlatformStatsError as e:
        snapshot.errors.append(str(e))

    return snapshot


class SnapshotCollector:
    """
    Collects snapshots off the UI thread.

    Each ``request()`` runs one collection pass in a daemon thread and pushes
    the result to ``update_queue``. A request made while a pass is still
    running is ignored.
    """

    def __init__(self, update_queue: Queue[PlatformSnapshot], config: StatsConfig) -> None:
        """Initialize the SnapshotCollector."""
        self._queue = update_queue
        self._config = config
        self._thread: threading.Thread | None = None

    @property
    def config(self) -> StatsConfig:
        """Get the configuration used for collection."""
        return self._config

    @property
    def is_running(self) -> bool:
        """Check if a collection pass is in progress."""
        return self._thread is not None and self._thread.is_alive()

    def request(self) -> bool:
        """Start a collection pass. Returns False if one is already running."""
        if self.is_running:
            return False

        self._thread = threading.Thread(
            target=self._collect,
            daemon=True,
            name="SnapshotCollector",
        )
        self._thread.start()
        return True

    def wait(self, timeout: float | None = None) -> None:
        """Block until the current pass, if any, has finished."""
        if self._thread is not None:
            self._thread.join(timeout=timeout)

    def _collect(self) -> None:
        """Run one collection pass and queue the result."""
        try:
            snapshot = collect_snapshot(self._config)
        except Exception as e:
            logger.exception("Snapshot collection failed")
            snapshot = PlatformSnapshot(errors=[f"collection failed: {e}"])
        self._queue.put(snapshot)
