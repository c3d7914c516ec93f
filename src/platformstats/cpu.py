"""CPU utilization and frequency sampling."""

import logging
import os
import time

import psutil

from platformstats.errors import PseudoFileError, PseudoFileFormatError, UtilizationUndefinedError
from platformstats.models import CpuStat
from platformstats.sysfs import read_float_entry, skip_lines

logger = logging.getLogger(__name__)

PROC_STAT = "/proc/stat"
CPU_SYSFS_ROOT = "/sys/devices/system/cpu"
CPU_FIELDS = 7  # user nice system idle iowait irq softirq


def configured_cpu_count(root: str = CPU_SYSFS_ROOT) -> int:
    """
    Number of configured CPUs, including offline ones.

    Counts the ``cpu<N>`` directories under ``root``, as glibc's
    ``get_nprocs_conf`` does. Falls back to ``SC_NPROCESSORS_CONF`` when the
    directory cannot be listed.
    """
    try:
        entries = os.listdir(root)
    except OSError as e:
        logger.debug("Unable to list %s (%s), using sysconf", root, e.strerror)
        return os.sysconf("SC_NPROCESSORS_CONF") or 1

    count = sum(1 for entry in entries if entry.startswith("cpu") and entry[3:].isdigit())
    return count or 1


def online_cpu_count() -> int:
    """Number of CPUs currently online."""
    return psutil.cpu_count(logical=True) or 1


def read_cpu_stat(cpu_id: int, path: str = PROC_STAT) -> CpuStat:
    """
    Read the tick counters of one CPU from /proc/stat.

    Line 0 holds the aggregate ``cpu`` row, so CPU ``n`` is on line ``n + 1``.

    Raises:
        PseudoFileError: /proc/stat could not be opened.
        PseudoFileFormatError: The row is missing or malformed.
    """
    try:
        with open(path, "r") as fh:
            skip_lines(fh, cpu_id + 1)
            row = fh.readline()
    except UnicodeDecodeError as e:
        raise PseudoFileFormatError(path, f"not valid text ({e.reason})") from e
    except OSError as e:
        raise PseudoFileError.from_os_error(path, e) from e

    parts = row.split()
    if len(parts) < CPU_FIELDS + 1 or not parts[0].startswith("cpu"):
        raise PseudoFileFormatError(path, f"no counters for cpu{cpu_id}")
    try:
        counters = [int(value) for value in parts[1 : CPU_FIELDS + 1]]
    except ValueError as e:
        raise PseudoFileFormatError(path, f"bad counters for cpu{cpu_id}: {row.strip()!r}") from e

    return CpuStat(*counters)


def calculate_load(prev: CpuStat, curr: CpuStat) -> float:
    """
    Utilization in percent between two samples of the same CPU.

    The ``+ 1`` before the final division is inherited output behavior and
    kept as is.

    Raises:
        UtilizationUndefinedError: No tick elapsed between the samples.
    """
    total_delta = float(curr.total_ticks) - float(prev.total_ticks)
    idle_delta = float(curr.idle_ticks) - float(prev.idle_ticks)

    if total_delta == 0:
        raise UtilizationUndefinedError("no CPU ticks elapsed between samples")

    return (1000 * (total_delta - idle_delta) / total_delta + 1) / 10


def sample_utilization(
    cpu_count: int,
    interval: float = 1.0,
    path: str = PROC_STAT,
) -> tuple[list[CpuStat], list[CpuStat]]:
    """
    Sample every CPU twice, ``interval`` seconds apart.

    Returns the first and second passes. Each second-pass stat carries its
    ``total_util``, or None when no tick elapsed.
    """
    first = [read_cpu_stat(cpu_id, path) for cpu_id in range(cpu_count)]

    time.sleep(interval)

    second = []
    for cpu_id, prev in enumerate(first):
        curr = read_cpu_stat(cpu_id, path)
        try:
            curr.total_util = calculate_load(prev, curr)
        except UtilizationUndefinedError:
            logger.warning("CPU%d: no ticks elapsed in %ss, utilization unavailable", cpu_id, interval)
        second.append(curr)

    return first, second


def read_cpu_frequency(cpu_id: int, root: str = CPU_SYSFS_ROOT) -> float:
    """Current frequency of ``cpu_id`` in MHz, from cpuinfo_cur_freq (kHz)."""
    return read_float_entry(f"{root}/cpu", "/cpufreq/cpuinfo_cur_freq", cpu_id) / 1000
