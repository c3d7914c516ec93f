"""RAM, swap and CMA figures from /proc/meminfo."""

import logging

from platformstats.models import CmaUsage, RamUsage, SwapUsage
from platformstats.sysfs import read_text

logger = logging.getLogger(__name__)

MEMINFO = "/proc/meminfo"


def read_meminfo(path: str = MEMINFO) -> dict[str, int]:
    """
    Parse /proc/meminfo into a ``{field: value}`` mapping.

    Fields are matched by their leading ``Name:`` token rather than by line
    position, so kernels that reorder or add fields parse the same way.
    Values are left in the file's unit (kB).
    """
    fields: dict[str, int] = {}
    for line in read_text(path).splitlines():
        parts = line.split()
        if len(parts) < 2 or not parts[0].endswith(":"):
            continue
        try:
            fields[parts[0][:-1]] = int(parts[1])
        except ValueError:
            logger.debug("Skipping unparsable meminfo line: %r", line)
    return fields


def _field(fields: dict[str, int], name: str) -> int:
    """Value of ``name``, or 0 with a warning when the kernel lacks it."""
    if name not in fields:
        logger.warning("%s not present in meminfo, reporting 0", name)
        return 0
    return fields[name]


def get_ram_memory_utilization(path: str = MEMINFO) -> RamUsage:
    """MemTotal, MemFree and MemAvailable."""
    fields = read_meminfo(path)
    return RamUsage(
        total=_field(fields, "MemTotal"),
        free=_field(fields, "MemFree"),
        available=_field(fields, "MemAvailable"),
    )


def get_swap_memory_utilization(path: str = MEMINFO) -> SwapUsage:
    """SwapTotal and SwapFree."""
    fields = read_meminfo(path)
    return SwapUsage(total=_field(fields, "SwapTotal"), free=_field(fields, "SwapFree"))


def get_cma_utilization(path: str = MEMINFO) -> CmaUsage:
    """CmaTotal and CmaFree."""
    fields = read_meminfo(path)
    return CmaUsage(total=_field(fields, "CmaTotal"), free=_field(fields, "CmaFree"))
