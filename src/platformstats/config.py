"""Runtime configuration for platformstats."""

import logging
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from platformstats.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class StatsConfig:
    """
    Where to read from and how to sample.

    The path fields default to the live kernel interfaces; tests point them
    at synthetic trees.
    """

    proc_stat: str = "/proc/stat"
    meminfo: str = "/proc/meminfo"
    cpu_sysfs_root: str = "/sys/devices/system/cpu"
    hwmon_root: str = "/sys/class/hwmon"
    power_device: str = "ina260_u14"
    sysmon_device: str = "ams"
    cpu_count: int | None = None  # None: all configured CPUs
    interval: float = 1.0  # Seconds between the two /proc/stat passes
    rate: float = 1  # Seconds between power samples
    duration: int = 1  # Power samples taken, also the moving-average window

    def __post_init__(self) -> None:
        """Reject out-of-range values."""
        if self.cpu_count is not None and self.cpu_count < 1:
            raise ConfigError(f"cpu_count must be at least 1, got {self.cpu_count}")
        if self.interval < 0:
            raise ConfigError(f"interval must not be negative, got {self.interval}")
        if self.rate < 0:
            raise ConfigError(f"rate must not be negative, got {self.rate}")
        if self.duration < 1:
            raise ConfigError(f"duration must be at least 1, got {self.duration}")

    def with_overrides(self, **overrides: Any) -> "StatsConfig":
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self


_FIELD_TYPES = {
    "proc_stat": str,
    "meminfo": str,
    "cpu_sysfs_root": str,
    "hwmon_root": str,
    "power_device": str,
    "sysmon_device": str,
    "cpu_count": int,
    "interval": (int, float),
    "rate": (int, float),
    "duration": int,
}


def load_config(path: str | Path) -> StatsConfig:
    """
    Load a TOML configuration file.

    Keys may sit at the top level or under a ``[platformstats]`` table.

    Raises:
        ConfigError: The file is missing, malformed, or holds unknown keys
            or values of the wrong type.
    """
    path = Path(path)
    try:
        with open(path, "rb") as fh:
            data = tomllib.load(fh)
    except OSError as e:
        raise ConfigError(f"Unable to read config file {path}: {e.strerror}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    section = data.get("platformstats", data)
    if not isinstance(section, dict):
        raise ConfigError(f"[platformstats] in {path} must be a table")

    known = {f.name for f in fields(StatsConfig)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys in {path}: {', '.join(unknown)}")

    for key, value in section.items():
        expected = _FIELD_TYPES[key]
        # bool is an int subclass, reject it explicitly
        if isinstance(value, bool) or not isinstance(value, expected):
            raise ConfigError(f"Config key {key!r} in {path} has invalid value {value!r}")

    logger.debug("Loaded config from %s: %s", path, section)
    return StatsConfig(**section)
