"""Lookup of hardware-monitor devices under /sys/class/hwmon."""

import logging
import os
from collections.abc import Iterator

from platformstats.errors import DeviceNotFoundError, PlatformStatsError, PseudoFileError
from platformstats.models import HwmonDevice
from platformstats.sysfs import read_str_entry

logger = logging.getLogger(__name__)

HWMON_ROOT = "/sys/class/hwmon"
NOT_FOUND = -1


class HwmonLocator:
    """
    Resolves hwmon ids from device names.

    Nothing is cached: every call rescans the class directory, so a device
    that appears or disappears between reports is picked up.
    """

    def __init__(self, root: str = HWMON_ROOT) -> None:
        """Initialize a locator for the class directory ``root``."""
        self._root = root.rstrip("/") or "/"

    @property
    def root(self) -> str:
        """The hwmon class directory."""
        return self._root

    @property
    def device_base(self) -> str:
        """Path prefix that an id is appended to, ``<root>/hwmon``."""
        return f"{self._root}/hwmon"

    def count_devices(self) -> int:
        """
        Number of ``hwmon*`` entries registered under the class directory.

        Raises:
            PseudoFileError: The class directory does not exist, i.e. the
                board has no hwmon support.
        """
        try:
            entries = os.listdir(self._root)
        except OSError as e:
            raise PseudoFileError.from_os_error(self._root, e) from e
        return sum(1 for entry in entries if "hwmon" in entry)

    def iter_devices(self) -> Iterator[HwmonDevice]:
        """Yield every device with a readable ``name``, in id order."""
        for hwmon_id in range(self.count_devices()):
            try:
                name = read_str_entry(self.device_base, "/name", hwmon_id)
            except PlatformStatsError as e:
                logger.warning("Skipping hwmon%d: %s", hwmon_id, e)
                continue
            yield HwmonDevice(id=hwmon_id, name=name)

    def devices(self) -> list[HwmonDevice]:
        """Every device with a readable ``name``, in id order."""
        return list(self.iter_devices())

    def resolve_id(self, name: str) -> int:
        """Id of the first device called ``name``, or NOT_FOUND."""
        for device in self.iter_devices():
            logger.debug("hwmon%d: device_name = %s", device.id, device.name)
            if device.name == name:
                return device.id
        return NOT_FOUND

    def require_id(self, name: str) -> int:
        """Like resolve_id, but raises DeviceNotFoundError instead of NOT_FOUND."""
        hwmon_id = self.resolve_id(name)
        if hwmon_id == NOT_FOUND:
            raise DeviceNotFoundError(name, self._root)
        return hwmon_id
