"""Exceptions raised while reading platform statistics."""

import errno as errno_codes


class PlatformStatsError(Exception):
    """Base class for all platformstats errors."""

    #: Exit code reported by the CLI when this error ends a reporter.
    exit_code: int = errno_codes.EIO


class PseudoFileError(PlatformStatsError):
    """A procfs/sysfs file could not be opened or read."""

    def __init__(self, path: str, errno: int | None, strerror: str | None) -> None:
        """Record the failed path and the OS error."""
        self.path = str(path)
        self.errno = errno or errno_codes.EIO
        self.strerror = strerror or "I/O error"
        super().__init__(f"Unable to open {self.path}: {self.strerror} (errno {self.errno})")

    @property
    def exit_code(self) -> int:
        """The OS errno of the failed open."""
        return self.errno

    @classmethod
    def from_os_error(cls, path: str, error: OSError) -> "PseudoFileError":
        """Wrap an OSError raised while opening ``path``."""
        return cls(path, error.errno, error.strerror)


class PseudoFileFormatError(PlatformStatsError):
    """A pseudo file was readable but its content did not parse."""

    exit_code = errno_codes.EINVAL

    def __init__(self, path: str, detail: str) -> None:
        """Record the path and what did not parse."""
        self.path = str(path)
        self.detail = detail
        super().__init__(f"Unexpected content in {self.path}: {detail}")


class DeviceNotFoundError(PlatformStatsError):
    """No hwmon device is registered under the requested name."""

    exit_code = errno_codes.ENODEV

    def __init__(self, name: str, root: str) -> None:
        """Record the device name and the directory searched."""
        self.name = name
        self.root = str(root)
        super().__init__(f"no hwmon device found for {name} under {self.root}")


class UtilizationUndefinedError(PlatformStatsError, ZeroDivisionError):
    """Two CPU samples were taken without any elapsed tick in between."""

    exit_code = errno_codes.EDOM


class ConfigError(PlatformStatsError):
    """Invalid configuration file or value."""

    exit_code = 2
