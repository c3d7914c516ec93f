"""Data models for platformstats."""

from dataclasses import dataclass, field


@dataclass(slots=True)
class CpuStat:
    """Per-CPU tick counters from one /proc/stat row."""

    user: int
    nice: int
    system: int
    idle: int
    iowait: int
    irq: int
    softirq: int
    total_util: float | None = None  # Set once the second pass is computed

    @property
    def idle_ticks(self) -> int:
        """Ticks spent idle, including iowait."""
        return self.idle + self.iowait

    @property
    def busy_ticks(self) -> int:
        """Ticks spent in user, nice, system, irq and softirq."""
        return self.user + self.nice + self.system + self.irq + self.softirq

    @property
    def total_ticks(self) -> int:
        """All accounted ticks."""
        return self.idle_ticks + self.busy_ticks


@dataclass(slots=True, frozen=True)
class RamUsage:
    """RAM figures in kB."""

    total: int
    free: int
    available: int


@dataclass(slots=True, frozen=True)
class SwapUsage:
    """Swap figures in kB."""

    total: int
    free: int


@dataclass(slots=True, frozen=True)
class CmaUsage:
    """Contiguous Memory Allocator figures in kB."""

    total: int
    free: int


@dataclass(slots=True, frozen=True)
class HwmonDevice:
    """A registered /sys/class/hwmon/hwmon<id> device."""

    id: int
    name: str


@dataclass(slots=True, frozen=True)
class PowerSample:
    """One reading of the SOM power monitor."""

    power_mw: int
    current_ma: int
    voltage_mv: int


@dataclass(slots=True, frozen=True)
class SysmonReading:
    """One-shot AMS sysmon report.

    Temperatures are in millidegrees Celsius, voltages in mV, exactly as
    exposed by the hwmon attributes.
    """

    lpd_temp: int  # temp1_input
    fpd_temp: int  # temp2_input
    pl_temp: int  # temp3_input
    vcc_pspll: int  # in1_input
    pl_vccint: int  # in3_input
    volt_ddrs: int  # in6_input
    vcc_psintfp: int  # in7_input
    vcc_ps_fpd: int  # in9_input
    ps_io_bank_500: int  # in13_input
    vcc_ps_gtr: int  # in16_input
    vtt_ps_gtr: int  # in17_input


@dataclass(slots=True)
class PlatformSnapshot:
    """Everything the viewer shows, gathered in a single pass."""

    cpu_online: int = 0
    cpu_utilization: list[float | None] = field(default_factory=list)
    cpu_frequency_mhz: list[float | None] = field(default_factory=list)
    ram: RamUsage | None = None
    swap: SwapUsage | None = None
    cma: CmaUsage | None = None
    power: PowerSample | None = None
    sysmon: SysmonReading | None = None
    errors: list[str] = field(default_factory=list)
