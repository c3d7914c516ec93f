"""Console reporters, one per metric family."""

import logging
import time

from platformstats.average import MovingAverage
from platformstats.config import StatsConfig
from platformstats.cpu import configured_cpu_count, read_cpu_frequency, sample_utilization
from platformstats.errors import PlatformStatsError
from platformstats.hwmon import NOT_FOUND, HwmonLocator
from platformstats.memory import (
    get_cma_utilization,
    get_ram_memory_utilization,
    get_swap_memory_utilization,
)
from platformstats.models import CpuStat
from platformstats.power import read_power_sample, read_sysmon
from platformstats.sysfs import milli

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = StatsConfig()


def _failed(what: str, error: PlatformStatsError) -> int:
    """Log a reporter failure and return its exit code."""
    logger.error("%s failed: %s", what, error)
    return error.exit_code


def _cpu_count(config: StatsConfig) -> int:
    """CPUs to report: the configured override or every configured CPU."""
    return config.cpu_count or configured_cpu_count(config.cpu_sysfs_root)


def format_cpu_stat(stat: CpuStat, cpu_id: int) -> str:
    """Raw counters of one CPU, as printed in verbose mode."""
    return (
        f"CPU{cpu_id}: {stat.user} {stat.nice} {stat.system} {stat.idle} "
        f"{stat.iowait} {stat.irq} {stat.softirq}"
    )


def format_utilization(util: float | None) -> str:
    """Utilization as a percentage, or ``unavailable``."""
    return "unavailable" if util is None else f"{util:f}%"


def print_cpu_utilization(config: StatsConfig = DEFAULT_CONFIG, verbose: bool = False) -> int:
    """Sample every CPU twice, one interval apart, and print utilization."""
    print("CPU Utilization")
    try:
        first, second = sample_utilization(_cpu_count(config), config.interval, config.proc_stat)
    except PlatformStatsError as e:
        print()
        return _failed("CPU utilization", e)

    if verbose:
        for cpu_id, stat in enumerate(first):
            print(f"cpu_id={cpu_id}\nStats at t0")
            print(format_cpu_stat(stat, cpu_id))

    for cpu_id, stat in enumerate(second):
        if verbose:
            print(f"Stats at t1 after {config.interval:g}s")
            print(format_cpu_stat(stat, cpu_id))
        print(f"CPU{cpu_id}\t:     {format_utilization(stat.total_util)}")

    print()
    return 0


def print_cpu_frequency(config: StatsConfig = DEFAULT_CONFIG, verbose: bool = False) -> int:
    """Print the current frequency of every CPU in MHz."""
    print("CPU Frequency")
    status = 0
    for cpu_id in range(_cpu_count(config)):
        try:
            freq = read_cpu_frequency(cpu_id, config.cpu_sysfs_root)
        except PlatformStatsError as e:
            # Offline CPUs have no cpufreq node, keep going with the rest
            code = _failed(f"CPU{cpu_id} frequency", e)
            status = status or code
            continue
        print(f"CPU{cpu_id}\t:    {freq:f} MHz")
    print()
    return status


def print_ram_memory_utilization(config: StatsConfig = DEFAULT_CONFIG, verbose: bool = False) -> int:
    """Print MemTotal, MemFree and MemAvailable."""
    try:
        ram = get_ram_memory_utilization(config.meminfo)
    except PlatformStatsError as e:
        return _failed("RAM utilization", e)

    print("RAM Utilization")
    print(f"MemTotal      :     {ram.total} kB")
    print(f"MemFree       :     {ram.free} kB")
    print(f"MemAvailable  :     {ram.available} kB\n")
    return 0


def print_swap_memory_utilization(config: StatsConfig = DEFAULT_CONFIG, verbose: bool = False) -> int:
    """Print SwapTotal and SwapFree."""
    try:
        swap = get_swap_memory_utilization(config.meminfo)
    except PlatformStatsError as e:
        return _failed("Swap utilization", e)

    print("Swap Mem Utilization")
    print(f"SwapTotal    :    {swap.total} kB")
    print(f"SwapFree     :    {swap.free} kB\n")
    return 0


def print_cma_utilization(config: StatsConfig = DEFAULT_CONFIG, verbose: bool = False) -> int:
    """Print CmaTotal and CmaFree."""
    try:
        cma = get_cma_utilization(config.meminfo)
    except PlatformStatsError as e:
        return _failed("CMA utilization", e)

    print("CMA Mem Utilization")
    print(f"CmaTotal   :     {cma.total} kB")
    print(f"CmaFree    :     {cma.free} kB\n")
    return 0


def _locate(locator: HwmonLocator, name: str) -> int:
    """Resolve ``name``, treating a board without hwmon support as not found."""
    try:
        return locator.resolve_id(name)
    except PlatformStatsError as e:
        logger.info("hwmon lookup of %s failed: %s", name, e)
        return NOT_FOUND


def print_ina260_power_info(config: StatsConfig = DEFAULT_CONFIG, verbose: bool = False) -> int:
    """
    Sample the SOM power monitor ``config.duration`` times.

    Power, current and voltage each feed their own moving average with a
    window of ``config.duration`` samples. Sleeps ``config.rate`` seconds
    between samples.
    """
    locator = HwmonLocator(config.hwmon_root)
    hwmon_id = _locate(locator, config.power_device)

    print("Power Utilization")
    if hwmon_id == NOT_FOUND:
        print(f"no hwmon device found for {config.power_device} under {locator.root}\n")
        return 0

    power_avg = MovingAverage(config.duration)
    curr_avg = MovingAverage(config.duration)
    volt_avg = MovingAverage(config.duration)

    for tick in range(config.duration):
        try:
            sample = read_power_sample(locator.device_base, hwmon_id)
        except PlatformStatsError as e:
            return _failed(f"{config.power_device} power sampling", e)

        print(
            f"SOM total power    :     {sample.power_mw} mW\t "
            f"SOM avg power    :    {power_avg.observe(sample.power_mw)} mW"
        )
        print(
            f"SOM total current  :     {sample.current_ma} mA\t\t "
            f"SOM avg current  :    {curr_avg.observe(sample.current_ma)} mA"
        )
        print(
            f"SOM total voltage  :     {sample.voltage_mv} mV\t "
            f"SOM avg voltage  :   {volt_avg.observe(sample.voltage_mv)} mV\n"
        )

        if tick < config.duration - 1:
            time.sleep(config.rate)

    return 0


def print_sysmon_power_info(config: StatsConfig = DEFAULT_CONFIG, verbose: bool = False) -> int:
    """One-shot report of the AMS temperatures and voltage rails."""
    locator = HwmonLocator(config.hwmon_root)
    hwmon_id = _locate(locator, config.sysmon_device)

    if hwmon_id == NOT_FOUND:
        print(f"no hwmon device found for {config.sysmon_device} under {locator.root}\n")
        return 0

    try:
        s = read_sysmon(locator.device_base, hwmon_id)
    except PlatformStatsError as e:
        return _failed(f"{config.sysmon_device} sysmon", e)

    print("AMS CTRL")
    print(f"System PLLs voltage measurement, VCC_PSLL               :     {s.vcc_pspll} mV")
    print(f"PL internal voltage measurement, VCC_PSBATT             :     {s.pl_vccint} mV")
    print(f"Voltage measurement for six DDR I/O PLLs, VCC_PSDDR_PLL :     {s.volt_ddrs} mV")
    print(f"VCC_PSINTFP_DDR voltage measurement                     :     {s.vcc_psintfp} mV\n")

    print("PS Sysmon")
    print(f"LPD temperature measurement                             :     {milli(s.lpd_temp)} C")
    print(f"FPD temperature measurement (REMOTE)                    :     {milli(s.fpd_temp)} C")
    print(f"VCC PS FPD voltage measurement (supply 2)               :     {s.vcc_ps_fpd} mV")
    print(f"PS IO Bank 500 voltage measurement (supply 6)           :     {s.ps_io_bank_500} mV")
    print(f"VCC PS GTR voltage                                      :     {s.vcc_ps_gtr} mV")
    print(f"VTT PS GTR voltage                                      :     {s.vtt_ps_gtr} mV\n")

    print("PL Sysmon")
    print(f"PL temperature                                          :     {milli(s.pl_temp)} C\n")
    return 0


def print_power_utilization(config: StatsConfig = DEFAULT_CONFIG, verbose: bool = False) -> int:
    """Print the SOM power samples, then the AMS sysmon report."""
    ina260_status = print_ina260_power_info(config, verbose)
    sysmon_status = print_sysmon_power_info(config, verbose)
    return ina260_status or sysmon_status


ALL_REPORTERS = (
    print_cpu_utilization,
    print_ram_memory_utilization,
    print_swap_memory_utilization,
    print_power_utilization,
    print_cma_utilization,
    print_cpu_frequency,
)


def print_all_stats(config: StatsConfig = DEFAULT_CONFIG, verbose: bool = False) -> int:
    """Run every reporter in turn and return the first non-zero status."""
    return run_reporters(ALL_REPORTERS, config, verbose)


def run_reporters(reporters, config: StatsConfig = DEFAULT_CONFIG, verbose: bool = False) -> int:
    """Run ``reporters`` in order and return the first non-zero status."""
    status = 0
    for reporter in reporters:
        result = reporter(config, verbose)
        if result and not status:
            status = result
    return status
