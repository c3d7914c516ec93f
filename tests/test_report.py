"""Tests for the console reporters."""

import errno
from dataclasses import replace

import pytest

from platformstats.report import (
    print_all_stats,
    print_cma_utilization,
    print_cpu_frequency,
    print_cpu_utilization,
    print_ina260_power_info,
    print_power_utilization,
    print_ram_memory_utilization,
    print_swap_memory_utilization,
    print_sysmon_power_info,
    run_reporters,
)

from conftest import write_device


@pytest.fixture
def no_sleep(monkeypatch):
    calls = []
    monkeypatch.setattr("time.sleep", calls.append)
    return calls


class TestCpuUtilization:
    """Tests for print_cpu_utilization."""

    def test_prints_each_cpu(self, config, ticking_sleep, capsys):
        """Test one utilization line per CPU, then a blank line."""
        assert print_cpu_utilization(config) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "CPU Utilization"
        assert lines[1] == "CPU0\t:     87.600000%"
        assert lines[2].startswith("CPU1\t:     66.7666")
        assert lines[3] == ""

    def test_verbose_prints_counters(self, config, ticking_sleep, capsys):
        """Test verbose mode prints both passes of raw counters."""
        print_cpu_utilization(config, verbose=True)
        out = capsys.readouterr().out
        assert "cpu_id=0\nStats at t0\nCPU0: 100 0 50 200 10 0 0" in out
        assert "Stats at t1 after 0s\nCPU0: 150 0 70 210 10 0 0" in out

    def test_zero_elapsed_ticks(self, config, no_sleep, capsys):
        """Test an unchanged /proc/stat prints unavailable, not a crash."""
        assert print_cpu_utilization(config) == 0
        assert "CPU0\t:     unavailable" in capsys.readouterr().out

    def test_missing_proc_stat(self, config, tmp_path, no_sleep):
        """Test the errno of the failed open is returned."""
        broken = replace(config, proc_stat=str(tmp_path / "missing"))
        assert print_cpu_utilization(broken) == errno.ENOENT


class TestMemoryReporters:
    """Tests for RAM, swap and CMA reporters."""

    def test_ram(self, config, capsys):
        """Test RAM figures are printed unaltered."""
        assert print_ram_memory_utilization(config) == 0
        assert capsys.readouterr().out == (
            "RAM Utilization\n"
            "MemTotal      :     1000 kB\n"
            "MemFree       :     200 kB\n"
            "MemAvailable  :     500 kB\n\n"
        )

    def test_swap(self, config, capsys):
        """Test swap figures."""
        assert print_swap_memory_utilization(config) == 0
        out = capsys.readouterr().out
        assert "SwapTotal    :    2048 kB" in out
        assert "SwapFree     :    1024 kB" in out

    def test_cma(self, config, capsys):
        """Test CMA figures."""
        assert print_cma_utilization(config) == 0
        out = capsys.readouterr().out
        assert out.startswith("CMA Mem Utilization\n")
        assert "CmaTotal   :     256 kB" in out
        assert "CmaFree    :     128 kB" in out
        assert out.endswith("\n\n")

    def test_missing_meminfo(self, config, tmp_path, capsys):
        """Test a missing meminfo returns its errno and prints nothing."""
        broken = replace(config, meminfo=str(tmp_path / "missing"))
        assert print_ram_memory_utilization(broken) == errno.ENOENT
        assert print_swap_memory_utilization(broken) == errno.ENOENT
        assert print_cma_utilization(broken) == errno.ENOENT
        assert capsys.readouterr().out == ""


class TestCpuFrequency:
    """Tests for print_cpu_frequency."""

    def test_prints_mhz(self, config, capsys):
        """Test kHz is printed as MHz."""
        assert print_cpu_frequency(config) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines == ["CPU Frequency", "CPU0\t:    1199.999000 MHz", "CPU1\t:    1333.333000 MHz", ""]

    def test_offline_cpu(self, config, capsys):
        """Test a CPU without cpufreq is skipped and its errno returned."""
        assert print_cpu_frequency(replace(config, cpu_count=3)) == errno.ENOENT
        out = capsys.readouterr().out
        assert "CPU1" in out
        assert "CPU2" not in out

    def test_default_count_includes_offline_cpus(self, config, cpu_root, capsys):
        """Test every configured CPU is covered, including an offline one."""
        (cpu_root / "cpu2").mkdir()
        assert print_cpu_frequency(replace(config, cpu_count=None)) == errno.ENOENT
        out = capsys.readouterr().out
        assert "CPU1\t:    1333.333000 MHz" in out
        assert "CPU2" not in out


class TestPowerReporters:
    """Tests for the ina260 and sysmon reporters."""

    def test_ina260_single_tick(self, config, no_sleep, capsys):
        """Test one tick prints instantaneous and average values."""
        assert print_ina260_power_info(config) == 0
        out = capsys.readouterr().out
        assert out.startswith("Power Utilization\n")
        assert "SOM total power    :     5123 mW\t SOM avg power    :    5123 mW" in out
        assert "SOM total current  :     1200 mA\t\t SOM avg current  :    1200 mA" in out
        assert "SOM total voltage  :     12000 mV\t SOM avg voltage  :   12000 mV" in out
        assert no_sleep == []

    def test_ina260_moving_average(self, config, hwmon_root, monkeypatch, capsys):
        """Test averages follow the readings across ticks."""
        readings = iter(["7000000", "9000000"])
        sleeps = []

        def fake_sleep(seconds):
            sleeps.append(seconds)
            (hwmon_root / "hwmon1" / "power1_input").write_text(next(readings))

        monkeypatch.setattr("time.sleep", fake_sleep)
        assert print_ina260_power_info(replace(config, duration=3, rate=2)) == 0

        out = capsys.readouterr().out
        assert "SOM avg power    :    5123 mW" in out
        assert "SOM total power    :     7000 mW\t SOM avg power    :    6061 mW" in out
        assert "SOM total power    :     9000 mW\t SOM avg power    :    7041 mW" in out
        # no sleep after the last tick
        assert sleeps == [2, 2]

    def test_ina260_absent(self, config, tmp_path, capsys):
        """Test a missing power monitor is reported and skipped."""
        empty = tmp_path / "empty-hwmon"
        empty.mkdir()
        assert print_ina260_power_info(replace(config, hwmon_root=str(empty))) == 0
        assert "no hwmon device found for ina260_u14" in capsys.readouterr().out

    def test_no_hwmon_support(self, config, tmp_path, capsys):
        """Test a board without /sys/class/hwmon is not fatal."""
        absent = replace(config, hwmon_root=str(tmp_path / "absent"))
        assert print_power_utilization(absent) == 0
        out = capsys.readouterr().out
        assert "no hwmon device found for ina260_u14" in out
        assert "no hwmon device found for ams" in out

    def test_ina260_unreadable_attribute(self, config, hwmon_root, no_sleep):
        """Test a sensor read failure returns its errno."""
        (hwmon_root / "hwmon1" / "curr1_input").unlink()
        assert print_ina260_power_info(config) == errno.ENOENT

    def test_device_name_not_text(self, config, hwmon_root, no_sleep, capsys):
        """Test a binary device name does not abort the power report."""
        (hwmon_root / "hwmon0" / "name").write_bytes(b"\xff\xfe\n")
        assert print_power_utilization(config) == 0
        out = capsys.readouterr().out
        assert "SOM total power    :     5123 mW" in out
        assert "AMS CTRL\n" in out

    def test_sysmon(self, config, capsys):
        """Test the AMS report blocks."""
        assert print_sysmon_power_info(config) == 0
        out = capsys.readouterr().out
        assert "AMS CTRL\n" in out
        assert "VCC_PSLL               :     1200 mV" in out
        assert "LPD temperature measurement                             :     45 C" in out
        assert "FPD temperature measurement (REMOTE)                    :     46 C" in out
        assert "PS IO Bank 500 voltage measurement (supply 6)           :     1800 mV" in out
        # truncated toward zero
        assert "PL temperature                                          :     -5 C" in out

    def test_sysmon_absent(self, config, hwmon_root, capsys):
        """Test a missing AMS device is reported and skipped."""
        assert print_sysmon_power_info(replace(config, sysmon_device="sysmon9")) == 0
        assert "no hwmon device found for sysmon9" in capsys.readouterr().out


class TestPrintAllStats:
    """Tests for the full report."""

    def test_order(self, config, ticking_sleep, capsys):
        """Test every group is printed in report order."""
        assert print_all_stats(config) == 0
        out = capsys.readouterr().out
        headers = [
            "CPU Utilization",
            "RAM Utilization",
            "Swap Mem Utilization",
            "Power Utilization",
            "AMS CTRL",
            "CMA Mem Utilization",
            "CPU Frequency",
        ]
        positions = [out.index(header) for header in headers]
        assert positions == sorted(positions)

    def test_first_error_wins(self, config, tmp_path, no_sleep):
        """Test the first failing reporter's code is returned and the rest still run."""
        calls = []

        def failing(config, verbose):
            calls.append("failing")
            return errno.EACCES

        def also_failing(config, verbose):
            calls.append("also_failing")
            return errno.ENOENT

        assert run_reporters([failing, also_failing], config) == errno.EACCES
        assert calls == ["failing", "also_failing"]

    def test_missing_meminfo_status(self, config, tmp_path, ticking_sleep, capsys):
        """Test an I/O failure in one group does not hide the others."""
        broken = replace(config, meminfo=str(tmp_path / "missing"))
        assert print_all_stats(broken) == errno.ENOENT
        out = capsys.readouterr().out
        assert "CPU Frequency" in out
        assert "RAM Utilization" not in out
