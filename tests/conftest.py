"""Shared fixtures: synthetic procfs/sysfs trees under tmp_path."""

from pathlib import Path

import pytest

from platformstats.config import StatsConfig

PROC_STAT_T0 = """\
cpu  400 0 150 700 20 0 0 0 0 0
cpu0 100 0 50 200 10 0 0 0 0 0
cpu1 300 0 100 500 10 0 0 0 0 0
intr 12345
ctxt 67890
"""

PROC_STAT_T1 = """\
cpu  510 0 190 750 20 0 0 0 0 0
cpu0 150 0 70 210 10 0 0 0 0 0
cpu1 360 0 120 540 10 0 0 0 0 0
intr 12400
ctxt 67990
"""

# Field order of a 5.x kernel with CMA enabled: CmaTotal sits on line 42
MEMINFO = """\
MemTotal:        1000 kB
MemFree:          200 kB
MemAvailable:     500 kB
Buffers:           10 kB
Cached:           100 kB
SwapCached:         0 kB
Active:           150 kB
Inactive:          90 kB
Active(anon):      60 kB
Inactive(anon):     5 kB
Active(file):      90 kB
Inactive(file):    85 kB
Unevictable:        0 kB
Mlocked:            0 kB
SwapTotal:       2048 kB
SwapFree:        1024 kB
Dirty:              4 kB
Writeback:          0 kB
AnonPages:         65 kB
Mapped:            40 kB
Shmem:              3 kB
KReclaimable:      12 kB
Slab:              30 kB
SReclaimable:      12 kB
SUnreclaim:        18 kB
KernelStack:        2 kB
PageTables:         3 kB
NFS_Unstable:       0 kB
Bounce:             0 kB
WritebackTmp:       0 kB
CommitLimit:     2548 kB
Committed_AS:     300 kB
VmallocTotal:  135290159040 kB
VmallocUsed:        9 kB
VmallocChunk:       0 kB
Percpu:             1 kB
AnonHugePages:      0 kB
ShmemHugePages:     0 kB
ShmemPmdMapped:     0 kB
FileHugePages:      0 kB
FilePmdMapped:      0 kB
CmaTotal:         256 kB
CmaFree:          128 kB
HugePages_Total:    0
HugePages_Free:     0
Hugepagesize:    2048 kB
"""

INA260 = {
    "name": "ina260_u14",
    "power1_input": "5123000",
    "curr1_input": "1200",
    "in1_input": "12000",
}

AMS = {
    "name": "ams",
    "temp1_input": "45123",
    "temp2_input": "46999",
    "temp3_input": "-5500",
    "in1_input": "1200",
    "in3_input": "850",
    "in6_input": "1100",
    "in7_input": "851",
    "in9_input": "852",
    "in13_input": "1800",
    "in16_input": "853",
    "in17_input": "1801",
}


def write_device(root: Path, hwmon_id: int, attributes: dict[str, str]) -> Path:
    device = root / f"hwmon{hwmon_id}"
    device.mkdir(parents=True)
    for name, value in attributes.items():
        (device / name).write_text(f"{value}\n")
    return device


@pytest.fixture
def proc_stat(tmp_path: Path) -> Path:
    path = tmp_path / "stat"
    path.write_text(PROC_STAT_T0)
    return path


@pytest.fixture
def meminfo(tmp_path: Path) -> Path:
    path = tmp_path / "meminfo"
    path.write_text(MEMINFO)
    return path


@pytest.fixture
def cpu_root(tmp_path: Path) -> Path:
    root = tmp_path / "cpu"
    for cpu_id, khz in enumerate(["1199999", "1333333"]):
        freq_dir = root / f"cpu{cpu_id}" / "cpufreq"
        freq_dir.mkdir(parents=True)
        (freq_dir / "cpuinfo_cur_freq").write_text(f"{khz}\n")
    return root


@pytest.fixture
def hwmon_root(tmp_path: Path) -> Path:
    root = tmp_path / "hwmon"
    write_device(root, 0, {"name": "cpu_thermal", "temp1_input": "40000"})
    write_device(root, 1, INA260)
    write_device(root, 2, AMS)
    return root


@pytest.fixture
def config(proc_stat: Path, meminfo: Path, cpu_root: Path, hwmon_root: Path) -> StatsConfig:
    return StatsConfig(
        proc_stat=str(proc_stat),
        meminfo=str(meminfo),
        cpu_sysfs_root=str(cpu_root),
        hwmon_root=str(hwmon_root),
        cpu_count=2,
        interval=0,
        rate=0,
        duration=1,
    )


@pytest.fixture
def ticking_sleep(monkeypatch: pytest.MonkeyPatch, proc_stat: Path) -> list[float]:
    """Replace time.sleep so that 'sleeping' advances /proc/stat to its t1 content."""
    calls: list[float] = []

    def fake_sleep(seconds: float) -> None:
        calls.append(seconds)
        proc_stat.write_text(PROC_STAT_T1)

    monkeypatch.setattr("time.sleep", fake_sleep)
    return calls
