"""Power and thermal readings from the ina260 and AMS hwmon devices."""

from platformstats.models import PowerSample, SysmonReading
from platformstats.sysfs import milli, read_int_entry


def read_power_sample(device_base: str, hwmon_id: int) -> PowerSample:
    """
    Read power, current and voltage from an ina260 monitor.

    ``power1_input`` is in microwatts and is reported in mW; current and
    voltage are already in mA and mV.
    """
    power_uw = read_int_entry(device_base, "/power1_input", hwmon_id)
    current = read_int_entry(device_base, "/curr1_input", hwmon_id)
    voltage = read_int_entry(device_base, "/in1_input", hwmon_id)
    return PowerSample(power_mw=milli(power_uw), current_ma=current, voltage_mv=voltage)


# SysmonReading field -> hwmon attribute
SYSMON_ATTRIBUTES = {
    "lpd_temp": "/temp1_input",
    "fpd_temp": "/temp2_input",
    "pl_temp": "/temp3_input",
    "vcc_pspll": "/in1_input",
    "pl_vccint": "/in3_input",
    "volt_ddrs": "/in6_input",
    "vcc_psintfp": "/in7_input",
    "vcc_ps_fpd": "/in9_input",
    "ps_io_bank_500": "/in13_input",
    "vcc_ps_gtr": "/in16_input",
    "vtt_ps_gtr": "/in17_input",
}


def read_sysmon(device_base: str, hwmon_id: int) -> SysmonReading:
    """One-shot read of every AMS temperature and voltage rail."""
    values = {
        field: read_int_entry(device_base, attribute, hwmon_id)
        for field, attribute in SYSMON_ATTRIBUTES.items()
    }
    return SysmonReading(**values)
