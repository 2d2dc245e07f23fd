"""Settings, key commands and time-point records of a live measurement session."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from imulive.config import MAIN_CONFIGURATION, ConfigError, config_reader
from imulive.quaternion import Quaternion, QuaternionTable

log = logging.getLogger(__name__)

DEFAULT_GMT_OFFSET = 2

_MS_PER_HOUR = 3_600_000
_MS_PER_MINUTE = 60_000
_MS_PER_SECOND = 1_000


class Command(Enum):
    """Actions the user triggers from the keyboard during a session."""

    QUIT = "X"
    SINGLE_IK = "Z"
    CALIBRATE = "C"
    START_CONTINUOUS = "N"
    STOP_CONTINUOUS = "M"
    START_SEND = "V"
    STOP_SEND = "B"
    REFERENCE_BASE_ROTATION = "L"


def command_for_key(key: str) -> Command | None:
    """Return the command bound to ``key`` (case-insensitive), or ``None``."""
    if len(key) != 1:
        raise ValueError(f"expected a single key, got {key!r}")
    try:
        return Command(key.upper())
    except ValueError:
        return None


class IMUType(Enum):
    """The kinds of orientation sources a session can read from."""

    SIMULATED = "simulated"
    XSENS = "xsens"
    DELSYS = "delsys"


def imu_type_for_manufacturer(name: str) -> IMUType:
    """Return the IMU type named by ``name``, falling back to simulated data."""
    try:
        return IMUType(name)
    except ValueError:
        return IMUType.SIMULATED


def _flag(root: str | Path, element: str) -> bool:
    return config_reader(root, MAIN_CONFIGURATION, element) == "true"


def _integer(root: str | Path, element: str) -> int:
    text = config_reader(root, MAIN_CONFIGURATION, element)
    try:
        return int(text)
    except ValueError as exc:
        raise ConfigError(f"<{element}> is not an integer: {text!r}") from exc


@dataclass
class SessionSettings:
    """The session options taken from the main configuration file."""

    save_ik_results: bool
    continuous_mode_ms_delay: int
    print_roll_pitch_yaw: bool
    reset_clock_on_continuous_mode: bool
    station_parent_body: str
    station_reference_body: str
    max_threads: int
    manufacturer: str
    max_buffer_size: int
    socket_port: int
    imu_placer_setup_file: str

    @property
    def enable_mirror_therapy(self) -> bool:
        """Mirror therapy runs whenever a station parent body is named."""
        return self.station_parent_body != "none"

    @property
    def run_emg_thread(self) -> bool:
        """EMG is read only from Delsys sensors."""
        return self.manufacturer == "delsys"

    @property
    def imu_type(self) -> IMUType:
        return imu_type_for_manufacturer(self.manufacturer)

    @classmethod
    def from_config(cls, root: str | Path) -> SessionSettings:
        """Read the settings from ``root/Config/MainConfiguration.xml``."""

        def text(element: str) -> str:
            return config_reader(root, MAIN_CONFIGURATION, element)

        return cls(
            save_ik_results=_flag(root, "save_ik_results"),
            continuous_mode_ms_delay=_integer(root, "continuous_mode_ms_delay"),
            print_roll_pitch_yaw=_flag(root, "print_roll_pitch_yaw"),
            reset_clock_on_continuous_mode=_flag(root, "reset_clock_on_continuous_mode"),
            station_parent_body=text("station_parent_body"),
            station_reference_body=text("station_reference_body"),
            max_threads=_integer(root, "threads"),
            manufacturer=text("IMU_manufacturer"),
            max_buffer_size=_integer(root, "max_buffer_size"),
            socket_port=_integer(root, "socket_port"),
            imu_placer_setup_file=text("imu_placer_setup_file"),
        )


def find_reference_quaternion(table: QuaternionTable, body_name: str) -> Quaternion | None:
    """Return the first-row orientation of the IMU on ``body_name``, or ``None``.

    The IMU is the column labelled ``<body_name>_imu``.
    """
    label = f"{body_name}_imu"
    if label not in table.labels:
        log.info(
            "Orientation not found! Make sure an IMU is measuring the orientation "
            "of station_reference_body."
        )
        return None
    values = table.column(label)
    if not values:
        raise IndexError("table has no rows")
    return values[0]


def _clock_parts(milliseconds: int, gmt_offset: int) -> tuple[int, int, int, int]:
    hours = (milliseconds // _MS_PER_HOUR) % 24 + gmt_offset
    minutes = (milliseconds // _MS_PER_MINUTE) % 60
    seconds = (milliseconds // _MS_PER_SECOND) % 60
    millis = milliseconds % 1000
    return hours, minutes, seconds, millis


def format_clock(milliseconds: int, gmt_offset: int = DEFAULT_GMT_OFFSET) -> str:
    """Return ``hours:minutes:seconds:milliseconds`` of an epoch time in milliseconds.

    The offset is added to the hour without wrapping it.
    """
    return ":".join(str(part) for part in _clock_parts(int(milliseconds), gmt_offset))


def time_points_file_name(start_ms: int, gmt_offset: int = DEFAULT_GMT_OFFSET) -> str:
    """Return the name of the time points file for a session started at ``start_ms``."""
    hours, minutes, _, _ = _clock_parts(int(start_ms), gmt_offset)
    return f"TimePoints-{hours}-{minutes}.txt"


def write_time_points(
    path: str | Path,
    start_ms: int,
    calib_ms: int | None,
    calib_time: float,
    end_ms: int,
    gmt_offset: int = DEFAULT_GMT_OFFSET,
) -> None:
    """Write the start, calibration and end times of a session to ``path``.

    A session that was never calibrated has ``calib_ms`` of ``None``, written as time 0.
    """
    lines = [
        "Main loop start time:",
        format_clock(start_ms, gmt_offset),
        "Calibration time:",
        format_clock(calib_ms if calib_ms is not None else 0, gmt_offset),
        "Calibration time in time series table:",
        format(float(calib_time), "g"),
        "End time:",
        format_clock(end_ms, gmt_offset),
    ]
    Path(path).write_text("\n".join(lines) + "\n", encoding="utf-8")