"""Reading settings from the XML configuration files."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

MAIN_CONFIGURATION = "MainConfiguration.xml"


class ConfigError(Exception):
    """A configuration file is missing, malformed or lacks a required entry."""


def _load_root(path: Path) -> ET.Element:
    try:
        return ET.parse(path).getroot()
    except OSError as exc:
        raise ConfigError(f"cannot read {path}: {exc}") from exc
    except ET.ParseError as exc:
        raise ConfigError(f"malformed XML in {path}: {exc}") from exc


def _required(element: ET.Element, tag: str) -> ET.Element:
    child = element.find(tag)
    if child is None:
        raise ConfigError(f"element <{element.tag}> has no required child <{tag}>")
    return child


def _value(element: ET.Element) -> str:
    return (element.text or "").strip()


def config_reader(root: str | Path, file_name: str, element_name: str) -> str:
    """Return the text of ``element_name`` under the root of ``root/Config/file_name``."""
    document = _load_root(Path(root) / "Config" / file_name)
    return _value(_required(document, element_name))


def config_reader_vector(root: str | Path, file_name: str, element_name: str) -> list[str]:
    """Return the whitespace-separated words of a configuration element."""
    return config_reader(root, file_name, element_name).split()


def sensor_to_opensim_rotations(root: str | Path) -> tuple[float, float, float]:
    """Return the sensor-to-OpenSim rotations given in the IMU placer setup file."""
    setup_file = config_reader(root, MAIN_CONFIGURATION, "imu_placer_setup_file")
    document = _load_root(Path(root) / "Config" / setup_file)
    placer = _required(document, "IMUPlacer")
    words = _value(_required(placer, "sensor_to_opensim_rotations")).split()
    if len(words) != 3:
        raise ConfigError(f"expected three rotation values, got {words!r}")
    try:
        x, y, z = (float(word) for word in words)
    except ValueError as exc:
        raise ConfigError(f"non-numeric rotation values {words!r}") from exc
    return x, y, z


def sensor_id_to_label(sensor_id: str, mappings_file: str | Path) -> str:
    """Return the model name mapped to a sensor serial, or ``"NotFound"``."""
    document = _load_root(Path(mappings_file))
    settings = _required(document, "XsensDataReaderSettings")
    sensors = _required(settings, "ExperimentalSensors")
    for sensor in sensors.findall("ExperimentalSensor"):
        name = sensor.get("name")
        if name is None:
            raise ConfigError("<ExperimentalSensor> has no required attribute 'name'")
        name_in_model = _required(sensor, "name_in_model")
        # the serial is stored with a leading underscore
        if name[1:] == sensor_id:
            return _value(name_in_model)
    return "NotFound"