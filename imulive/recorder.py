"""Recording measured orientations and writing them out as a time series."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Sequence

from imulive.quaternion import Quaternion
from imulive.timeseries_io import write_quaternion_time_series

log = logging.getLogger(__name__)

DEFAULT_MAX_POINTS = 1_000_000


def _as_quaternion(value: Any) -> Quaternion:
    if isinstance(value, Quaternion):
        return value
    w, x, y, z = value
    return Quaternion(float(w), float(x), float(y), float(z))


def format_sensor_quaternion(quaternion: Any) -> str:
    """Return ``~[w,x,y,z]`` with six decimals per element.

    Accepts a :class:`Quaternion` or a ``(w, x, y, z)`` sequence.
    """
    q = _as_quaternion(quaternion)
    return "~[" + ",".join(format(value, "f") for value in q) + "]"


class QuaternionRecorder:
    """Collects time-stamped quaternion rows, one quaternion per labelled sensor."""

    def __init__(
        self,
        labels: Iterable[str],
        max_points: int = DEFAULT_MAX_POINTS,
        precision: int = 15,
    ) -> None:
        self.labels = list(labels)
        self.max_points = max_points
        self.precision = precision
        self._times: list[float] = []
        self._rows: list[list[Quaternion]] = []

    def __len__(self) -> int:
        return len(self._times)

    @property
    def times(self) -> list[float]:
        return list(self._times)

    @property
    def rows(self) -> list[list[Quaternion]]:
        return [list(row) for row in self._rows]

    def record(self, time: float, quaternions: Sequence[Any]) -> None:
        """Store the quaternions measured at ``time``, one per label."""
        row = [_as_quaternion(value) for value in quaternions]
        if len(row) != len(self.labels):
            raise ValueError(
                f"{len(row)} quaternions but {len(self.labels)} labelled sensors"
            )
        self._times.append(float(time))
        self._rows.append(row)

    def save_to_file(self, path: str | Path) -> bool:
        """Write the recording to ``path``; return whether it was written.

        Nothing is written when more than ``max_points`` rows were recorded.
        """
        if len(self._times) > self.max_points or len(self._rows) > self.max_points:
            log.warning(
                "In a normal situation we would save quaternions to file now, but because "
                "there are %d data points, for the sake of hard drive space we won't do it.",
                len(self._times),
            )
            return False
        log.info("Saving quaternion time series to file...")
        text_rows = [[format_sensor_quaternion(q) for q in row] for row in self._rows]
        write_quaternion_time_series(path, self.labels, self._times, text_rows, self.precision)
        return True