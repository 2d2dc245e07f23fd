"""A stand-in IMU reader that produces identity or random orientations."""

from __future__ import annotations

import logging
import random
import time
from pathlib import Path
from typing import Iterable

from imulive.quaternion import Quaternion, QuaternionTable
from imulive.timeseries_io import write_quaternion_time_series

log = logging.getLogger(__name__)

IDENTITY = Quaternion(1.0, 0.0, 0.0, 0.0)


class SimulatedDataReader:
    """Generates a one-row quaternion table per update for a fixed set of IMU labels.

    The data make no sense for motion analysis but exercise the rest of the
    program without sensors.
    """

    def __init__(
        self,
        labels: Iterable[str],
        is_random: bool = True,
        save_quaternions: bool = False,
        rng: random.Random | None = None,
    ) -> None:
        self.labels = list(labels)
        self.is_random = is_random
        self.save_quaternions = save_quaternions
        self.rng = rng if rng is not None else random.Random()
        self.output_precision = 15
        self.max_saved_points = 100_000
        self._table = QuaternionTable([], [], self.labels)
        self._times: list[float] = []
        self._rows: list[list[Quaternion]] = []
        self._start = time.perf_counter()
        self._elapsed = 0.0

    @property
    def table(self) -> QuaternionTable:
        """The table produced by the latest update."""
        return self._table

    @property
    def time(self) -> float:
        """Seconds from creation to the latest recorded update."""
        return self._elapsed

    @property
    def recorded_times(self) -> list[float]:
        return list(self._times)

    @property
    def recorded_rows(self) -> list[list[Quaternion]]:
        return [list(row) for row in self._rows]

    def _generate_quaternion(self) -> Quaternion:
        while True:
            candidate = Quaternion(*(float(self.rng.randrange(100)) for _ in range(4)))
            if candidate.norm > 0.0:
                return candidate.normalized()

    def _update(self, quaternions: list[Quaternion]) -> None:
        if self.save_quaternions:
            self._rows.append(list(quaternions))
            self._elapsed = time.perf_counter() - self._start
            self._times.append(self._elapsed)
        self._table = QuaternionTable([0.0], [quaternions], self.labels)

    def update_quaternion_table(self) -> None:
        """Produce a new table of random or identity quaternions."""
        if self.is_random:
            self.generate_random_quaternions()
        else:
            self.generate_identity_quaternions()

    def generate_identity_quaternions(self) -> None:
        """Produce a table in which every IMU has the identity orientation."""
        self._update([IDENTITY for _ in self.labels])

    def generate_random_quaternions(self) -> None:
        """Produce a table of random unit quaternions."""
        self._update([self._generate_quaternion() for _ in self.labels])

    def close_connection(self) -> None:
        """Report the end of the simulated connection; there is nothing to close."""
        log.info("Simulated connection closed!")

    def save_quaternions_to_file(self, path: str | Path) -> bool:
        """Write the recorded time series to ``path``; return whether it was written."""
        if len(self._times) > self.max_saved_points or len(self._rows) > self.max_saved_points:
            log.warning(
                "In a normal situation we would save quaternions to file now, but because "
                "there are %d data points, for the sake of hard drive space we won't do it.",
                len(self._times),
            )
            return False
        log.info("Saving quaternion time series to file...")
        write_quaternion_time_series(
            path, self.labels, self._times, self._rows, self.output_precision
        )
        return True