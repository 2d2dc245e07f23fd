"""Quaternions and single-valued time series tables of quaternions."""

from __future__ import annotations

import bisect
import math
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Quaternion:
    """An orientation quaternion stored as (w, x, y, z)."""

    w: float
    x: float
    y: float
    z: float

    def __iter__(self):
        return iter((self.w, self.x, self.y, self.z))

    @property
    def norm(self) -> float:
        return math.sqrt(self.w**2 + self.x**2 + self.y**2 + self.z**2)

    def normalized(self) -> Quaternion:
        """Return the unit quaternion pointing the same way as this one."""
        norm = self.norm
        if norm == 0.0:
            raise ValueError("cannot normalize a zero quaternion")
        return Quaternion(self.w / norm, self.x / norm, self.y / norm, self.z / norm)

    def format(self) -> str:
        """Return the text form used in quaternion time series files."""
        return "~[" + ",".join(format(value, "g") for value in self) + "]"

    def __str__(self) -> str:
        return self.format()


def parse_quaternion(text: str) -> Quaternion:
    """Parse a quaternion written as ``~[w,x,y,z]``."""
    parts = text.strip().split(",")
    if len(parts) != 4:
        raise ValueError(f"expected four quaternion elements in {text!r}")
    first = parts[0].strip()
    if first.startswith("~["):
        first = first[2:]
    elif first.startswith("["):
        first = first[1:]
    last = parts[3].split("]", 1)[0]
    try:
        return Quaternion(float(first), float(parts[1]), float(parts[2]), float(last))
    except ValueError as exc:
        raise ValueError(f"malformed quaternion {text!r}") from exc


@dataclass
class QuaternionTable:
    """Rows of quaternions, one per time point, in labelled columns."""

    times: list[float]
    rows: list[list[Quaternion]]
    labels: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.times = [float(t) for t in self.times]
        self.rows = [list(row) for row in self.rows]
        self.labels = list(self.labels)
        if len(self.times) != len(self.rows):
            raise ValueError(
                f"{len(self.times)} time values but {len(self.rows)} rows"
            )
        if len(set(self.labels)) != len(self.labels):
            raise ValueError("column labels must be unique")
        for row in self.rows:
            if len(row) != len(self.labels):
                raise ValueError(
                    f"row has {len(row)} values but there are {len(self.labels)} labels"
                )

    def __len__(self) -> int:
        return len(self.times)

    def nearest_row_index(self, time: float) -> int:
        """Return the index of the row whose time is closest to ``time``."""
        if not self.times:
            raise IndexError("table has no rows")
        pos = bisect.bisect_left(self.times, time)
        if pos == 0:
            return 0
        if pos == len(self.times):
            return len(self.times) - 1
        if self.times[pos] - time < time - self.times[pos - 1]:
            return pos
        return pos - 1

    def remove_row(self, index: int) -> None:
        """Remove the row at ``index`` together with its time value."""
        del self.rows[index]
        del self.times[index]

    def remove_column(self, label: str) -> None:
        """Remove the column named ``label``."""
        try:
            position = self.labels.index(label)
        except ValueError:
            raise KeyError(label) from None
        del self.labels[position]
        for row in self.rows:
            del row[position]

    def column(self, label: str) -> list[Quaternion]:
        """Return all values of the column named ``label``."""
        try:
            position = self.labels.index(label)
        except ValueError:
            raise KeyError(label) from None
        return [row[position] for row in self.rows]

    def row(self, index: int) -> list[Quaternion]:
        """Return a copy of the row at ``index``."""
        return list(self.rows[index])