"""Reading, writing and trimming time series stored as tab-separated text."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Sequence

from imulive.quaternion import QuaternionTable, parse_quaternion

log = logging.getLogger(__name__)

QUATERNION_HEADER = "Time series of measured orientation data in quaternions:"
TIME_LABEL = "Time (s)"


def _general(value: float | int) -> str:
    """Format a number the way a default text stream prints it."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return format(value, "g")


def parse_tokens(text: str, delimiter: str) -> list[str]:
    """Split ``text`` into the tokens separated by ``delimiter``."""
    if not delimiter:
        raise ValueError("delimiter must not be empty")
    return text.split(delimiter)


def quaternion_table_from_text_file(path: str | Path) -> QuaternionTable:
    """Build a quaternion table from a quaternion time series text file.

    The first line is a description, the second holds the labels (the first
    of which names the time column) and every further line holds a time value
    followed by one quaternion per label, all separated by tabs.
    """
    path = Path(path)
    log.info("Reading from: %s", path)
    labels: list[str] | None = None
    times: list[float] = []
    rows = []
    with path.open(encoding="utf-8") as handle:
        for number, line in enumerate(handle, start=1):
            line = line.rstrip("\r\n")
            if number == 1:
                continue
            if number == 2:
                labels = [token.strip(" ") for token in parse_tokens(line, "\t")[1:]]
                continue
            if not line.strip():
                continue
            time_text, *quaternion_texts = parse_tokens(line, "\t")
            try:
                times.append(float(time_text))
            except ValueError as exc:
                raise ValueError(f"line {number}: bad time value {time_text!r}") from exc
            rows.append([parse_quaternion(text) for text in quaternion_texts])
    if labels is None:
        raise ValueError(f"{path} has no label line")
    if not rows:
        raise ValueError(f"{path} holds no data rows")
    return QuaternionTable(times, rows, labels)


def save_time_series_to_txt_file(
    times: Iterable[float],
    data: Iterable[float],
    path: str | Path,
    description: str,
    labels: str,
) -> None:
    """Write a description, a label line and one ``time<TAB>value`` line per point."""
    times = list(times)
    data = list(data)
    if len(times) != len(data):
        raise ValueError(f"{len(times)} time values but {len(data)} data values")
    path = Path(path)
    with path.open("w", encoding="utf-8", newline="") as handle:
        handle.write(description)
        handle.write(labels)
        for time_value, data_value in zip(times, data):
            handle.write(f"\n{_general(time_value)}\t{_general(data_value)}")
    log.info("Data written to file %s", path)


def write_quaternion_time_series(
    path: str | Path,
    labels: Sequence[str],
    times: Sequence[float],
    rows: Sequence[Sequence[object]],
    precision: int = 15,
) -> None:
    """Write a quaternion time series file.

    Times are written with ``precision`` significant digits; each quaternion
    is written through ``str``, so rows may hold quaternions or ready text.
    """
    if len(times) != len(rows):
        raise ValueError(f"{len(times)} time values but {len(rows)} rows")
    path = Path(path)
    with path.open("w", encoding="utf-8", newline="") as handle:
        handle.write(QUATERNION_HEADER + "\n")
        handle.write(TIME_LABEL)
        for label in labels:
            handle.write(f"\t{label}")
        for time_value, row in zip(times, rows):
            handle.write("\n" + format(time_value, f".{precision}g"))
            for quaternion in row:
                handle.write(f"\t{quaternion}")
    log.info("Quaternion time series written to file %s", path)


def clip_table(table: QuaternionTable, start_time: float, end_time: float) -> QuaternionTable:
    """Drop the rows outside the rows nearest to ``start_time`` and ``end_time``."""
    start_index = table.nearest_row_index(start_time)
    end_index = table.nearest_row_index(end_time)
    if start_index > end_index:
        raise ValueError("start time lies after end time")
    log.info(
        "Preparing to clip the time series table from %d rows to %d rows.",
        len(table),
        end_index - start_index + 1,
    )
    for _ in range(len(table) - end_index - 1):
        table.remove_row(end_index + 1)
    for _ in range(start_index):
        table.remove_row(0)
    log.info("Clipping done. Time series table now has %d rows.", len(table))
    return table


def clip_dependent_data(table: QuaternionTable, labels_to_keep: Iterable[str]) -> QuaternionTable:
    """Remove every column whose label is not in ``labels_to_keep``."""
    keep = set(labels_to_keep)
    log.info(
        "Initial quaternion time series table has %d dependent columns, "
        "but we aim to keep %d dependent columns.",
        len(table.labels),
        len(keep),
    )
    for label in list(table.labels):
        if label not in keep:
            table.remove_column(label)
    log.info("The quaternion time series table now has %d dependent columns.", len(table.labels))
    return table