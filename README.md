# imulive

Building blocks for live processing of orientation data from inertial
measurement units (IMUs): quaternions and small time series tables, XML
configuration reading, tab-separated time series files, a simulated sensor
source, a bounded thread pool, a producer/consumer orientation buffer, a TCP
server that streams numbers to one client, and helpers for a keyboard-driven
measurement session.

The package uses only the Python standard library and supports Python 3.10
and later.

## Modules

### `imulive.quaternion`

- `Quaternion(w, x, y, z)` – a frozen dataclass. `norm`, `normalized()`
  (raises `ValueError` for a zero quaternion) and `format()`, which gives the
  text form `~[w,x,y,z]`; `str()` gives the same.
- `parse_quaternion(text)` – reads `~[w,x,y,z]` (or `[w,x,y,z]`) back;
  raises `ValueError` on malformed input.
- `QuaternionTable(times, rows, labels)` – rows of quaternions, one per time
  point, in uniquely labelled columns. Offers `nearest_row_index(time)`,
  `remove_row(index)`, `remove_column(label)`, `column(label)`, `row(index)`
  and `len()`.

```python
from imulive.quaternion import Quaternion, QuaternionTable, parse_quaternion

quat = parse_quaternion("~[1,0,0,0]")
print(quat.format())                      # ~[1,0,0,0]

table = QuaternionTable([0.0, 0.5, 1.0], [[quat], [quat], [quat]], ["pelvis_imu"])
print(table.nearest_row_index(0.6))       # 1
```

### `imulive.config`

Configuration files live in a `Config` directory below a root directory you
pass in. Every failure (missing file, bad XML, missing element) raises
`ConfigError`.

- `config_reader(root, file_name, element_name)` – text of a child of the
  root element of `root/Config/file_name`, stripped.
- `config_reader_vector(root, file_name, element_name)` – the same text split
  on whitespace.
- `sensor_to_opensim_rotations(root)` – reads `imu_placer_setup_file` from
  `MainConfiguration.xml`, then the three numbers in
  `<IMUPlacer><sensor_to_opensim_rotations>` of that file.
- `sensor_id_to_label(sensor_id, mappings_file)` – looks up a sensor serial
  in a mappings file and returns its `name_in_model`, or `"NotFound"`.

A mappings file looks like this; the `name` attribute holds the serial
behind one leading character:

```xml
<Root>
  <XsensDataReaderSettings>
    <ExperimentalSensors>
      <ExperimentalSensor name="_00000001">
        <name_in_model>pelvis_imu</name_in_model>
      </ExperimentalSensor>
    </ExperimentalSensors>
  </XsensDataReaderSettings>
</Root>
```

### `imulive.timeseries_io`

- `parse_tokens(text, delimiter)` – split on a non-empty delimiter.
- `write_quaternion_time_series(path, labels, times, rows, precision=15)` –
  writes a description line, a `Time (s)` label line and one tab-separated
  line per time point.
- `quaternion_table_from_text_file(path)` – reads such a file back into a
  `QuaternionTable`.
- `save_time_series_to_txt_file(times, data, path, description, labels)` –
  writes `time<TAB>value` lines after the given description and labels.
- `clip_table(table, start_time, end_time)` – keeps only the rows between the
  rows nearest the two times, in place.
- `clip_dependent_data(table, labels_to_keep)` – removes every other column,
  in place.

### `imulive.recorder`

- `QuaternionRecorder(labels, max_points=1_000_000, precision=15)` –
  `record(time, quaternions)` stores one quaternion (or `(w, x, y, z)`
  sequence) per label; `save_to_file(path)` writes the recording and returns
  `False` without writing when more than `max_points` rows were recorded.
- `format_sensor_quaternion(quaternion)` – `~[w,x,y,z]` with six decimals.

### `imulive.simulated`

`SimulatedDataReader(labels, is_random=True, save_quaternions=False, rng=None)`
produces a one-row `QuaternionTable` per call to `update_quaternion_table()`:
random unit quaternions, or identity quaternions when `is_random` is false
(`generate_random_quaternions()` and `generate_identity_quaternions()` can be
called directly). The latest table is `table` and the latest time stamp
`time`. With `save_quaternions` set, every update is recorded and
`save_quaternions_to_file(path)` writes it out (refusing above 100 000 points).

```python
import random
from imulive.simulated import SimulatedDataReader

reader = SimulatedDataReader(["pelvis_imu", "femur_r_imu"], rng=random.Random(1))
reader.update_quaternion_table()
print(reader.table.labels)
reader.close_connection()
```

### `imulive.threadpool`

`ThreadPoolContainer(max_threads)` runs offered functions on worker threads
and keeps at most `max_threads` tasks tracked; `offer_future(function, *args,
**kwargs)` waits for a finished task to drop when the pool is full and returns
the new `Future`. `wait_for_finish()` waits for every task, `shutdown()` also
releases the workers, and the object is a context manager.

```python
from imulive.threadpool import ThreadPoolContainer

with ThreadPoolContainer(4) as pool:
    futures = [pool.offer_future(pow, 2, n) for n in range(10)]
print([f.result() for f in futures])
```

### `imulive.buffer`

- `OrientationBuffer(max_size)` – a thread-safe FIFO of `(time, table)`
  pairs; `push` drops the oldest entry when full, `pop` raises `IndexError`
  when empty, `clear` empties it.
- `producer_loop(reader, buffer, delay_ms, should_run)` – calls
  `reader.update_quaternion_table()` repeatedly and pushes `reader.time` and
  `reader.table` whenever more than `delay_ms` milliseconds have passed since
  the last push. Returns the number of pushes.
- `consumer_loop(buffer, pool, handler, should_run)` – pops entries and
  offers `handler(table, time, order_index)` to a `ThreadPoolContainer`, with
  order indices counting from 1. Returns the number dispatched.

Both loops run until `should_run()` returns false; `SimulatedDataReader`
serves as a reader.

### `imulive.server`

`Server(port, datagram_port=-1, use_acks=True, verbose=False)` listens on a
TCP port (`port` gives the bound port, so `0` picks a free one).
`connect()` accepts one client, whose first byte selects native (zero) or
reversed byte order. It offers `send_string`, `send_bytes`, `send_ints`
(32-bit), `send_floats`, `send_doubles` and `recv_string(max_len,
terminator="\n")`, `recv_bytes(length)`, `recv_ints(count)`,
`recv_floats(count)`, `recv_doubles(count)`, plus `close()` and use as a
context manager. With `use_acks`, every send is followed by waiting for one
byte from the client and then sending the byte 42; every receive is followed
by sending 42 and then waiting for one byte. Socket failures raise
`ServerError`. The datagram port is stored but not used.

### `imulive.session`

- `Command` and `command_for_key(key)` – the keys X (quit), Z (single IK),
  C (calibrate), N/M (start/stop continuous mode), V/B (start/stop send mode)
  and L (reference base rotation), case-insensitive; other keys give `None`.
- `IMUType` and `imu_type_for_manufacturer(name)` – `simulated`, `xsens` or
  `delsys`, falling back to simulated.
- `SessionSettings.from_config(root)` – reads `save_ik_results`,
  `continuous_mode_ms_delay`, `print_roll_pitch_yaw`,
  `reset_clock_on_continuous_mode`, `station_parent_body`,
  `station_reference_body`, `threads`, `IMU_manufacturer`, `max_buffer_size`,
  `socket_port` and `imu_placer_setup_file` from `MainConfiguration.xml`;
  `enable_mirror_therapy`, `run_emg_thread` and `imu_type` are derived.
- `find_reference_quaternion(table, body_name)` – first-row quaternion of the
  `<body_name>_imu` column, or `None`.
- `format_clock(milliseconds, gmt_offset=2)`, `time_points_file_name(start_ms,
  gmt_offset=2)` and `write_time_points(path, start_ms, calib_ms, calib_time,
  end_ms, gmt_offset=2)` – the session's start, calibration and end times.

```python
from imulive.session import Command, command_for_key, time_points_file_name

assert command_for_key("c") is Command.CALIBRATE
print(time_points_file_name(0))           # TimePoints-2-0.txt
```

## What the package does not do

- It has no command-line program and no interactive session loop; the
  session helpers are pieces for building one.
- It does not talk to real IMU hardware. `IMUType.XSENS` and
  `IMUType.DELSYS` only name the manufacturers; the only orientation source
  included is `SimulatedDataReader`.
- It does not calibrate models or solve inverse kinematics; the buffer and
  thread pool hand tables to a handler you supply.

## Running the tests

```
pip install -e ".[test]"
pytest
```