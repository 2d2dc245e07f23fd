[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "imulive"
version = "0.1.0"
description = "IMU orientation quaternions, time series files, simulated sensors, buffering and a TCP number server for live motion analysis"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "imu",
    "quaternion",
    "time-series",
    "biomechanics",
    "motion-capture",
    "real-time",
    "socket",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Healthcare Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Medical Science Apps.",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["imulive"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
