"""Quaternion tables, configuration, time series files, simulated IMUs, buffering and a TCP number server."""

__version__ = "0.1.0"