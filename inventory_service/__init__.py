"""
Inventory service core package.

This package currently focuses on the loading subsystem. It exposes
dataclasses for inventory items and load results, the error taxonomy,
a pure record parser, an in-memory store guarded by a reader/writer lock,
and a threaded pipeline that bulk-loads a delimited inventory file through
feeder, parser workers and a collector.
"""
