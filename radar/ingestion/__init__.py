"""
Data ingestion module for Aircraft Radar.

Handles fetching the aircraft state feed, parsing state vectors, and
keeping the rendered snapshot fresh.
"""

from radar.ingestion.telemetry_source import TelemetrySource
from radar.ingestion.state_vectors import parse_state_vector, transform_snapshot
from radar.ingestion.scheduler import RefreshScheduler, RetryPolicy, SchedulerState

__all__ = [
    'TelemetrySource',
    'parse_state_vector',
    'transform_snapshot',
    'RefreshScheduler',
    'RetryPolicy',
    'SchedulerState',
]
