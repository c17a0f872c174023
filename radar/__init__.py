"""
Aircraft Radar Package.

Live aircraft tracking over a world map, built with requests, NumPy and Flask.

Modules:
    ingestion/    Telemetry fetch, state vector parsing and the refresh loop
    models/       Aircraft entities, snapshots and inspection view models
    api/          REST endpoints for the live snapshot, inspection and status
    surface.py    Map rendering boundary with pixel hit-testing
    inspection.py Pointer event handling and the telemetry overlay
    bootstrap.py  Initial map center from IP geolocation
    tracker.py    Top-level controller wiring the components together
    config.py     Centralized configuration from environment variables
"""

__version__ = '1.0.0'
