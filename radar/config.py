"""
Configuration management for Aircraft Radar.

Loads settings from environment variables with sensible defaults.
All configuration is centralized here to avoid magic strings scattered
throughout the codebase.
"""

import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

load_dotenv()


def _parse_location(value: str) -> Optional[Tuple[float, float]]:
    """Parse 'lat,lon' string into tuple, or None if empty/invalid."""
    if not value:
        return None
    try:
        lat, lon = value.split(',')
        return (float(lat.strip()), float(lon.strip()))
    except (ValueError, AttributeError):
        return None


def _parse_viewport(value: str) -> Tuple[int, int]:
    """Parse 'WIDTHxHEIGHT' string into tuple, falling back to 1280x800."""
    try:
        width, height = value.lower().split('x')
        return (int(width), int(height))
    except (ValueError, AttributeError):
        return (1280, 800)


@dataclass(frozen=True)
class TelemetryConfig:
    """Aircraft state feed configuration."""
    url: str = os.getenv('TELEMETRY_URL', 'https://opensky-network.org/api/states/all')
    timeout_seconds: float = float(os.getenv('TELEMETRY_TIMEOUT_SECONDS', '30'))


@dataclass(frozen=True)
class RefreshConfig:
    """Refresh loop timing and failure policy."""
    interval_ms: int = int(os.getenv('REFRESH_INTERVAL_MS', '5000'))

    # 'backoff' keeps retrying, 'stop' halts the loop on the first failure
    on_error: str = os.getenv('REFRESH_ON_ERROR', 'backoff').lower()
    initial_delay_ms: int = int(os.getenv('RETRY_INITIAL_DELAY_MS', '5000'))
    max_delay_ms: int = int(os.getenv('RETRY_MAX_DELAY_MS', '60000'))
    backoff_factor: float = float(os.getenv('RETRY_BACKOFF_FACTOR', '2.0'))

    @property
    def fail_stop(self) -> bool:
        return self.on_error == 'stop'


@dataclass(frozen=True)
class GeolocationConfig:
    """IP geolocation used to center the map at startup."""
    url: str = os.getenv('GEOLOCATION_URL', 'https://api.ipdata.co/')
    api_key: Optional[str] = os.getenv('GEOLOCATION_API_KEY', 'test') or None
    timeout_seconds: float = 10.0


@dataclass(frozen=True)
class MapConfig:
    """Map view and aircraft icon geometry."""
    initial_zoom: int = int(os.getenv('MAP_INITIAL_ZOOM', '9'))
    viewport: Tuple[int, int] = _parse_viewport(os.getenv('MAP_VIEWPORT', '1280x800'))
    tile_size: int = 256

    # Aircraft icon is a 128px image drawn at 20% scale
    icon_size_px: int = 128
    icon_scale: float = 0.2

    @property
    def icon_radius_px(self) -> float:
        return self.icon_size_px * self.icon_scale / 2


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    telemetry: TelemetryConfig
    refresh: RefreshConfig
    geolocation: GeolocationConfig
    map: MapConfig

    # User location (None = auto-detect via IP)
    user_location: Optional[Tuple[float, float]]

    # Flask settings
    secret_key: str
    debug: bool


def load_config() -> AppConfig:
    """Load and validate all configuration."""
    return AppConfig(
        telemetry=TelemetryConfig(),
        refresh=RefreshConfig(),
        geolocation=GeolocationConfig(),
        map=MapConfig(),
        user_location=_parse_location(os.getenv('USER_LOCATION', '')),
        secret_key=os.getenv('SECRET_KEY', 'dev-key-change-in-prod'),
        debug=os.getenv('FLASK_DEBUG', '0') == '1',
    )


# Singleton instance
config = load_config()
