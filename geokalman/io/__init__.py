"""
geokalman I/O Package

YAML filter configuration and recorded track replay.
"""

from .config_loader import ConfigLoader, load_filter_config
from .track_loader import Track, load_track

__all__ = ["ConfigLoader", "load_filter_config", "Track", "load_track"]
