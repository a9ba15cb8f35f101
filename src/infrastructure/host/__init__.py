"""Headless host adapters.

File and console implementations of the host ports, so a run can be driven
from the command line instead of a CAD application.
"""

from .console import FixedSpacingSource, LoggingNotificationSink
from .output import XyzFileSink
from .selection import FileBoundary, GeoJsonSelectionSource

__all__ = [
    "FileBoundary",
    "FixedSpacingSource",
    "GeoJsonSelectionSource",
    "LoggingNotificationSink",
    "XyzFileSink",
]
