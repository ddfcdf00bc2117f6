"""Projection of decoded events into entities.

This package provides:
- EventProjector: ordered log consumer wiring decoder, selection trees and store
- HANDLERS: event name → handler mapping
"""

from pdpind.projection.handlers import HANDLERS, ProjectionContext
from pdpind.projection.projector import EventProjector, OutOfOrderEventError, ProjectionStats

__all__ = [
    "EventProjector",
    "OutOfOrderEventError",
    "ProjectionStats",
    "ProjectionContext",
    "HANDLERS",
]
