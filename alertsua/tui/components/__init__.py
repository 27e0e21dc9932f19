"""Render components: map, region list and diagnostics."""

from .base import Component
from .diagnostic_view import DiagnosticView
from .list_view import ListView
from .map_view import MapView

__all__ = ["Component", "DiagnosticView", "ListView", "MapView"]
