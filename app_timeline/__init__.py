"""Application timeline: sync/capacity metrics and a filterable event view."""

__version__ = "0.1.0"
