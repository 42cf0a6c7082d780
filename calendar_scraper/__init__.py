"""Course calendar harvester."""

__version__ = "1.0.0"
