"""Local persistence for drawings and room snapshots."""

__version__ = "0.1.0"
