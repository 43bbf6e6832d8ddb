"""Package version (kept separate so setup.py can read it without importing)."""

__version__ = "0.3.0"
