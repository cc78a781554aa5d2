"""authorcheck - validate declared authors against git history."""

__version__ = "0.1.0"
