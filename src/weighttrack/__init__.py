"""Personal weight tracking with trend prediction."""

__version__ = "0.1.0"
