"""Trade journal analytics and insight engine."""

__version__ = "0.1.0"
