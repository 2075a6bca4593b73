"""AutoApply - job application tracking and resume fit scoring."""

__version__ = "0.1.0"
