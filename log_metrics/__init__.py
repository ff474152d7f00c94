"""Forward CSV statistics log lines to a metrics backend."""

__version__ = "0.1.0"
