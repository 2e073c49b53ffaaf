"""depstatus — dependency health checks with a JSON endpoint and an HTML status page."""

__version__ = "0.1.0"
