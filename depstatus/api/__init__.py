"""HTTP exposition — JSON health endpoint and HTML status page."""

from .server import create_app
