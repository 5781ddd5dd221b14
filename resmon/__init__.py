"""resmon — background host and process resource monitor."""

__version__ = "0.1.0"
