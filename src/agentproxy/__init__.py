"""Proxy between a browser client and a thread/run/message agent service."""

__version__ = "0.1.0"
