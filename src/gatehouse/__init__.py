"""Token-gated account flows for web applications."""

__version__ = "0.1.0"
