"""Service building blocks: monitoring wrappers, call metrics, build information and helpers."""

__version__ = "0.1.0"