"""System layer utility module."""

from .runtime import Runtime, build_runtime, get_runtime_stats, start_runtime, stop_runtime

__all__ = [
    "Runtime",
    "build_runtime",
    "start_runtime",
    "stop_runtime",
    "get_runtime_stats",
]
