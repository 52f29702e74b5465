"""Utility modules."""

from .langfuse_tracker import LangfuseTracker
from .observers import CompositeObserver, DispatchObserver, LoggingObserver
from .cors import PreflightCORSMiddleware

__all__ = [
    "LangfuseTracker",
    "CompositeObserver",
    "DispatchObserver",
    "LoggingObserver",
    "PreflightCORSMiddleware",
]
