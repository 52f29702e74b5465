"""
Batch dispatch module.
"""

from app.dispatch.dispatcher import BatchDispatcher, DispatchError

__all__ = ["BatchDispatcher", "DispatchError"]
