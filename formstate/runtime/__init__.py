"""
Runtime package: field registry, post-order async traversal and the
in-memory reference store.
"""

from .async_support import maybe_await, recurse_up_fields
from .graph import FieldNode, FieldTree
from .store import FormStore, initial_state

__all__ = ["FieldNode", "FieldTree", "FormStore", "initial_state", "maybe_await", "recurse_up_fields"]
