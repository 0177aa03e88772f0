"""
Structural protocols and type aliases shared by the core and runtime packages.
"""

from .protocols import DispatchSink, FieldApi, StateReader, TriggerEvent
from .types import FieldPath, FieldRef, FormStateDict, PathSegment

__all__ = [
    "DispatchSink",
    "FieldApi",
    "StateReader",
    "TriggerEvent",
    "FieldPath",
    "FieldRef",
    "FormStateDict",
    "PathSegment",
]
