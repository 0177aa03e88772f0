# formstate/core/actions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Mutation intents accepted by a dispatch sink.

Each intent is a pure description of a state transition. Field paths are
normalized on construction so stores can compare and apply them directly.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from formstate.core.data_management import to_path
from formstate.interfaces.types import FieldPath


@dataclass(frozen=True)
class _PathIntent:
    path: FieldPath = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", to_path(self.path))


@dataclass(frozen=True)
class SetValue(_PathIntent):
    value: Any = None


@dataclass(frozen=True)
class SetTouched(_PathIntent):
    touched: Any = True


@dataclass(frozen=True)
class SetError(_PathIntent):
    error: Any = None


@dataclass(frozen=True)
class SetWarning(_PathIntent):
    warning: Any = None


@dataclass(frozen=True)
class SetSuccess(_PathIntent):
    success: Any = None


@dataclass(frozen=True)
class SetAsyncError(_PathIntent):
    error: Any = None


@dataclass(frozen=True)
class SetAsyncWarning(_PathIntent):
    warning: Any = None


@dataclass(frozen=True)
class SetAsyncSuccess(_PathIntent):
    success: Any = None


@dataclass(frozen=True)
class Reset(_PathIntent):
    pass


@dataclass(frozen=True)
class PreValidate(_PathIntent):
    validator: Optional[Callable[[Any], Any]] = None


@dataclass(frozen=True)
class Validate(_PathIntent):
    validator: Optional[Callable[..., Any]] = None


@dataclass(frozen=True)
class AsyncValidate(_PathIntent):
    validator: Optional[Callable[..., Any]] = None


@dataclass(frozen=True)
class Format(_PathIntent):
    formatter: Optional[Callable[[Any], Any]] = None


@dataclass(frozen=True)
class StartValidatingField(_PathIntent):
    pass


@dataclass(frozen=True)
class DoneValidatingField(_PathIntent):
    pass


@dataclass(frozen=True)
class ClearValidationFailure(_PathIntent):
    pass


@dataclass(frozen=True)
class ValidationFailure(_PathIntent):
    error: Optional[BaseException] = None


@dataclass(frozen=True)
class SetAllValues:
    values: Any = None


@dataclass(frozen=True)
class SetFormState:
    state: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ResetAll:
    pass


@dataclass(frozen=True)
class ClearAll:
    pass


@dataclass(frozen=True)
class Submitting:
    submitting: bool = True


@dataclass(frozen=True)
class Submits:
    pass


@dataclass(frozen=True)
class Submitted:
    pass
