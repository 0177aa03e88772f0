# formstate/interfaces/protocols.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Awaitable, Callable, Optional, Protocol, runtime_checkable

from formstate.interfaces.types import FormStateDict, StateListener


@runtime_checkable
class DispatchSink(Protocol):
    """
    Channel accepting state-mutation intents.

    Runtime Invariants:
    - Intents are accepted synchronously and applied in dispatch order.
    - The return value is intent-specific; asynchronous intents return an awaitable.

    Error Handling:
    - Unknown intents raise UnknownIntentError.
    """

    def dispatch(self, intent: Any) -> Any:
        """Accept an intent describing a state transition."""
        ...


@runtime_checkable
class StateReader(Protocol):
    """
    Synchronous read access to the current form state.

    Runtime Invariants:
    - The returned state reflects every intent accepted so far.
    - Callers must not mutate the returned document.
    """

    @property
    def state(self) -> FormStateDict:
        """The live state document."""
        ...

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a (previous, next) listener; returns an unsubscribe callable."""
        ...


@runtime_checkable
class FieldApi(Protocol):
    """
    Capability set a registered field exposes to the form.

    Each pass is bound to the field's own path and own validator. Passing
    ``submitting=True`` bypasses the validate-on-submit suppression.
    """

    nested_field: bool

    def pre_validate(self, submitting: bool = False) -> None: ...

    def validate(self, submitting: bool = False) -> None: ...

    def async_validate(self, submitting: bool = False) -> Optional[Awaitable[Any]]: ...


@runtime_checkable
class TriggerEvent(Protocol):
    """
    Event that triggered a submit. Only the prevent-default capability is used.
    """

    def prevent_default(self) -> None: ...
