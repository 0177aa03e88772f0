# formstate/runtime/store.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from formstate.core import actions
from formstate.core.data_management import get_in, set_in, snapshot, unset_in
from formstate.core.errors import AsyncValidationError, UnknownIntentError
from formstate.interfaces.types import FormStateDict, StateListener
from formstate.runtime.async_support import maybe_await

logger = logging.getLogger(__name__)

_RESULT_BUCKETS = ("touched", "errors", "warnings", "successes", "asyncErrors", "asyncWarnings", "asyncSuccesses")


def initial_state(default_values: Optional[Mapping[str, Any]] = None) -> FormStateDict:
    """Build a fresh form state document."""
    return {
        "values": snapshot(dict(default_values)) if default_values else {},
        "touched": {},
        "errors": {},
        "warnings": {},
        "successes": {},
        "asyncErrors": {},
        "asyncWarnings": {},
        "asyncSuccesses": {},
        "validating": {},
        "validationFailed": {},
        "validationFailures": 0,
        "asyncValidations": 0,
        "submitted": False,
        "submits": 0,
        "submitting": False,
    }


def _with(state: FormStateDict, **changes: Any) -> FormStateDict:
    next_state = dict(state)
    next_state.update(changes)
    return next_state


class _Reducer:
    """
    Internal table of pure state transitions, one per plain intent type.
    Validation intents are not here; they run validators and re-dispatch.
    """

    def __init__(self, default_values: Optional[Mapping[str, Any]]) -> None:
        self._default_values = default_values
        self._handlers: Dict[type, Callable[[FormStateDict, Any], FormStateDict]] = {
            actions.SetValue: lambda s, a: _with(s, values=set_in(s["values"], a.path, a.value)),
            actions.SetAllValues: lambda s, a: _with(s, values=a.values),
            actions.SetTouched: lambda s, a: _with(s, touched=set_in(s["touched"], a.path, a.touched)),
            actions.SetError: lambda s, a: _with(s, errors=set_in(s["errors"], a.path, a.error)),
            actions.SetWarning: lambda s, a: _with(s, warnings=set_in(s["warnings"], a.path, a.warning)),
            actions.SetSuccess: lambda s, a: _with(s, successes=set_in(s["successes"], a.path, a.success)),
            actions.SetAsyncError: lambda s, a: _with(s, asyncErrors=set_in(s["asyncErrors"], a.path, a.error)),
            actions.SetAsyncWarning: lambda s, a: _with(
                s, asyncWarnings=set_in(s["asyncWarnings"], a.path, a.warning)
            ),
            actions.SetAsyncSuccess: lambda s, a: _with(
                s, asyncSuccesses=set_in(s["asyncSuccesses"], a.path, a.success)
            ),
            actions.SetFormState: lambda s, a: _with(s, **a.state),
            actions.Reset: self._reset,
            actions.ResetAll: lambda s, a: initial_state(self._default_values),
            actions.ClearAll: lambda s, a: initial_state(),
            actions.Submitting: lambda s, a: _with(s, submitting=bool(a.submitting)),
            actions.Submits: lambda s, a: _with(s, submits=s["submits"] + 1),
            actions.Submitted: lambda s, a: _with(s, submitted=True),
            actions.StartValidatingField: lambda s, a: _with(
                s,
                validating=set_in(s["validating"], a.path, True),
                asyncValidations=s["asyncValidations"] + 1,
            ),
            actions.DoneValidatingField: lambda s, a: _with(
                s,
                validating=set_in(s["validating"], a.path, False),
                asyncValidations=max(s["asyncValidations"] - 1, 0),
            ),
            actions.ClearValidationFailure: lambda s, a: _with(
                s, validationFailed=set_in(s["validationFailed"], a.path, False)
            ),
            actions.ValidationFailure: lambda s, a: _with(
                s,
                validationFailed=set_in(s["validationFailed"], a.path, True),
                validationFailures=s["validationFailures"] + 1,
            ),
        }

    def handles(self, intent: Any) -> bool:
        return type(intent) in self._handlers

    def reduce(self, state: FormStateDict, intent: Any) -> FormStateDict:
        return self._handlers[type(intent)](state, intent)

    def _reset(self, state: FormStateDict, intent: actions.Reset) -> FormStateDict:
        default = get_in(self._default_values, intent.path)
        if default is None:
            values = unset_in(state["values"], intent.path)
        else:
            values = set_in(state["values"], intent.path, snapshot(default))
        changes = {bucket: unset_in(state[bucket], intent.path) for bucket in _RESULT_BUCKETS}
        return _with(state, values=values, **changes)


class FormStore:
    """
    In-memory dispatch sink and state reader for a single form.

    Plain intents are reduced synchronously into a new state document and
    subscribers are notified with ``(previous, next)``. Validation intents run
    their validator against the current value and re-dispatch the results;
    ``AsyncValidate`` schedules the validator on the running event loop and
    returns the task.
    """

    def __init__(self, default_values: Optional[Mapping[str, Any]] = None) -> None:
        """
        :param default_values: Initial ``values``; also used by Reset and ResetAll.
        """
        self._reducer = _Reducer(default_values)
        self._state: FormStateDict = initial_state(default_values)
        self._listeners: List[StateListener] = []

    @property
    def state(self) -> FormStateDict:
        """The live state document. Treat as read-only."""
        return self._state

    def get_state(self) -> FormStateDict:
        """Return an independent copy of the current state."""
        return snapshot(self._state)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a listener called after every applied intent.

        :param listener: Called as ``listener(previous_state, next_state)``.
        :return: Callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, intent: Any) -> Any:
        """
        Apply an intent.

        :param intent: One of the dataclasses in ``formstate.core.actions``.
        :return: The scheduled task for AsyncValidate, otherwise None.
        :raises UnknownIntentError: If the intent type is not recognized.
        """
        if self._reducer.handles(intent):
            previous = self._state
            self._state = self._reducer.reduce(previous, intent)
            for listener in list(self._listeners):
                listener(previous, self._state)
            return None
        if isinstance(intent, (actions.PreValidate, actions.Format)):
            transform = intent.validator if isinstance(intent, actions.PreValidate) else intent.formatter
            value = get_in(self._state["values"], intent.path)
            return self.dispatch(actions.SetValue(intent.path, transform(value)))
        if isinstance(intent, actions.Validate):
            result = intent.validator(get_in(self._state["values"], intent.path), self._state["values"])
            self._apply_result(intent.path, result or {}, asynchronous=False)
            return None
        if isinstance(intent, actions.AsyncValidate):
            return self._schedule_async_validation(intent)
        raise UnknownIntentError(intent)

    def _apply_result(self, path: tuple, result: Mapping[str, Any], asynchronous: bool) -> None:
        if asynchronous:
            self.dispatch(actions.SetAsyncWarning(path, result.get("warning")))
            self.dispatch(actions.SetAsyncError(path, result.get("error")))
            self.dispatch(actions.SetAsyncSuccess(path, result.get("success")))
        else:
            self.dispatch(actions.SetWarning(path, result.get("warning")))
            self.dispatch(actions.SetError(path, result.get("error")))
            self.dispatch(actions.SetSuccess(path, result.get("success")))

    def _schedule_async_validation(self, intent: actions.AsyncValidate) -> asyncio.Task:
        loop = asyncio.get_running_loop()
        # Counter goes up before the task exists so submit sees it immediately.
        self.dispatch(actions.StartValidatingField(intent.path))
        self.dispatch(actions.ClearValidationFailure(intent.path))
        value = get_in(self._state["values"], intent.path)
        return loop.create_task(self._run_async_validation(intent, value, self._state["values"]))

    async def _run_async_validation(self, intent: actions.AsyncValidate, value: Any, values: Any) -> None:
        logger.debug("Async validation started for %s", intent.path)
        try:
            result = await maybe_await(intent.validator(value, values))
        except Exception as error:
            self.dispatch(actions.ValidationFailure(intent.path, error))
            raise AsyncValidationError(intent.path, error) from error
        else:
            self._apply_result(intent.path, result or {}, asynchronous=True)
        finally:
            self.dispatch(actions.DoneValidatingField(intent.path))
            logger.debug("Async validation finished for %s", intent.path)
