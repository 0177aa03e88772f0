# formstate/core/form.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Callable, List, Mapping, Optional

from formstate.core import actions
from formstate.core.data_management import deep_equal, get_in, snapshot
from formstate.core.hooks import HookManager
from formstate.core.state_machine import SubmitOutcome, SubmitStatus, SubmitWorkflow
from formstate.core.validations import OptionsValidator, ValidationOrchestrator
from formstate.interfaces.types import FieldPath, FieldRef, FormStateDict
from formstate.runtime.graph import FieldNode, FieldTree
from formstate.runtime.store import FormStore

logger = logging.getLogger(__name__)

_CAMEL_CASE_OPTIONS = {
    "validateOnMount": "validate_on_mount",
    "validateOnSubmit": "validate_on_submit",
    "preventDefault": "prevent_default",
    "onSubmit": "on_submit",
    "onSubmitFailure": "on_submit_failure",
    "preSubmit": "pre_submit",
    "onChange": "on_change",
    "getApi": "get_api",
    "defaultValues": "default_values",
}


@dataclass
class FormOptions:
    """
    Caller-supplied form configuration.

    ``on_submit(values, event)`` and ``on_submit_failure(errors, error=None)``
    may be plain or coroutine functions.
    """

    validate_on_mount: bool = False
    validate_on_submit: bool = False
    prevent_default: bool = True
    on_submit: Optional[Callable[..., Any]] = None
    on_submit_failure: Optional[Callable[..., Any]] = None
    pre_submit: Optional[Callable[[Any], Any]] = None
    on_change: Optional[Callable[[FormStateDict], Any]] = None
    get_api: Optional[Callable[["FormController"], Any]] = None
    default_values: Optional[Mapping[str, Any]] = None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "FormOptions":
        """
        Build options from a mapping using either snake_case or camelCase keys.

        :raises TypeError: On an unknown option name.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in mapping.items():
            name = _CAMEL_CASE_OPTIONS.get(key, key)
            if name not in known:
                raise TypeError(f"Unknown form option: {key}")
            kwargs[name] = value
        return cls(**kwargs)


class FormController:
    """
    Tracks the state of a tree of fields and orchestrates validation and
    submission over it. State is read from and mutated through an explicit
    store; the controller never writes state directly.
    """

    full_path: FieldPath = ()

    def __init__(
        self,
        options: Optional[FormOptions] = None,
        store: Optional[Any] = None,
        hooks: Optional[List[Any]] = None,
    ) -> None:
        """
        :param options: Form configuration; defaults to FormOptions().
        :param store: Dispatch sink and state reader; defaults to a new FormStore.
        :param hooks: Optional hook objects (on_change, on_transition, on_submit, on_error).
        :raises ConfigurationError: If the options are malformed.
        """
        self.options = options or FormOptions()
        OptionsValidator().validate_options(self.options)

        self._store = store if store is not None else FormStore(self.options.default_values)
        self._hooks = HookManager(hooks)
        self._fields = FieldTree()
        self._orchestrator = ValidationOrchestrator(self._store, self.options.validate_on_submit)
        self._workflow = SubmitWorkflow(
            self._store, self._store, self._fields, self._orchestrator, self.options, self._hooks
        )
        self._unsubscribe = self._store.subscribe(self._on_store_change)

        if self.options.get_api:
            self.options.get_api(self)

    @property
    def form(self) -> "FormController":
        return self

    @property
    def store(self) -> Any:
        return self._store

    @property
    def fields(self) -> FieldTree:
        return self._fields

    @property
    def submit_status(self) -> SubmitStatus:
        return self._workflow.status

    def _on_store_change(self, previous: FormStateDict, current: FormStateDict) -> None:
        if deep_equal(previous, current):
            return
        if self.options.on_change:
            self.options.on_change(snapshot(current))
        self._hooks.notify_sync("on_change", snapshot(current))

    @property
    def _state(self) -> FormStateDict:
        return self._store.state

    def _dispatch(self, intent: Any) -> Any:
        return self._store.dispatch(intent)

    # Field API

    def set_value(self, field: FieldRef, value: Any) -> None:
        self._dispatch(actions.SetValue(field, value))

    def set_touched(self, field: FieldRef, touched: Any = True) -> None:
        self._dispatch(actions.SetTouched(field, touched))

    def set_error(self, field: FieldRef, error: Any) -> None:
        self._dispatch(actions.SetError(field, error))

    def set_warning(self, field: FieldRef, warning: Any) -> None:
        self._dispatch(actions.SetWarning(field, warning))

    def set_success(self, field: FieldRef, success: Any) -> None:
        self._dispatch(actions.SetSuccess(field, success))

    def get_value(self, field: FieldRef) -> Any:
        return get_in(self._state["values"], field)

    def get_touched(self, field: FieldRef) -> Any:
        return get_in(self._state["touched"], field)

    def get_error(self, field: FieldRef) -> Any:
        return get_in(self._state["errors"], field)

    def get_warning(self, field: FieldRef) -> Any:
        return get_in(self._state["warnings"], field)

    def get_success(self, field: FieldRef) -> Any:
        return get_in(self._state["successes"], field)

    def pre_validate(self, field: FieldRef, validator: Optional[Callable[..., Any]], submitting: bool = False) -> None:
        self._orchestrator.pre_validate(field, validator, submitting)

    def validate(self, field: FieldRef, validator: Optional[Callable[..., Any]], submitting: bool = False) -> None:
        self._orchestrator.validate(field, validator, submitting)

    def async_validate(self, field: FieldRef, validator: Optional[Callable[..., Any]], submitting: bool = False) -> Any:
        """
        :return: Awaitable for the scheduled validation, or None when suppressed.
        """
        return self._orchestrator.async_validate(field, validator, submitting)

    def add_value(self, field: FieldRef, value: Any) -> None:
        """Append ``value`` to the list stored at ``field``."""
        current = list(self.get_value(field) or [])
        self._dispatch(actions.SetValue(field, current + [value]))

    def remove_value(self, field: FieldRef, index: int) -> None:
        """Remove entry ``index`` from the list at ``field`` and its touched flag."""
        values = list(self.get_value(field) or [])
        self._dispatch(actions.SetValue(field, values[:index] + values[index + 1 :]))
        touched = self.get_touched(field)
        touched = list(touched) if isinstance(touched, (list, tuple)) else []
        self._dispatch(actions.SetTouched(field, touched[:index] + touched[index + 1 :]))

    def swap_values(self, field: FieldRef, index: int, dest_index: int) -> None:
        values = list(self.get_value(field) or [])
        values[index], values[dest_index] = values[dest_index], values[index]
        self._dispatch(actions.SetValue(field, values))

    def format(self, field: FieldRef, formatter: Callable[[Any], Any]) -> None:
        self._dispatch(actions.Format(field, formatter))

    def reset(self, field: FieldRef) -> None:
        self._dispatch(actions.Reset(field))

    # Form API

    def register(self, field: FieldRef, field_api: Any, child_fields: Optional[List[FieldNode]] = None) -> FieldNode:
        return self._fields.register(field, field_api, child_fields)

    def deregister(self, field: FieldRef) -> None:
        self._fields.deregister(field)

    def get_form_state(self) -> FormStateDict:
        """Independent copy of the current state."""
        return snapshot(self._state)

    def set_form_state(self, state: Mapping[str, Any]) -> None:
        self._dispatch(actions.SetFormState(dict(state)))

    def set_all_values(self, values: Any) -> None:
        self._dispatch(actions.SetAllValues(values))

    def reset_all(self) -> None:
        self._dispatch(actions.ResetAll())

    def clear_all(self) -> None:
        self._dispatch(actions.ClearAll())

    async def set_all_touched(self) -> None:
        await self._workflow.touch_all()

    async def pre_validate_all(self) -> None:
        await self._orchestrator.pre_validate_all(self._fields)

    async def validate_all(self) -> None:
        await self._orchestrator.validate_all(self._fields)

    async def async_validate_all(self) -> None:
        await self._orchestrator.async_validate_all(self._fields)

    async def submit_form(self, event: Any = None) -> SubmitOutcome:
        """
        Run one submit attempt. See SubmitWorkflow.run.
        """
        return await self._workflow.run(event)

    async def mount(self) -> None:
        """
        Call once the initial fields are registered. Runs every validation pass
        when ``validate_on_mount`` is set.
        """
        if not self.options.validate_on_mount:
            return
        await self.pre_validate_all()
        await self.validate_all()
        await self.async_validate_all()

    def close(self) -> None:
        """Stop listening to the store."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
