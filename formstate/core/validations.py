# formstate/core/validations.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Mapping, Optional

from formstate.core import actions
from formstate.core.errors import ConfigurationError
from formstate.interfaces.protocols import DispatchSink
from formstate.interfaces.types import FieldRef
from formstate.runtime.async_support import recurse_up_fields

if TYPE_CHECKING:
    from formstate.core.form import FormOptions
    from formstate.runtime.graph import FieldNode, FieldTree

logger = logging.getLogger(__name__)


def is_invalid(errors: Any) -> bool:
    """
    Aggregate validity check over a nested error structure.

    Sequences and mappings are invalid if any member is; any other value is
    invalid iff it is truthy. Empty containers, None, "", 0 and False are all
    "no error".
    """
    if isinstance(errors, (list, tuple)):
        return any(is_invalid(item) for item in errors)
    if isinstance(errors, Mapping):
        return any(is_invalid(value) for value in errors.values())
    return bool(errors)


def merge_errors(errors: Any, async_errors: Any) -> Any:
    """
    Overlay an async error structure onto a sync one.

    Mappings merge key by key and sequences index by index. Where both sides
    hold a leaf, the sync entry wins if it is invalid.
    """
    if isinstance(errors, Mapping) and isinstance(async_errors, Mapping):
        merged = dict(errors)
        for key, value in async_errors.items():
            merged[key] = merge_errors(errors[key], value) if key in errors else value
        return merged
    if isinstance(errors, (list, tuple)) and isinstance(async_errors, (list, tuple)):
        length = max(len(errors), len(async_errors))
        return [
            merge_errors(
                errors[i] if i < len(errors) else None,
                async_errors[i] if i < len(async_errors) else None,
            )
            for i in range(length)
        ]
    if is_invalid(errors) or not is_invalid(async_errors):
        return errors if errors is not None else async_errors
    return async_errors


@dataclass(frozen=True)
class FieldValidators:
    """
    Validator slots for one field. Each pass reads only its own slot; an empty
    slot makes that pass a no-op for the field.
    """

    pre_validate: Optional[Callable[[Any], Any]] = None
    validate: Optional[Callable[[Any, Any], Any]] = None
    async_validate: Optional[Callable[[Any, Any], Awaitable[Any]]] = None


class ValidationOrchestrator:
    """
    Applies the validate-on-submit gating rule to the three validation passes
    and runs each pass across a field tree.
    """

    def __init__(self, dispatcher: DispatchSink, validate_on_submit: bool = False) -> None:
        """
        :param dispatcher: Sink receiving PreValidate/Validate/AsyncValidate intents.
        :param validate_on_submit: When True, only submit-mode passes run.
        """
        self._dispatcher = dispatcher
        self.validate_on_submit = validate_on_submit

    def _suppressed(self, validator: Optional[Callable[..., Any]], submitting: bool) -> bool:
        return validator is None or (not submitting and self.validate_on_submit)

    def pre_validate(self, field: FieldRef, validator: Optional[Callable[[Any], Any]], submitting: bool = False) -> None:
        """
        Dispatch a pre-validation (value normalization) for ``field``.

        :param field: Full path of the field.
        :param validator: Callable mapping the current value to a new value.
        :param submitting: True when called from a submit pass.
        """
        if self._suppressed(validator, submitting):
            return
        self._dispatcher.dispatch(actions.PreValidate(field, validator))

    def validate(self, field: FieldRef, validator: Optional[Callable[..., Any]], submitting: bool = False) -> None:
        """
        Dispatch a synchronous validation for ``field``.
        """
        if self._suppressed(validator, submitting):
            return
        self._dispatcher.dispatch(actions.Validate(field, validator))

    def async_validate(
        self, field: FieldRef, validator: Optional[Callable[..., Any]], submitting: bool = False
    ) -> Optional[Awaitable[Any]]:
        """
        Dispatch an asynchronous validation for ``field``.

        :return: The awaitable returned by the sink, or None when suppressed.
        """
        if self._suppressed(validator, submitting):
            return None
        return self._dispatcher.dispatch(actions.AsyncValidate(field, validator))

    async def pre_validate_all(self, tree: "FieldTree") -> None:
        await recurse_up_fields(tree.nodes, lambda node, _: node.field_api.pre_validate(submitting=True))

    async def validate_all(self, tree: "FieldTree") -> None:
        await recurse_up_fields(tree.nodes, lambda node, _: node.field_api.validate(submitting=True))

    async def async_validate_all(self, tree: "FieldTree") -> None:
        """
        Run every field's async validator in submit mode, children first.
        Resolves when all of them have settled; raises the first failure.
        """
        await recurse_up_fields(tree.nodes, _async_visitor)


def _async_visitor(node: "FieldNode", parent_path: Any) -> Optional[Awaitable[Any]]:
    return node.field_api.async_validate(submitting=True)


class OptionsValidator:
    """
    Checks form options before a controller is built from them.
    """

    _CALLBACKS = ("on_submit", "on_submit_failure", "pre_submit", "on_change", "get_api")
    _FLAGS = ("validate_on_mount", "validate_on_submit", "prevent_default")

    def validate_options(self, options: "FormOptions") -> None:
        """
        :param options: Options to check.
        :raises ConfigurationError: If a flag is not a bool or a callback is not callable.
        """
        for name in self._FLAGS:
            if not isinstance(getattr(options, name), bool):
                raise ConfigurationError(f"Option '{name}' must be a bool.")
        for name in self._CALLBACKS:
            value = getattr(options, name)
            if value is not None and not callable(value):
                raise ConfigurationError(f"Option '{name}' must be callable.")
        if options.default_values is not None and not isinstance(options.default_values, Mapping):
            raise ConfigurationError("Option 'default_values' must be a mapping.")
