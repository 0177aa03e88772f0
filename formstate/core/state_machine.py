# formstate/core/state_machine.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Dict, Optional, Set

from formstate.core import actions
from formstate.core.data_management import join_path, snapshot
from formstate.core.errors import TransitionError
from formstate.core.hooks import HookManager
from formstate.core.validations import ValidationOrchestrator, is_invalid, merge_errors
from formstate.interfaces.protocols import DispatchSink, StateReader
from formstate.runtime.async_support import maybe_await, recurse_up_fields
from formstate.runtime.graph import FieldNode, FieldTree

if TYPE_CHECKING:
    from formstate.core.form import FormOptions

logger = logging.getLogger(__name__)


class SubmitStatus(Enum):
    """Lifecycle of one submit attempt."""

    IDLE = auto()  # Attempt created, nothing dispatched yet
    SUBMITTING = auto()  # Touch, validation and callbacks in progress
    SUBMITTED = auto()  # Valid; values handed to on_submit
    SUPPRESSED = auto()  # Invalid, or async validations still in flight
    FAILED = auto()  # A validation pass raised; the error was re-raised


SubmitOutcome = SubmitStatus

_VALID_TRANSITIONS: Dict[SubmitStatus, Set[SubmitStatus]] = {
    SubmitStatus.IDLE: {SubmitStatus.SUBMITTING},
    SubmitStatus.SUBMITTING: {SubmitStatus.SUBMITTED, SubmitStatus.SUPPRESSED, SubmitStatus.FAILED},
    SubmitStatus.SUBMITTED: set(),
    SubmitStatus.SUPPRESSED: set(),
    SubmitStatus.FAILED: set(),
}


class _SubmitAttempt:
    """
    Internal status holder for a single submit attempt. Enforces the legal
    transitions table.
    """

    def __init__(self) -> None:
        self.status = SubmitStatus.IDLE

    def transition_to(self, target: SubmitStatus) -> SubmitStatus:
        """
        :return: The previous status.
        :raises TransitionError: If ``target`` is not reachable from the current status.
        """
        if target not in _VALID_TRANSITIONS[self.status]:
            raise TransitionError(f"Cannot move submit attempt from {self.status.name} to {target.name}")
        previous, self.status = self.status, target
        return previous

    @property
    def is_terminal(self) -> bool:
        return not _VALID_TRANSITIONS[self.status]


class SubmitWorkflow:
    """
    Coordinates a form submission: touch every leaf field, run the pre, sync
    and async validation passes in submit mode, apply the default-prevention
    policy, then either hand a values snapshot to ``on_submit`` or report the
    errors to ``on_submit_failure``.

    In-flight async validators are never cancelled. Overlapping attempts are
    not serialized; ``status`` reports the most recent one.
    """

    def __init__(
        self,
        dispatcher: DispatchSink,
        reader: StateReader,
        tree: FieldTree,
        orchestrator: ValidationOrchestrator,
        options: "FormOptions",
        hooks: Optional[HookManager] = None,
    ) -> None:
        """
        :param dispatcher: Sink for state-mutation intents.
        :param reader: Source of the live form state.
        :param tree: Registry of mounted root fields.
        :param orchestrator: Runs the validation passes.
        :param options: Form options; read on every run.
        :param hooks: Optional hook manager notified of transitions and errors.
        """
        self._dispatcher = dispatcher
        self._reader = reader
        self._tree = tree
        self._orchestrator = orchestrator
        self._options = options
        self._hooks = hooks or HookManager()
        self._latest: Optional[_SubmitAttempt] = None

    @property
    def status(self) -> SubmitStatus:
        """Status of the most recent attempt, IDLE if there was none."""
        return self._latest.status if self._latest else SubmitStatus.IDLE

    async def touch_all(self) -> None:
        """
        Mark every leaf field touched. Group/list fields are skipped; their
        leaf descendants are touched at their full paths.
        """

        def touch(node: FieldNode, parent_path: Any) -> None:
            if node.is_nested:
                return
            self._dispatcher.dispatch(actions.SetTouched(join_path(parent_path, node.path), True))

        await recurse_up_fields(self._tree.nodes, touch)

    async def run(self, event: Any = None) -> SubmitOutcome:
        """
        Execute one submit attempt.

        :param event: Optional trigger exposing ``prevent_default()``.
        :return: SUBMITTED or SUPPRESSED.
        :raises Exception: Whatever a validation pass raised; ``submitting`` is
            reset first and the attempt ends FAILED.
        """
        attempt = _SubmitAttempt()
        self._latest = attempt
        await self._transition(attempt, SubmitStatus.SUBMITTING)
        self._dispatcher.dispatch(actions.Submitting(True))
        self._dispatcher.dispatch(actions.Submits())

        try:
            await self.touch_all()
            await self._orchestrator.pre_validate_all(self._tree)
            await self._orchestrator.validate_all(self._tree)
            self._apply_default_policy(event)
            await self._orchestrator.async_validate_all(self._tree)
            outcome = await self._settle(event)
        except BaseException as error:
            if not attempt.is_terminal:
                await self._transition(attempt, SubmitStatus.FAILED)
                if isinstance(error, Exception):
                    await self._hooks.notify("on_error", error)
            raise
        finally:
            self._dispatcher.dispatch(actions.Submitting(False))

        await self._transition(attempt, outcome)
        await self._hooks.notify("on_submit", outcome)
        return outcome

    def _apply_default_policy(self, event: Any) -> None:
        prevent = getattr(event, "prevent_default", None)
        if not callable(prevent):
            return
        if self._options.prevent_default:
            prevent()
            return
        # Only the synchronous passes have settled at this point.
        state = self._reader.state
        if is_invalid(state["errors"]) or is_invalid(state["asyncErrors"]):
            logger.debug("Preventing default: form is invalid before async validation")
            prevent()

    async def _settle(self, event: Any) -> SubmitOutcome:
        state = self._reader.state
        errors, async_errors = state["errors"], state["asyncErrors"]
        invalid = is_invalid(errors)
        async_invalid = is_invalid(async_errors)

        if (invalid or async_invalid) and self._options.on_submit_failure:
            await maybe_await(self._options.on_submit_failure(snapshot(merge_errors(errors, async_errors))))

        # A validator may have started after the async pass was sampled.
        if invalid or async_invalid or self._reader.state["asyncValidations"] != 0:
            return SubmitStatus.SUPPRESSED

        values = snapshot(self._reader.state["values"])
        if self._options.pre_submit:
            values = self._options.pre_submit(values)
        self._dispatcher.dispatch(actions.Submitted())

        if self._options.on_submit:
            try:
                await maybe_await(self._options.on_submit(values, event))
            except Exception as error:
                await self._redirect_submit_error(error)
        return SubmitStatus.SUBMITTED

    async def _redirect_submit_error(self, error: Exception) -> None:
        await self._hooks.notify("on_error", error)
        if self._options.on_submit_failure:
            await maybe_await(self._options.on_submit_failure({}, error))
        else:
            logger.debug("on_submit raised and no on_submit_failure is configured", exc_info=error)

    async def _transition(self, attempt: _SubmitAttempt, target: SubmitStatus) -> None:
        previous = attempt.transition_to(target)
        logger.debug("Submit attempt %s -> %s", previous.name, target.name)
        await self._hooks.notify("on_transition", previous, target)
