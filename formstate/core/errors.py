# formstate/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, Optional


class FormStateError(Exception):
    """
    Base exception class for errors within the form state library.
    """


class ConfigurationError(FormStateError):
    """
    Raised when form options are malformed (wrong types, non-callable callbacks).
    """


class TransitionError(FormStateError):
    """
    Raised when the submit workflow is asked to make an illegal status transition.
    """


class UnknownIntentError(FormStateError):
    """
    Raised when a store receives an intent it does not know how to apply.
    """

    def __init__(self, intent: Any) -> None:
        super().__init__(f"Unknown intent: {type(intent).__name__}")
        self.intent = intent


class AsyncValidationError(FormStateError):
    """
    Raised when an asynchronous validator itself fails (as opposed to reporting
    an error value). Carries the field path and the original exception.
    """

    def __init__(self, path: tuple, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"Async validation failed for field {'.'.join(map(str, path)) or '<root>'}: {cause}")
        self.path = path
        self.cause = cause
