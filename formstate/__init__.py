"""formstate: form-state controller with tree-wide validation and submission

This package tracks the live state of a tree of input fields and orchestrates
validation and submission across that tree.

Responsibilities:
    - Field registry with dynamic mount/unmount
    - Post-order (children first) asynchronous traversal of the field tree
    - Pre-validation, synchronous and asynchronous validation passes
    - Aggregate validity checks over nested error structures
    - Submit workflow with default-prevention policy and callbacks

Interactions:
    - Field widgets through the Field/NestedField bindings or register/deregister
    - A store (dispatch sink + state reader) holding the form state
    - Caller-supplied validators and submit callbacks
    - Logging system for diagnostics

Cross-cutting Concerns:
    Concurrency:
        - Single-threaded asyncio; sibling subtrees interleave cooperatively
        - No cancellation of in-flight async validators

    Error Handling:
        - Validator results are state values, never exceptions
        - Async validator failures surface from submit_form after submitting resets
        - on_submit failures are redirected to on_submit_failure

    Logging:
        - Debug-level records via the standard logging module
"""

__version__ = "0.1.0"

from formstate.core.data_management import deep_equal, get_in, join_path, set_in, snapshot, to_path, unset_in
from formstate.core.errors import (
    AsyncValidationError,
    ConfigurationError,
    FormStateError,
    TransitionError,
    UnknownIntentError,
)
from formstate.core.events import SubmitEvent
from formstate.core.fields import Field, NestedField
from formstate.core.form import FormController, FormOptions
from formstate.core.hooks import HookManager
from formstate.core.state_machine import SubmitOutcome, SubmitStatus, SubmitWorkflow
from formstate.core.validations import FieldValidators, ValidationOrchestrator, is_invalid
from formstate.runtime.async_support import recurse_up_fields
from formstate.runtime.graph import FieldNode, FieldTree
from formstate.runtime.store import FormStore, initial_state

__all__ = [
    "__version__",
    # Controller
    "FormController",
    "FormOptions",
    "Field",
    "NestedField",
    "FieldValidators",
    "SubmitEvent",
    # Engine
    "FieldNode",
    "FieldTree",
    "recurse_up_fields",
    "ValidationOrchestrator",
    "is_invalid",
    "SubmitWorkflow",
    "SubmitStatus",
    "SubmitOutcome",
    "HookManager",
    # State
    "FormStore",
    "initial_state",
    "to_path",
    "join_path",
    "get_in",
    "set_in",
    "unset_in",
    "snapshot",
    "deep_equal",
    # Errors
    "FormStateError",
    "ConfigurationError",
    "TransitionError",
    "UnknownIntentError",
    "AsyncValidationError",
]
