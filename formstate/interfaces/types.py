# formstate/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Sequence, Tuple, Union

PathSegment = Union[str, int]
FieldPath = Tuple[PathSegment, ...]
# Anything to_path() understands: "a.b[0]", 3, ["a", ["b", 0]], None
FieldRef = Union[None, str, int, Sequence[Any]]

FormStateDict = Dict[str, Any]
ValidationOutcome = Optional[Mapping[str, Any]]

# Validator callables
PreValidator = Callable[[Any], Any]
Formatter = Callable[[Any], Any]
SyncValidator = Callable[[Any, Mapping[str, Any]], ValidationOutcome]
AsyncValidator = Callable[[Any, Mapping[str, Any]], Awaitable[ValidationOutcome]]

# Callback Types
SubmitCallback = Callable[..., Any]
FailureCallback = Callable[..., Any]
PreSubmitCallback = Callable[[Any], Any]
ChangeCallback = Callable[[FormStateDict], None]
StateListener = Callable[[FormStateDict, FormStateDict], None]
