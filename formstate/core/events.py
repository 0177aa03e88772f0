# formstate/core/events.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, Dict


class SubmitEvent:
    """
    Represents the trigger of a form submission. The workflow may prevent the
    trigger's default action; hosts inspect ``default_prevented`` afterwards.
    """

    def __init__(self, name: str = "submit") -> None:
        """
        :param name: A string identifying this event.
        """
        self._name = name
        self._metadata: Dict[str, Any] = {}
        self._default_prevented = False

    @property
    def name(self) -> str:
        """The name of the event."""
        return self._name

    @property
    def metadata(self) -> Dict[str, Any]:
        """Optional dictionary of additional event data."""
        return self._metadata

    @property
    def default_prevented(self) -> bool:
        return self._default_prevented

    def prevent_default(self) -> None:
        """Mark the trigger's default action as prevented."""
        self._default_prevented = True
