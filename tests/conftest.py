# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import asyncio
from typing import Any, List
from unittest.mock import MagicMock

import pytest


def pytest_configure(config):
    """Register custom marks."""
    config.addinivalue_line("markers", "property: mark test as a property-based test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


class RecordingHook:
    """Hook collecting every notification it receives."""

    def __init__(self):
        self.changes: List[Any] = []
        self.transitions: List[tuple] = []
        self.outcomes: List[Any] = []
        self.errors: List[Exception] = []

    def on_change(self, state):
        self.changes.append(state)

    def on_transition(self, source, target):
        self.transitions.append((source, target))

    def on_submit(self, outcome):
        self.outcomes.append(outcome)

    def on_error(self, error):
        self.errors.append(error)


class FakeFieldApi:
    """Field API stand-in recording which passes ran and in what mode."""

    def __init__(self, name: str, log: List[tuple], nested_field: bool = False, async_result=None):
        self.name = name
        self.log = log
        self.nested_field = nested_field
        self._async_result = async_result

    def pre_validate(self, submitting: bool = False) -> None:
        self.log.append(("pre_validate", self.name, submitting))

    def validate(self, submitting: bool = False) -> None:
        self.log.append(("validate", self.name, submitting))

    def async_validate(self, submitting: bool = False):
        self.log.append(("async_validate", self.name, submitting))
        return self._async_result


@pytest.fixture
def recording_hook():
    return RecordingHook()


@pytest.fixture
def call_log():
    return []


@pytest.fixture
def fake_field_factory(call_log):
    """Returns a factory building FakeFieldApi objects sharing one call log."""

    def _factory(name: str, nested_field: bool = False, async_result=None):
        return FakeFieldApi(name, call_log, nested_field=nested_field, async_result=async_result)

    return _factory


@pytest.fixture
def store():
    from formstate.runtime.store import FormStore

    return FormStore()


@pytest.fixture
def mock_dispatcher():
    """A dispatch sink accepting anything."""
    return MagicMock()


@pytest.fixture
def form_factory():
    """Returns a factory building a FormController from keyword options."""
    from formstate.core.form import FormController, FormOptions

    def _factory(hooks=None, **options):
        return FormController(FormOptions(**options), hooks=hooks)

    return _factory


@pytest.fixture
def required():
    """Synchronous validator flagging empty values."""

    def _required(value, values):
        return {"error": None if value else "required"}

    return _required


@pytest.fixture
def async_validator_factory():
    """Returns a factory for async validators resolving to a fixed result after a delay."""

    def _factory(result=None, delay: float = 0.0, error: Exception = None):
        calls = []

        async def _validator(value, values):
            calls.append(value)
            await asyncio.sleep(delay)
            if error is not None:
                raise error
            return result

        _validator.calls = calls
        return _validator

    return _factory
