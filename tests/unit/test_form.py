# tests/unit/test_form.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from unittest.mock import MagicMock

import pytest

from formstate.core.errors import ConfigurationError
from formstate.core.form import FormController, FormOptions
from formstate.core.state_machine import SubmitStatus
from formstate.runtime.store import FormStore


class TestFormOptions:
    def test_defaults(self):
        options = FormOptions()
        assert options.prevent_default is True
        assert options.validate_on_submit is False
        assert options.validate_on_mount is False
        assert options.on_submit is None

    def test_from_mapping_accepts_both_spellings(self):
        on_submit = MagicMock()
        options = FormOptions.from_mapping(
            {"onSubmit": on_submit, "preventDefault": False, "validate_on_submit": True, "defaultValues": {"a": 1}}
        )
        assert options.on_submit is on_submit
        assert options.prevent_default is False
        assert options.validate_on_submit is True
        assert options.default_values == {"a": 1}

    def test_from_mapping_rejects_unknown_keys(self):
        with pytest.raises(TypeError, match="colour"):
            FormOptions.from_mapping({"colour": "blue"})


def test_malformed_options_raise():
    with pytest.raises(ConfigurationError):
        FormController(FormOptions(on_change=42))


def test_get_api_receives_controller():
    captured = []
    form = FormController(FormOptions(get_api=captured.append))
    assert captured == [form]


def test_default_values_seed_state(form_factory):
    form = form_factory(default_values={"name": "Ann", "tags": ["a"]})
    assert form.get_value("name") == "Ann"
    assert form.get_value("tags[0]") == "a"
    assert form.form is form
    assert form.full_path == ()


def test_explicit_store_is_used():
    store = FormStore({"x": 1})
    form = FormController(store=store)
    assert form.store is store
    assert form.get_value("x") == 1


class TestFieldApi:
    def test_setters_and_getters(self, form_factory):
        form = form_factory()
        form.set_value("name", "Ann")
        form.set_touched("name")
        form.set_error("name", "bad")
        form.set_warning("name", "hmm")
        form.set_success("name", "ok")
        assert form.get_value("name") == "Ann"
        assert form.get_touched("name") is True
        assert form.get_error("name") == "bad"
        assert form.get_warning("name") == "hmm"
        assert form.get_success("name") == "ok"

    def test_add_remove_swap(self, form_factory):
        form = form_factory(default_values={"friends": ["a", "b"]})
        form.add_value("friends", "c")
        assert form.get_value("friends") == ["a", "b", "c"]

        form.set_touched("friends[1]")
        form.set_touched("friends[2]")
        form.remove_value("friends", 1)
        assert form.get_value("friends") == ["a", "c"]
        assert form.get_touched("friends") == [None, True]

        form.swap_values("friends", 0, 1)
        assert form.get_value("friends") == ["c", "a"]

    def test_add_value_to_missing_list(self, form_factory):
        form = form_factory()
        form.add_value("tags", "x")
        assert form.get_value("tags") == ["x"]

    def test_format_and_reset(self, form_factory):
        form = form_factory(default_values={"name": "ann"})
        form.format("name", str.title)
        assert form.get_value("name") == "Ann"
        form.set_error("name", "bad")
        form.reset("name")
        assert form.get_value("name") == "ann"
        assert form.get_error("name") is None

    def test_validate_on_submit_suppresses_ad_hoc_validation(self, form_factory, required):
        form = form_factory(validate_on_submit=True)
        form.validate("name", required)
        assert form.get_error("name") is None
        form.validate("name", required, submitting=True)
        assert form.get_error("name") == "required"


class TestFormApi:
    def test_form_state_round_trip(self, form_factory):
        form = form_factory()
        form.set_value("a", 1)
        state = form.get_form_state()
        state["values"]["a"] = 99
        assert form.get_value("a") == 1

        form.set_form_state(state)
        assert form.get_value("a") == 99

    def test_set_all_values_reset_all_clear_all(self, form_factory):
        form = form_factory(default_values={"a": 1})
        form.set_all_values({"b": 2})
        assert form.get_form_state()["values"] == {"b": 2}
        form.reset_all()
        assert form.get_form_state()["values"] == {"a": 1}
        form.clear_all()
        assert form.get_form_state()["values"] == {}

    def test_register_and_deregister(self, form_factory, fake_field_factory):
        form = form_factory()
        node = form.register("name", fake_field_factory("name"))
        assert form.fields.nodes == [node]
        form.deregister("name")
        assert len(form.fields) == 0


class TestChangeNotification:
    def test_on_change_receives_snapshot(self, form_factory):
        changes = []
        form = form_factory(on_change=changes.append)
        form.set_value("a", 1)
        assert len(changes) == 1
        changes[0]["values"]["a"] = 2
        assert form.get_value("a") == 1

    def test_no_op_intents_do_not_notify(self, form_factory, recording_hook):
        changes = []
        form = form_factory(hooks=[recording_hook], on_change=changes.append)
        form.set_value("a", 1)
        form.set_value("a", 1)
        assert len(changes) == 1
        assert len(recording_hook.changes) == 1

    def test_close_stops_notifications(self, form_factory):
        changes = []
        form = form_factory(on_change=changes.append)
        form.close()
        form.close()
        form.set_value("a", 1)
        assert changes == []


@pytest.mark.asyncio
async def test_mount_runs_validation_when_configured(form_factory, fake_field_factory, call_log):
    form = form_factory(validate_on_mount=True)
    form.register("name", fake_field_factory("name"))
    await form.mount()
    assert [kind for kind, _, _ in call_log] == ["pre_validate", "validate", "async_validate"]


@pytest.mark.asyncio
async def test_mount_without_flag_does_nothing(form_factory, fake_field_factory, call_log):
    form = form_factory()
    form.register("name", fake_field_factory("name"))
    await form.mount()
    assert call_log == []


@pytest.mark.asyncio
async def test_submit_form_reports_status(form_factory):
    on_submit = MagicMock()
    form = form_factory(on_submit=on_submit)
    assert form.submit_status == SubmitStatus.IDLE
    assert await form.submit_form() == SubmitStatus.SUBMITTED
    assert form.submit_status == SubmitStatus.SUBMITTED
    on_submit.assert_called_once_with({}, None)


@pytest.mark.asyncio
async def test_set_all_touched(form_factory, fake_field_factory):
    form = form_factory()
    form.register("name", fake_field_factory("name"))
    form.register("email", fake_field_factory("email"))
    await form.set_all_touched()
    assert form.get_form_state()["touched"] == {"name": True, "email": True}
