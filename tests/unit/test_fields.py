# tests/unit/test_fields.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from formstate.core.fields import Field, NestedField
from formstate.core.validations import FieldValidators
from formstate.interfaces.protocols import FieldApi


def test_field_full_path_and_mount(form_factory):
    form = form_factory()
    group = NestedField(form, "friends").mount()
    entry = NestedField(group, 0).mount()
    name = Field(entry, "name").mount()

    assert name.full_path == ("friends", 0, "name")
    assert name.form is form
    assert name.mounted
    assert [node.field_api for node in form.fields] == [group]
    assert group.children.nodes[0].child_fields is entry.children.nodes
    assert isinstance(name, FieldApi)


def test_unmount_removes_from_parent(form_factory):
    form = form_factory()
    group = NestedField(form, "address").mount()
    city = Field(group, "city").mount()
    city.unmount()
    assert not city.mounted
    assert len(group.children) == 0
    assert len(form.fields) == 1


def test_set_value_runs_pre_validate_and_validate(form_factory, required):
    form = form_factory()
    field = Field(form, "name", FieldValidators(pre_validate=str.strip, validate=required))
    field.set_value("  ")
    assert field.value == ""
    assert field.error == "required"

    field.set_value(" Ann ")
    assert field.value == "Ann"
    assert field.error is None
    assert field.success is None


def test_set_value_without_validators(form_factory):
    field = Field(form_factory(), "name")
    field.set_value("x")
    assert field.value == "x"
    assert field.form.get_form_state()["errors"] == {}


def test_result_setters(form_factory):
    field = Field(form_factory(), "name")
    field.set_error("bad")
    field.set_warning("hmm")
    field.set_success("ok")
    assert (field.error, field.warning, field.success) == ("bad", "hmm", "ok")


@pytest.mark.asyncio
async def test_touching_runs_async_validation(form_factory, async_validator_factory):
    validator = async_validator_factory({"error": "taken"})
    form = form_factory(default_values={"email": "a@b.c"})
    field = Field(form, "email", FieldValidators(async_validate=validator))

    task = field.set_touched()
    assert field.touched is True
    await task
    assert validator.calls == ["a@b.c"]
    assert form.get_form_state()["asyncErrors"] == {"email": "taken"}


def test_untouching_skips_async_validation(form_factory, async_validator_factory):
    validator = async_validator_factory()
    field = Field(form_factory(), "email", FieldValidators(async_validate=validator))
    assert field.set_touched(False) is None
    assert field.touched is False
    assert validator.calls == []


def test_validate_on_submit_gates_field_passes(form_factory, required):
    form = form_factory(validate_on_submit=True)
    field = Field(form, "name", FieldValidators(validate=required))
    field.set_value("")
    assert field.error is None
    field.validate(submitting=True)
    assert field.error == "required"


def test_list_helpers(form_factory):
    form = form_factory(default_values={"tags": ["a"]})
    tags = NestedField(form, "tags")
    tags.add_value("b")
    tags.swap_values(0, 1)
    assert tags.value == ["b", "a"]
    tags.remove_value(0)
    assert tags.value == ["a"]


def test_format_and_reset(form_factory):
    form = form_factory(default_values={"name": "ann"})
    field = Field(form, "name")
    field.format(str.upper)
    assert field.value == "ANN"
    field.reset()
    assert field.value == "ann"


@pytest.mark.asyncio
async def test_nested_field_is_never_touched(form_factory, async_validator_factory):
    validator = async_validator_factory()
    form = form_factory()
    group = NestedField(form, "address", FieldValidators(async_validate=validator))

    await group.set_touched()
    assert group.touched is None
    assert validator.calls == [None]
    assert group.set_touched(False) is None
