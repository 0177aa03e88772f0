# formstate/core/fields.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Awaitable, List, Optional

from formstate.core.data_management import join_path
from formstate.core.validations import FieldValidators
from formstate.interfaces.types import FieldPath, FieldRef
from formstate.runtime.graph import FieldNode, FieldTree

if TYPE_CHECKING:
    from formstate.core.form import FormController


class Field:
    """
    Headless binding of one leaf field to a form. Implements the FieldApi
    capability set the form's traversals call, bound to this field's full
    path and its own validators.
    """

    nested_field = False

    def __init__(self, parent: Any, path: FieldRef, validators: Optional[FieldValidators] = None) -> None:
        """
        :param parent: The FormController or NestedField this field lives under.
        :param path: Path relative to the parent.
        :param validators: Validator slots for the three passes.
        """
        self._parent = parent
        self.path = path
        self.validators = validators or FieldValidators()
        self.full_path: FieldPath = join_path(parent.full_path, path)
        self.mounted = False

    @property
    def form(self) -> "FormController":
        return self._parent.form

    def _child_fields(self) -> Optional[List[FieldNode]]:
        return None

    def mount(self) -> "Field":
        """Register with the parent."""
        self._parent.register(self.path, self, self._child_fields())
        self.mounted = True
        return self

    def unmount(self) -> None:
        """Deregister from the parent. Pending async validation is not cancelled."""
        self._parent.deregister(self.path)
        self.mounted = False

    def pre_validate(self, submitting: bool = False) -> None:
        self.form.pre_validate(self.full_path, self.validators.pre_validate, submitting)

    def validate(self, submitting: bool = False) -> None:
        self.form.validate(self.full_path, self.validators.validate, submitting)

    def async_validate(self, submitting: bool = False) -> Optional[Awaitable[Any]]:
        return self.form.async_validate(self.full_path, self.validators.async_validate, submitting)

    @property
    def value(self) -> Any:
        return self.form.get_value(self.full_path)

    @property
    def touched(self) -> Any:
        return self.form.get_touched(self.full_path)

    @property
    def error(self) -> Any:
        return self.form.get_error(self.full_path)

    @property
    def warning(self) -> Any:
        return self.form.get_warning(self.full_path)

    @property
    def success(self) -> Any:
        return self.form.get_success(self.full_path)

    def set_value(self, value: Any) -> None:
        """Write the value, then pre-validate and validate it (ad-hoc mode)."""
        self.form.set_value(self.full_path, value)
        self.pre_validate()
        self.validate()

    def set_touched(self, touched: Any = True) -> Optional[Awaitable[Any]]:
        """
        Write the touched flag. Touching runs ad-hoc async validation.

        :return: The async validation awaitable, or None if it did not run.
        """
        self.form.set_touched(self.full_path, touched)
        if touched:
            return self.async_validate()
        return None

    def set_error(self, error: Any) -> None:
        self.form.set_error(self.full_path, error)

    def set_warning(self, warning: Any) -> None:
        self.form.set_warning(self.full_path, warning)

    def set_success(self, success: Any) -> None:
        self.form.set_success(self.full_path, success)

    def add_value(self, value: Any) -> None:
        self.form.add_value(self.full_path, value)

    def remove_value(self, index: int) -> None:
        self.form.remove_value(self.full_path, index)

    def swap_values(self, index: int, dest_index: int) -> None:
        self.form.swap_values(self.full_path, index, dest_index)

    def format(self, formatter: Any) -> None:
        self.form.format(self.full_path, formatter)

    def reset(self) -> None:
        self.form.reset(self.full_path)


class NestedField(Field):
    """
    A group or list field. Owns the registry of its children and registers
    itself with that registry's live node list, so traversals reach children
    mounted at any time. Has no touched state of its own.
    """

    nested_field = True

    def __init__(self, parent: Any, path: FieldRef, validators: Optional[FieldValidators] = None) -> None:
        super().__init__(parent, path, validators)
        self._children = FieldTree()

    @property
    def children(self) -> FieldTree:
        return self._children

    def _child_fields(self) -> Optional[List[FieldNode]]:
        return self._children.nodes

    def register(self, path: FieldRef, field_api: Any, child_fields: Optional[List[FieldNode]] = None) -> FieldNode:
        return self._children.register(path, field_api, child_fields)

    def deregister(self, path: FieldRef) -> None:
        self._children.deregister(path)

    def set_touched(self, touched: Any = True) -> Optional[Awaitable[Any]]:
        """Groups are never touched; only their async validation runs."""
        if touched:
            return self.async_validate()
        return None
