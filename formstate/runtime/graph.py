"""Registry of mounted fields and their declared child structure."""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional

from ..core.data_management import to_path
from ..interfaces.types import FieldPath, FieldRef

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class FieldNode:
    """
    One registered field.

    ``path`` is relative to whoever registered the node. ``child_fields`` is
    the list supplied at registration; a group keeps appending to it as its
    own children mount, so traversals always see the current children.
    """

    path: FieldRef
    field_api: Any
    child_fields: List["FieldNode"] = field(default_factory=list)

    @property
    def normalized_path(self) -> FieldPath:
        return to_path(self.path)

    @property
    def is_nested(self) -> bool:
        """True for group/list fields that hold no touchable value of their own."""
        return bool(getattr(self.field_api, "nested_field", False))


class FieldTree:
    """
    Flat registry of root field nodes. Parent/child structure is not stored
    here; it is read from each node's ``child_fields`` at traversal time.
    Registration order is preserved and duplicate paths are allowed.
    """

    def __init__(self) -> None:
        self._nodes: List[FieldNode] = []

    def register(self, path: FieldRef, field_api: Any, child_fields: Optional[List[FieldNode]] = None) -> FieldNode:
        """
        Append a node to the registry.

        :param path: The field's address relative to the registry owner.
        :param field_api: Object exposing pre_validate/validate/async_validate.
        :param child_fields: Child nodes owned by a group/list field.
        :return: The created node.
        """
        node = FieldNode(path=path, field_api=field_api, child_fields=child_fields if child_fields is not None else [])
        self._nodes.append(node)
        logger.debug("Registered field %s (%d registered)", node.normalized_path, len(self._nodes))
        return node

    def deregister(self, path: FieldRef) -> None:
        """
        Remove every node registered under ``path``. Absent paths are ignored.
        """
        target = to_path(path)
        # In place: the list may be shared as a parent's child_fields.
        self._nodes[:] = [node for node in self._nodes if node.normalized_path != target]

    @property
    def nodes(self) -> List[FieldNode]:
        """The live node list (shared, not a copy)."""
        return self._nodes

    def find(self, path: FieldRef) -> List[FieldNode]:
        """Return all nodes registered under ``path``."""
        target = to_path(path)
        return [node for node in self._nodes if node.normalized_path == target]

    def __iter__(self) -> Iterator[FieldNode]:
        return iter(list(self._nodes))

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, path: object) -> bool:
        try:
            return bool(self.find(path))  # type: ignore[arg-type]
        except TypeError:
            return False
