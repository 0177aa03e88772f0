# formstate/runtime/async_support.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Iterable, Optional

from formstate.core.data_management import join_path
from formstate.interfaces.types import FieldPath
from formstate.runtime.graph import FieldNode

logger = logging.getLogger(__name__)

Visitor = Callable[[FieldNode, FieldPath], Optional[Awaitable[Any]]]


async def maybe_await(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


async def _recurse(node: FieldNode, parent_path: FieldPath, visitor: Visitor) -> None:
    full_path = join_path(parent_path, node.path)
    children = list(node.child_fields)
    if children:
        # Fail fast on the first child failure; siblings keep running.
        await asyncio.gather(*(_recurse(child, full_path, visitor) for child in children))
    await maybe_await(visitor(node, parent_path))


async def recurse_up_fields(roots: Iterable[FieldNode], visitor: Visitor) -> None:
    """
    Visit every node of a field forest in post-order.

    Each node's children are visited concurrently and all of them must finish
    before ``visitor(node, parent_path)`` runs for the node itself. Independent
    roots run concurrently with no ordering between them. The first failure is
    raised without cancelling work still in flight elsewhere in the forest.

    :param roots: Root nodes, typically ``FieldTree.nodes``.
    :param visitor: Called as ``visitor(node, parent_path)``; may return an awaitable.
    """
    roots = list(roots)
    logger.debug("Traversing %d root field(s)", len(roots))
    await asyncio.gather(*(_recurse(root, (), visitor) for root in roots))
