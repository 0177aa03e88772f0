# formstate/core/hooks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, List, Optional

logger = logging.getLogger(__name__)


class HookManager:
    """
    Manages the registration and execution of hooks that listen to form
    lifecycle events. Users can attach logging, monitoring, or custom side
    effects without altering core logic.

    A hook defines any subset of on_change(state), on_transition(source, target),
    on_submit(outcome) and on_error(error), as plain or coroutine functions.
    """

    def __init__(self, hooks: Optional[List[Any]] = None) -> None:
        """
        Initialize with an optional list of hook objects.
        """
        self._hooks: List[Any] = list(hooks or [])

    @property
    def hooks(self) -> List[Any]:
        return list(self._hooks)

    def register_hook(self, hook: Any) -> None:
        """
        Add a new hook to the manager's list of hooks.

        :param hook: An object defining any of the hook methods.
        """
        self._hooks.append(hook)

    async def notify(self, method: str, *args: Any) -> None:
        """
        Invoke ``method`` on every hook defining it, awaiting coroutine hooks.
        """
        for hook in self._hooks:
            callback = getattr(hook, method, None)
            if callback is None:
                continue
            if inspect.iscoroutinefunction(callback):
                await callback(*args)
            else:
                callback(*args)

    def notify_sync(self, method: str, *args: Any) -> None:
        """
        Invoke ``method`` from synchronous code. Coroutine hooks are scheduled
        on the running loop, or skipped when there is none.
        """
        for hook in self._hooks:
            callback = getattr(hook, method, None)
            if callback is None:
                continue
            if inspect.iscoroutinefunction(callback):
                try:
                    loop = asyncio.get_running_loop()
                except RuntimeError:
                    logger.debug("No running loop; skipping async hook %s.%s", type(hook).__name__, method)
                    continue
                loop.create_task(callback(*args))
            else:
                callback(*args)
