# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Rendezvous Retry Policy.

A QAN agent started by the local service manager connects to the QAN API
a few seconds later. Until then the API answers 404 to every command
relayed to it. This policy turns that "not ready" signal into a bounded,
fixed-interval wait.

Retry Semantics:
    - Only AgentNotConnectedError is retried; every other error propagates
      on the first attempt
    - The policy waits ``interval_seconds`` after every "not ready" reply,
      the last one included, so the default budget (10 x 1s) spans ~10s
    - Exhaustion raises AgentRendezvousTimeoutError
    - ``cancel()`` (from another thread or a signal handler) wakes a pending
      wait and raises RendezvousCancelledError

Thread Safety:
    ``cancel()`` may be called from any thread. ``run()`` is meant to be
    used by one thread at a time.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import TypeVar

from pmm_admin.errors import (
    AgentNotConnectedError,
    AgentRendezvousTimeoutError,
    RendezvousCancelledError,
)
from pmm_admin.models.model_rendezvous_retry_config import ModelRendezvousRetryConfig

T = TypeVar("T")

logger = logging.getLogger(__name__)


class RendezvousRetryPolicy:
    """Bounded, fixed-interval, cancellable retry on AgentNotConnectedError.

    Example:
        >>> policy = RendezvousRetryPolicy(ModelRendezvousRetryConfig())
        >>> policy.run(lambda: api.send_command(agent_id, command))
    """

    def __init__(self, config: ModelRendezvousRetryConfig | None = None) -> None:
        self._config = config or ModelRendezvousRetryConfig()
        self._cancelled = threading.Event()

    @property
    def config(self) -> ModelRendezvousRetryConfig:
        return self._config

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Abort the current and every later wait of this policy."""
        self._cancelled.set()

    def run(self, operation: Callable[[], T], target: str = "") -> T:
        """Call ``operation`` until it stops reporting the agent as not connected.

        Args:
            operation: Zero-argument callable performing one attempt.
            target: Name used in log records (agent ID, command).

        Raises:
            AgentRendezvousTimeoutError: Every attempt reported "not connected".
            RendezvousCancelledError: ``cancel()`` was called.
        """
        max_attempts = self._config.max_attempts
        interval = self._config.interval_seconds
        for attempt in range(1, max_attempts + 1):
            if self._cancelled.is_set():
                raise RendezvousCancelledError(attempt - 1)
            try:
                return operation()
            except AgentNotConnectedError:
                logger.debug(
                    "Agent not connected to QAN API yet, waiting",
                    extra={
                        "target": target,
                        "attempt": attempt,
                        "max_attempts": max_attempts,
                        "delay_seconds": interval,
                    },
                )
                if self._cancelled.wait(interval):
                    raise RendezvousCancelledError(attempt) from None

        logger.warning(
            "Agent did not connect to QAN API",
            extra={"target": target, "attempts": max_attempts},
        )
        raise AgentRendezvousTimeoutError(max_attempts, interval)


__all__: list[str] = ["RendezvousRetryPolicy"]
