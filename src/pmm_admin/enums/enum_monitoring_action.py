# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Local service actions accepted by start/stop/restart commands."""

from enum import Enum


class EnumMonitoringAction(str, Enum):
    """Action applied to a local monitoring service."""

    START = "start"
    STOP = "stop"
    RESTART = "restart"


__all__ = ["EnumMonitoringAction"]
