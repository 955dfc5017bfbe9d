# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Agent Instance State Enumeration.

States of a QAN instance record as observed by the client during
find-or-create:

    UNKNOWN -> (lookup) -> NOT_FOUND | FOUND_ACTIVE | FOUND_SOFT_DELETED
            -> RECONCILED
"""

from enum import Enum


class EnumInstanceState(str, Enum):
    """Observed lifecycle state of a remote agent instance."""

    UNKNOWN = "unknown"
    NOT_FOUND = "not_found"
    FOUND_ACTIVE = "found_active"
    FOUND_SOFT_DELETED = "found_soft_deleted"
    RECONCILED = "reconciled"


__all__ = ["EnumInstanceState"]
