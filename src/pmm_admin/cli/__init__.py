# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""pmm-admin command line interface."""

from pmm_admin.cli.commands import cli

__all__ = ["cli"]
