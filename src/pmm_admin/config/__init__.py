# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Client configuration file handling."""

from pmm_admin.config.config_loader import CONFIG_FILE_MODE, load_config, write_config

__all__ = ["CONFIG_FILE_MODE", "load_config", "write_config"]
