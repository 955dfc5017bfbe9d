# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""In-memory fakes of the catalog, the local supervisor and the QAN API."""

from pmm_admin.testing.fake_qan_api import FakeQanApi
from pmm_admin.testing.fake_service_catalog import InMemoryServiceCatalog
from pmm_admin.testing.fake_service_supervisor import FakeServiceSupervisor

__all__ = ["FakeQanApi", "FakeServiceSupervisor", "InMemoryServiceCatalog"]
