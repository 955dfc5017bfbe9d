# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Remote API Error Class.

Raised for any unexpected HTTP status from the QAN API (or the Prometheus
endpoints behind the same server). Carries method, URL, status and body so
the failure can be diagnosed from the message alone.
"""

from __future__ import annotations

import json

from pmm_admin.enums import EnumAdminErrorCode, EnumSubsystem
from pmm_admin.errors.admin_errors import PmmAdminError
from pmm_admin.errors.model_admin_error_context import ModelAdminErrorContext


def _body_detail(body: bytes | str) -> str:
    """Return the API's ``Error`` field if the body is JSON, else the raw body."""
    text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
    if not text:
        return ""
    try:
        decoded = json.loads(text)
    except ValueError:
        return text
    if isinstance(decoded, dict) and isinstance(decoded.get("Error"), str):
        return decoded["Error"]
    return text


class RemoteAPIError(PmmAdminError):
    """Non-expected HTTP status from the agent API.

    Example:
        >>> raise RemoteAPIError(
        ...     method="PUT",
        ...     url="http://pmm/qan-api/agents/abc/cmd",
        ...     status_code=500,
        ...     expected_status=200,
        ...     body=b'{"Error": "agent crashed"}',
        ... )
    """

    default_subsystem = EnumSubsystem.AGENT_API

    def __init__(
        self,
        method: str,
        url: str,
        status_code: int,
        expected_status: int,
        body: bytes | str = b"",
        context: ModelAdminErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        self.method = method
        self.url = url
        self.status_code = status_code
        self.expected_status = expected_status
        self.body = body
        message = (
            f"{method} {url}: API returned HTTP status code {status_code}, "
            f"expected {expected_status}"
        )
        detail = _body_detail(body)
        if detail:
            message += f": {detail}"
        super().__init__(
            message=message,
            error_code=EnumAdminErrorCode.REMOTE_API_ERROR,
            context=context,
            method=method,
            url=url,
            status_code=status_code,
            **extra_context,
        )


__all__: list[str] = ["RemoteAPIError"]
