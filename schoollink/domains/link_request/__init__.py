# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Link request domain package.

This package provides the family link request workflow:
- Creating link requests
- Approving and rejecting pending requests
- Pending queue and audit history
"""

from schoollink.domains.link_request.history import (
    LinkRequestHistory,
    history_criteria,
    to_link_request_response,
)
from schoollink.domains.link_request.service import LinkRequestWorkflow, SideEffects

__all__ = [
    "LinkRequestHistory",
    "LinkRequestWorkflow",
    "SideEffects",
    "history_criteria",
    "to_link_request_response",
]
