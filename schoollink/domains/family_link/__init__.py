# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Family link domain package.

This package provides student-family linkage management:
- Approving requests together with the linkage
- Listing linkages
- Unlinking
"""

from schoollink.domains.family_link.service import FamilyLinkService, to_family_link_response

__all__ = [
    "FamilyLinkService",
    "to_family_link_response",
]
