# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Roster domain package."""

from schoollink.domains.roster.service import ResolvedScope, RosterService, to_roster_entry

__all__ = [
    "ResolvedScope",
    "RosterService",
    "to_roster_entry",
]
