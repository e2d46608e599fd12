# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request/response schemas and shared enumerations.

Modules:
    common: Enumerations (states, decisions, roster modes, relationship kinds).
    enrollment: Class assignment and occupancy schemas.
    link_request: Link request workflow schemas.
    family_link: Approved linkage schemas.
    roster: Roster query schemas.
"""
