# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SchoolLink HTTP API.

Exposes the enrollment, link request and roster services through FastAPI.
"""
