"""SchoolLink Backend.

Enrollment and family linking service for school centers: assigns students
to capacity-limited classes and runs the family-to-student link request
approval workflow.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "0.1.0"
