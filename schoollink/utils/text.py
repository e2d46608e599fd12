# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Text helpers for ordering and matching people's names.

Database collations differ between SQLite (binary) and PostgreSQL, so
listings of students are ordered in Python with ``collation_key``.
"""

import unicodedata


def collation_key(value: str) -> str:
    """Case- and accent-insensitive sort key.

    Example:
        >>> sorted(["Zubiri", "Álvarez", "agirre"], key=collation_key)
        ['agirre', 'Álvarez', 'Zubiri']
    """
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.casefold()


def student_sort_key(student) -> tuple[str, str, str]:
    """Order students by surname, then name, then id."""
    return collation_key(student.surname), collation_key(student.name), student.id
