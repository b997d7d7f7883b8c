"""Identifier generation.

Users and tasks get random UUID v4 ids, rendered as 36-character strings.
Repositories call generate_uuid() on insert; nothing else mints ids.
"""

from uuid import uuid4


def generate_uuid() -> str:
    return str(uuid4())
