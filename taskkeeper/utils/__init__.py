"""Utility functions for TaskKeeper.

Import convention: use module-level imports for clarity.

    from taskkeeper.utils import isodatetime, uid
    timestamp = isodatetime.now()
    task_id = uid.generate_uuid()
"""

from . import isodatetime, uid

__all__ = ["isodatetime", "uid"]
