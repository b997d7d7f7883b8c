"""Task store with ownership scoping.

Every operation takes the authenticated User; tasks of other users are
never visible.
"""

from . import schemas

__all__ = ["schemas"]
