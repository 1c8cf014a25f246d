"""Place lifecycle.

A place starts out pending and becomes approved through an admin action.
Rejected or deleted places are removed from the store, so "deleted" is the
``None`` result of :func:`transition` rather than a stored status.
"""

from enum import Enum
from typing import Optional

from ..errors import ConflictError, ForbiddenError

ROLE_ADMIN = "admin"
ROLE_USER = "user"


class PlaceStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"


class ModerationAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"
    DELETE = "delete"
    EDIT = "edit"


ADMIN_ACTIONS = {ModerationAction.APPROVE, ModerationAction.REJECT, ModerationAction.DELETE}

INITIAL_STATUS = PlaceStatus.PENDING


def transition(current: PlaceStatus, action: ModerationAction, role: Optional[str]) -> Optional[PlaceStatus]:
    """Return the status after ``action``, or None when the place is removed."""
    current = PlaceStatus(current)
    action = ModerationAction(action)

    if action in ADMIN_ACTIONS and role != ROLE_ADMIN:
        raise ForbiddenError("Forbidden: Admins only")

    if action is ModerationAction.APPROVE:
        return PlaceStatus.APPROVED
    if action is ModerationAction.REJECT:
        if current is not PlaceStatus.PENDING:
            raise ConflictError("Only pending places can be rejected")
        return None
    if action is ModerationAction.DELETE:
        return None
    # edits never move a place through the review queue
    return current
