"""Helpers for VK's signed owner identifiers.

VK addresses walls, photos and videos by ``owner_id``: a negative value
points at a community, a positive one at a user profile.
"""

from typing import Optional, Union

IdLike = Union[str, int, None]


def _as_text(value: IdLike) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def owner_id_for(group_id: IdLike = None, user_id: IdLike = None) -> Optional[str]:
    """Return the owner id for a group or user target.

    The group wins when both are given. ``None`` means "the token owner".
    """
    group = _as_text(group_id)
    if group:
        return "-" + group.lstrip("-")
    return _as_text(user_id)


def group_id_from_owner(owner_id: IdLike) -> Optional[str]:
    """Return the positive group id encoded in a negative owner id."""
    owner = _as_text(owner_id)
    if owner and owner.startswith("-"):
        return owner[1:] or None
    return None


def post_ref(owner_id: IdLike, post_id: IdLike) -> str:
    # wall.getById expects "<owner>_<post>"
    return f"{_as_text(owner_id)}_{_as_text(post_id)}"


def attachment_ref(kind: str, owner_id: IdLike, item_id: IdLike) -> str:
    return f"{kind}{_as_text(owner_id)}_{_as_text(item_id)}"
