from dataclasses import dataclass
from typing import Any, Dict, Optional

SUMMARY_TEXT_LIMIT = 100


def _counter(raw: Dict[str, Any], key: str) -> int:
    value = raw.get(key) or {}
    if isinstance(value, dict):
        return int(value.get("count") or 0)
    return 0


def truncate(text: str, limit: int = SUMMARY_TEXT_LIMIT) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text


@dataclass
class WallPost(object):
    """Represent a single wall post."""

    id: int
    owner_id: Optional[int]
    from_id: Optional[int]
    date: int
    text: str
    likes: int = 0
    reposts: int = 0
    comments: int = 0

    @classmethod
    def from_vk(cls, raw: Dict[str, Any]) -> "WallPost":
        return cls(
            id=int(raw.get("id") or 0),
            owner_id=raw.get("owner_id"),
            from_id=raw.get("from_id"),
            date=int(raw.get("date") or 0),
            text=raw.get("text") or "",
            likes=_counter(raw, "likes"),
            reposts=_counter(raw, "reposts"),
            comments=_counter(raw, "comments"),
        )

    def summary(self) -> Dict[str, Any]:
        """Return the short form used in listings."""
        return {
            "id": self.id,
            "text": truncate(self.text),
            "date": self.date,
            "likes": self.likes,
            "reposts": self.reposts,
            "comments": self.comments,
        }


@dataclass
class Group(object):
    """Represent a VK community."""

    id: int
    name: str
    screen_name: str
    type: str
    members_count: Optional[int]
    description: Optional[str] = None

    @classmethod
    def from_vk(cls, raw: Dict[str, Any]) -> "Group":
        return cls(
            id=int(raw.get("id") or 0),
            name=raw.get("name") or "",
            screen_name=raw.get("screen_name") or "",
            type=raw.get("type") or "",
            members_count=raw.get("members_count"),
            description=raw.get("description"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "screen_name": self.screen_name,
            "type": self.type,
            "members_count": self.members_count,
        }


@dataclass
class User(object):
    """Represent a VK user profile."""

    id: int
    first_name: str
    last_name: str
    screen_name: Optional[str]
    photo_100: Optional[str]

    @classmethod
    def from_vk(cls, raw: Dict[str, Any]) -> "User":
        return cls(
            id=int(raw.get("id") or 0),
            first_name=raw.get("first_name") or "",
            last_name=raw.get("last_name") or "",
            screen_name=raw.get("screen_name"),
            photo_100=raw.get("photo_100"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "screen_name": self.screen_name,
            "photo_100": self.photo_100,
        }
