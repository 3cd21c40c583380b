from typing import Literal, Optional

from pydantic import BaseModel, Field

from .catalogue import ToolCatalogue, vk_method_handler
from .common import COUNT_DESCRIPTION, OFFSET_DESCRIPTION, OWNER_ID_DESCRIPTION, StringList, VKId


class GetCommentsInput(BaseModel):
    owner_id: VKId = Field(..., description=OWNER_ID_DESCRIPTION)
    post_id: int = Field(..., description="Post ID.")
    need_likes: Optional[Literal[0, 1]] = Field(None, description="1 to include like counters.")
    count: Optional[int] = Field(None, ge=0, le=100, description=COUNT_DESCRIPTION)
    offset: Optional[int] = Field(None, ge=0, description=OFFSET_DESCRIPTION)
    sort: Optional[Literal["asc", "desc"]] = Field(None, description="Sort order by date.")
    preview_length: Optional[int] = Field(None, ge=0, description="Truncate comment text to this many characters.")


class CreateCommentInput(BaseModel):
    owner_id: VKId = Field(..., description=OWNER_ID_DESCRIPTION)
    post_id: int = Field(..., description="Post ID.")
    message: Optional[str] = Field(None, description="Comment text.")
    attachments: Optional[StringList] = Field(None, description="Attachments for the comment.")
    reply_to_comment: Optional[int] = Field(None, description="ID of the comment being answered.")
    guid: Optional[str] = Field(None, description="Unique id preventing duplicate comments.")


class LikeInput(BaseModel):
    type: Literal["post", "comment"] = Field(..., description="Type of the liked object.")
    owner_id: VKId = Field(..., description=OWNER_ID_DESCRIPTION)
    item_id: int = Field(..., description="ID of the post or comment.")


def register_engagement_tools(catalogue: ToolCatalogue) -> None:
    """Register comment and like tools."""
    catalogue.add(
        "get_comments",
        "Get comments on a wall post.",
        GetCommentsInput,
        vk_method_handler("wall.getComments"),
    )
    catalogue.add(
        "create_comment",
        "Create a comment on a wall post.",
        CreateCommentInput,
        vk_method_handler("wall.createComment"),
    )
    catalogue.add("add_like", "Like a post or comment.", LikeInput, vk_method_handler("likes.add"))
    catalogue.add("delete_like", "Remove a like from a post or comment.", LikeInput, vk_method_handler("likes.delete"))
