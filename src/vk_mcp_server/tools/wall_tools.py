from typing import List, Optional

from pydantic import BaseModel, Field

from ..core.models import WallPost
from ..core.owner_ids import owner_id_for, post_ref
from ..core.vk_api import VKApiClient
from .catalogue import ToolCatalogue, ToolOutput, json_output, vk_method_handler
from .common import COUNT_DESCRIPTION, OFFSET_DESCRIPTION, OWNER_ID_DESCRIPTION, StringList, VKId


class PostToWallInput(BaseModel):
    message: str = Field(..., min_length=1, description="Text of the post.")
    group_id: Optional[VKId] = Field(None, description="Community ID (publish on the community wall).")
    user_id: Optional[VKId] = Field(None, description="User ID (publish on the user's wall).")
    attachments: Optional[StringList] = Field(
        None,
        description="Attachments such as photo<owner>_<id> or video<owner>_<id>.",
    )
    publish_date: Optional[int] = Field(None, description="Deferred publication time (Unix timestamp).")


class GetWallPostsInput(BaseModel):
    group_id: Optional[VKId] = Field(None, description="Community ID.")
    user_id: Optional[VKId] = Field(None, description="User ID.")
    count: int = Field(20, ge=1, le=100, description=COUNT_DESCRIPTION)
    offset: int = Field(0, ge=0, description=OFFSET_DESCRIPTION)


class SearchPostsInput(BaseModel):
    query: str = Field(..., min_length=1, description="Search query.")
    group_id: Optional[VKId] = Field(None, description="Community ID to search in.")
    count: int = Field(20, ge=1, le=100, description=COUNT_DESCRIPTION)
    offset: int = Field(0, ge=0, description=OFFSET_DESCRIPTION)


class PostRefInput(BaseModel):
    owner_id: VKId = Field(..., description=OWNER_ID_DESCRIPTION)
    post_id: VKId = Field(..., description="Post ID.")


class GetWallByIdInput(BaseModel):
    posts: StringList = Field(..., min_length=1, description="Post references in the form <owner>_<post>.")


class DeletePostInput(BaseModel):
    owner_id: VKId = Field(..., description=OWNER_ID_DESCRIPTION)
    post_id: int = Field(..., description="Post ID.")


class EditPostInput(BaseModel):
    owner_id: VKId = Field(..., description=OWNER_ID_DESCRIPTION)
    post_id: int = Field(..., description="Post ID.")
    message: Optional[str] = Field(None, description="New text of the post.")
    attachments: Optional[StringList] = Field(None, description="New list of attachments.")


class PinPostInput(BaseModel):
    post_id: int = Field(..., description="Post ID.")
    owner_id: Optional[VKId] = Field(None, description=OWNER_ID_DESCRIPTION)


class RepostInput(BaseModel):
    object: str = Field(..., description="Object to share, e.g. wall-1_123.")
    message: Optional[str] = Field(None, description="Comment added to the repost.")
    group_id: Optional[VKId] = Field(None, description="Community to repost into.")


class GetRepostsInput(BaseModel):
    post_id: int = Field(..., description="Post ID.")
    owner_id: Optional[VKId] = Field(None, description=OWNER_ID_DESCRIPTION)
    count: Optional[int] = Field(None, ge=1, le=1000, description=COUNT_DESCRIPTION)
    offset: Optional[int] = Field(None, ge=0, description=OFFSET_DESCRIPTION)


def format_post_listing(header: str, count: int, posts: List[WallPost]) -> str:
    blocks = []
    for post in posts:
        summary = post.summary()
        blocks.append(
            "%s\nLikes: %d | Reposts: %d | Comments: %d\n"
            % (summary["text"], summary["likes"], summary["reposts"], summary["comments"])
        )
    return "%sPosts found: %d\n\n%s" % (header, count, "\n".join(blocks))


def _listing_output(header: str, count: int, posts: List[WallPost]) -> ToolOutput:
    return ToolOutput(
        text=format_post_listing(header, count, posts),
        data={"count": count, "posts": [post.summary() for post in posts]},
    )


async def post_to_wall(client: VKApiClient, args: PostToWallInput) -> ToolOutput:
    owner_id = owner_id_for(args.group_id, args.user_id)
    result = await client.post_to_wall(
        message=args.message,
        owner_id=owner_id,
        attachments=args.attachments,
        publish_date=args.publish_date,
    )
    post_id = result.get("post_id")
    return ToolOutput(
        text=f"Post published. Post ID: {post_id}",
        data={
            "post_id": post_id,
            "owner_id": owner_id,
            "target": "group" if args.group_id else "user",
        },
    )


async def get_wall_posts(client: VKApiClient, args: GetWallPostsInput) -> ToolOutput:
    count, posts = await client.get_wall_posts(
        owner_id=owner_id_for(args.group_id, args.user_id),
        count=args.count,
        offset=args.offset,
    )
    return _listing_output("", count, posts)


async def search_posts(client: VKApiClient, args: SearchPostsInput) -> ToolOutput:
    count, posts = await client.search_posts(
        query=args.query,
        owner_id=owner_id_for(args.group_id),
        count=args.count,
        offset=args.offset,
    )
    return _listing_output(f'Search results for "{args.query}"\n', count, posts)


async def get_post_stats(client: VKApiClient, args: PostRefInput) -> ToolOutput:
    result = await client.call("wall.getById", {"posts": post_ref(args.owner_id, args.post_id)})
    return json_output(result)


def register_wall_tools(catalogue: ToolCatalogue) -> None:
    """Register wall publishing and reading tools."""
    catalogue.add(
        "post_to_wall",
        "Publish a post on a user's or community's VK wall.",
        PostToWallInput,
        post_to_wall,
    )
    catalogue.add(
        "get_wall_posts",
        "Get posts from a user's or community's wall.",
        GetWallPostsInput,
        get_wall_posts,
    )
    catalogue.add(
        "search_posts",
        "Search wall posts by keyword.",
        SearchPostsInput,
        search_posts,
    )
    catalogue.add(
        "get_post_stats",
        "Get likes, reposts, comments and views of a post (wall.getById).",
        PostRefInput,
        get_post_stats,
    )
    catalogue.add(
        "get_wall_by_id",
        "Get posts by their <owner>_<post> identifiers.",
        GetWallByIdInput,
        vk_method_handler("wall.getById"),
    )
    catalogue.add("delete_post", "Delete a post from a wall.", DeletePostInput, vk_method_handler("wall.delete"))
    catalogue.add("edit_post", "Edit a post on a wall.", EditPostInput, vk_method_handler("wall.edit"))
    catalogue.add("pin_post", "Pin a post on a wall.", PinPostInput, vk_method_handler("wall.pinPost"))
    catalogue.add("unpin_post", "Unpin a post on a wall.", PinPostInput, vk_method_handler("wall.unpinPost"))
    catalogue.add(
        "repost",
        "Share a post to the current user's or a community's wall.",
        RepostInput,
        vk_method_handler("wall.repost"),
    )
    catalogue.add(
        "get_reposts",
        "Get the list of reposts of a post.",
        GetRepostsInput,
        vk_method_handler("wall.getReposts"),
    )
