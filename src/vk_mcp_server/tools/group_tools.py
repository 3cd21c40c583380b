from typing import Literal, Optional

from pydantic import BaseModel, Field

from ..core.vk_api import VKApiClient
from .catalogue import ToolCatalogue, ToolOutput, vk_method_handler
from .common import COUNT_DESCRIPTION, OFFSET_DESCRIPTION, StringList, VKId


class GroupIdInput(BaseModel):
    group_id: VKId = Field(..., min_length=1, description="Community ID or screen name.")


class GetGroupMembersInput(BaseModel):
    group_id: VKId = Field(..., description="Community ID or screen name.")
    sort: Optional[Literal["id_asc", "id_desc", "time_asc", "time_desc"]] = Field(None, description="Sort order.")
    offset: Optional[int] = Field(None, ge=0, description=OFFSET_DESCRIPTION)
    count: Optional[int] = Field(None, ge=0, le=1000, description=COUNT_DESCRIPTION)


class GetUserGroupsInput(BaseModel):
    user_id: Optional[VKId] = Field(None, description="User ID (defaults to the token owner).")
    extended: Optional[bool] = Field(None, description="Return full community objects.")
    filter: Optional[StringList] = Field(None, description="Filters such as admin, editor, moder, groups, publics, events.")
    fields: Optional[StringList] = Field(None, description="Extra community fields (with extended).")
    count: Optional[int] = Field(None, ge=0, le=1000, description=COUNT_DESCRIPTION)
    offset: Optional[int] = Field(None, ge=0, description=OFFSET_DESCRIPTION)


class GetGroupStatsInput(BaseModel):
    group_id: VKId = Field(..., description="Community ID.")
    timestamp_from: Optional[int] = Field(None, description="Start of the period (Unix timestamp).")
    timestamp_to: Optional[int] = Field(None, description="End of the period (Unix timestamp).")
    interval: Optional[Literal["day", "week", "month", "year", "all"]] = Field(None, description="Aggregation interval.")
    intervals_count: Optional[int] = Field(None, ge=1, description="Number of intervals to return.")
    fields: Optional[StringList] = Field(None, description="Statistics sections to return (reach, visitors).")


class EditGroupInput(BaseModel):
    group_id: VKId = Field(..., description="Community ID.")
    title: Optional[str] = Field(None, description="Community name.")
    description: Optional[str] = Field(None, description="Community description.")
    screen_name: Optional[str] = Field(None, description="Short address of the community.")
    access: Optional[Literal[0, 1, 2]] = Field(None, description="0 open, 1 closed, 2 private.")
    website: Optional[str] = Field(None, description="Website address.")
    subject: Optional[int] = Field(None, description="Subject category ID.")
    public_category: Optional[int] = Field(None, description="Public page category ID.")
    public_subcategory: Optional[int] = Field(None, description="Public page subcategory ID.")
    age_limits: Optional[Literal[1, 2, 3]] = Field(None, description="1 none, 2 16+, 3 18+.")
    wall: Optional[int] = Field(None, ge=0, le=3, description="Wall mode: 0 off, 1 open, 2 limited, 3 closed.")
    topics: Optional[int] = Field(None, ge=0, le=2, description="Discussion boards mode.")
    photos: Optional[int] = Field(None, ge=0, le=2, description="Photos mode.")
    video: Optional[int] = Field(None, ge=0, le=2, description="Videos mode.")
    audio: Optional[int] = Field(None, ge=0, le=2, description="Audio mode.")
    wiki: Optional[int] = Field(None, ge=0, le=2, description="Wiki pages mode.")
    messages: Optional[bool] = Field(None, description="Enable community messages.")
    articles: Optional[bool] = Field(None, description="Enable articles.")
    events: Optional[bool] = Field(None, description="Enable events block.")
    links: Optional[bool] = Field(None, description="Enable links block.")
    market: Optional[bool] = Field(None, description="Enable the products section.")
    obscene_filter: Optional[bool] = Field(None, description="Filter obscene language.")
    obscene_stopwords: Optional[bool] = Field(None, description="Filter by keywords.")
    obscene_words: Optional[StringList] = Field(None, description="Keywords for the stop-word filter.")
    main_section: Optional[int] = Field(None, description="Main section ID.")
    secondary_section: Optional[int] = Field(None, description="Secondary section ID.")
    country: Optional[int] = Field(None, description="Country ID.")
    city: Optional[int] = Field(None, description="City ID.")
    rss: Optional[str] = Field(None, description="RSS feed address for import.")
    event_start_date: Optional[int] = Field(None, description="Event start (Unix timestamp).")
    event_finish_date: Optional[int] = Field(None, description="Event finish (Unix timestamp).")
    event_group_id: Optional[int] = Field(None, description="Organizer community ID.")
    public_date: Optional[str] = Field(None, description="Founding date in dd.mm.YYYY format.")


class BanUserInput(BaseModel):
    group_id: VKId = Field(..., description="Community ID.")
    owner_id: VKId = Field(..., description="ID of the user (or -community) to ban.")
    end_date: Optional[int] = Field(None, description="Ban end (Unix timestamp); omit for a permanent ban.")
    reason: Optional[Literal[0, 1, 2, 3, 4]] = Field(
        None, description="0 other, 1 spam, 2 verbal abuse, 3 strong language, 4 flood."
    )
    comment: Optional[str] = Field(None, description="Comment on the ban.")
    comment_visible: Optional[bool] = Field(None, description="Show the comment to the banned user.")


class UnbanUserInput(BaseModel):
    group_id: VKId = Field(..., description="Community ID.")
    owner_id: VKId = Field(..., description="ID of the user (or -community) to unban.")


class GetBannedInput(BaseModel):
    group_id: VKId = Field(..., description="Community ID.")
    offset: Optional[int] = Field(None, ge=0, description=OFFSET_DESCRIPTION)
    count: Optional[int] = Field(None, ge=0, le=200, description=COUNT_DESCRIPTION)
    owner_id: Optional[VKId] = Field(None, description="Return the ban entry of this user only.")
    fields: Optional[StringList] = Field(None, description="Extra profile fields.")


class GetOnlineStatusInput(BaseModel):
    group_id: VKId = Field(..., description="Community ID.")


class GetLongPollServerInput(BaseModel):
    group_id: VKId = Field(..., description="Community ID.")


async def get_group_info(client: VKApiClient, args: GroupIdInput) -> ToolOutput:
    group = await client.get_group_info(args.group_id)
    text = (
        "Group info:\n"
        f"Name: {group.name}\n"
        f"ID: {group.id}\n"
        f"Type: {group.type}\n"
        f"Members: {group.members_count if group.members_count is not None else 'n/a'}"
    )
    return ToolOutput(text=text, data=group.to_dict())


def register_group_tools(catalogue: ToolCatalogue) -> None:
    """Register community information and management tools."""
    catalogue.add("get_group_info", "Get information about a VK community.", GroupIdInput, get_group_info)
    catalogue.add(
        "get_group_members",
        "Get the members of a community.",
        GetGroupMembersInput,
        vk_method_handler("groups.getMembers"),
    )
    catalogue.add(
        "get_user_groups",
        "Get the communities a user belongs to.",
        GetUserGroupsInput,
        vk_method_handler("groups.get"),
    )
    catalogue.add(
        "get_group_long_poll_server",
        "Get Bots Long Poll server credentials of a community (requires a community token).",
        GetLongPollServerInput,
        vk_method_handler("groups.getLongPollServer"),
    )
    catalogue.add(
        "get_group_stats",
        "Get community statistics (stats.get).",
        GetGroupStatsInput,
        vk_method_handler("stats.get"),
    )
    catalogue.add(
        "get_group_online_status",
        "Get the online status of a community.",
        GetOnlineStatusInput,
        vk_method_handler("groups.getOnlineStatus"),
    )
    catalogue.add("edit_group", "Edit community settings.", EditGroupInput, vk_method_handler("groups.edit"))
    catalogue.add("ban_user", "Add a user to the community blacklist.", BanUserInput, vk_method_handler("groups.ban"))
    catalogue.add(
        "unban_user",
        "Remove a user from the community blacklist.",
        UnbanUserInput,
        vk_method_handler("groups.unban"),
    )
    catalogue.add(
        "get_banned_users",
        "Get the community blacklist.",
        GetBannedInput,
        vk_method_handler("groups.getBanned"),
    )
