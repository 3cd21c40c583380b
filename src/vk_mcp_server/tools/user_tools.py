from typing import Literal, Optional

from pydantic import BaseModel, Field

from ..core.vk_api import VKApiClient
from .catalogue import ToolCatalogue, ToolOutput, vk_method_handler
from .common import COUNT_DESCRIPTION, OFFSET_DESCRIPTION, StringList, VKId


class UserIdInput(BaseModel):
    user_id: VKId = Field(..., min_length=1, description="User ID or screen name.")


class SearchUsersInput(BaseModel):
    q: str = Field(..., description="Search query (name, surname).")
    sort: Optional[Literal[0, 1]] = Field(None, description="0 by popularity, 1 by registration date.")
    offset: Optional[int] = Field(None, ge=0, description=OFFSET_DESCRIPTION)
    count: Optional[int] = Field(None, ge=0, le=1000, description=COUNT_DESCRIPTION)
    fields: Optional[StringList] = Field(None, description="Extra profile fields.")
    city: Optional[int] = Field(None, description="City ID.")
    country: Optional[int] = Field(None, description="Country ID.")
    hometown: Optional[str] = Field(None, description="Home town name.")
    university: Optional[int] = Field(None, description="University ID.")
    university_year: Optional[int] = Field(None, description="Graduation year.")
    sex: Optional[Literal[0, 1, 2]] = Field(None, description="0 any, 1 female, 2 male.")
    status: Optional[int] = Field(None, ge=0, le=8, description="Relationship status.")
    age_from: Optional[int] = Field(None, ge=0, description="Minimum age.")
    age_to: Optional[int] = Field(None, ge=0, description="Maximum age.")
    birth_day: Optional[int] = Field(None, ge=1, le=31, description="Day of birth.")
    birth_month: Optional[int] = Field(None, ge=1, le=12, description="Month of birth.")
    birth_year: Optional[int] = Field(None, description="Year of birth.")
    online: Optional[bool] = Field(None, description="Only users currently online.")
    has_photo: Optional[bool] = Field(None, description="Only users with a profile photo.")
    school: Optional[int] = Field(None, description="School ID.")
    religion: Optional[str] = Field(None, description="Religious views.")
    interests: Optional[str] = Field(None, description="Interests.")
    company: Optional[str] = Field(None, description="Company name.")
    position: Optional[str] = Field(None, description="Job position.")
    group_id: Optional[VKId] = Field(None, description="Search among the members of this community.")
    from_list: Optional[StringList] = Field(None, description="Sections to search in: friends, subscriptions.")


class GetFollowersInput(BaseModel):
    user_id: Optional[VKId] = Field(None, description="User ID (defaults to the token owner).")
    offset: Optional[int] = Field(None, ge=0, description=OFFSET_DESCRIPTION)
    count: Optional[int] = Field(None, ge=0, le=1000, description=COUNT_DESCRIPTION)
    fields: Optional[StringList] = Field(None, description="Extra profile fields.")
    name_case: Optional[Literal["nom", "gen", "dat", "acc", "ins", "abl"]] = Field(
        None, description="Grammatical case for names."
    )


class GetSubscriptionsInput(BaseModel):
    user_id: Optional[VKId] = Field(None, description="User ID (defaults to the token owner).")
    extended: Optional[bool] = Field(None, description="Return users and communities in one list.")
    offset: Optional[int] = Field(None, ge=0, description=OFFSET_DESCRIPTION)
    count: Optional[int] = Field(None, ge=0, le=200, description=COUNT_DESCRIPTION)
    fields: Optional[StringList] = Field(None, description="Extra fields (with extended).")


class ResolveScreenNameInput(BaseModel):
    screen_name: str = Field(..., min_length=1, description="Short name, e.g. 'durov' or 'apiclub'.")


async def get_user_info(client: VKApiClient, args: UserIdInput) -> ToolOutput:
    user = await client.get_user_info(args.user_id)
    text = (
        "User info:\n"
        f"Name: {user.first_name} {user.last_name}\n"
        f"ID: {user.id}\n"
        f"Screen name: {user.screen_name or ''}"
    )
    return ToolOutput(text=text, data=user.to_dict())


def register_user_tools(catalogue: ToolCatalogue) -> None:
    """Register user profile tools."""
    catalogue.add("get_user_info", "Get information about a VK user.", UserIdInput, get_user_info)
    catalogue.add("search_users", "Search VK users.", SearchUsersInput, vk_method_handler("users.search"))
    catalogue.add(
        "get_user_followers",
        "Get the followers of a user.",
        GetFollowersInput,
        vk_method_handler("users.getFollowers"),
    )
    catalogue.add(
        "get_user_subscriptions",
        "Get the users and communities a user follows.",
        GetSubscriptionsInput,
        vk_method_handler("users.getSubscriptions"),
    )
    catalogue.add(
        "resolve_screen_name",
        "Resolve a screen name to a user, community or application.",
        ResolveScreenNameInput,
        vk_method_handler("utils.resolveScreenName"),
    )
