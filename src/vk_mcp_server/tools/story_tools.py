from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

from ..core.vk_api import VKApiClient
from .catalogue import ToolCatalogue, ToolOutput, json_output, vk_method_handler
from .common import OWNER_ID_DESCRIPTION, StringList, VKId


class GetStoriesInput(BaseModel):
    owner_id: Optional[VKId] = Field(None, description=OWNER_ID_DESCRIPTION)
    extended: Optional[bool] = Field(None, description="Return profiles and communities as well.")
    fields: Optional[StringList] = Field(None, description="Extra profile fields (with extended).")


class DeleteStoryInput(BaseModel):
    story_id: int = Field(..., description="Story ID.")
    owner_id: Optional[VKId] = Field(None, description=OWNER_ID_DESCRIPTION)


class UploadStoryInput(BaseModel):
    media_url: str = Field(
        ...,
        validation_alias=AliasChoices("media_url", "url", "imageUrl", "videoUrl"),
        description="Public URL of the photo or video.",
    )
    group_id: Optional[VKId] = Field(None, description="Publish the story on behalf of this community.")
    link_text: Optional[str] = Field(None, description="Text of the link button (e.g. 'more', 'buy').")
    link_url: Optional[str] = Field(None, description="Target URL of the link button.")
    reply_to_story: Optional[str] = Field(None, description="Story being answered, as <owner>_<story>.")


def _story_uploader(kind: str):
    async def _handler(client: VKApiClient, args: UploadStoryInput) -> ToolOutput:
        result = await client.upload_story_from_url(
            kind,
            args.media_url,
            group_id=args.group_id,
            link_text=args.link_text,
            link_url=args.link_url,
            reply_to_story=args.reply_to_story,
        )
        return json_output(result)

    return _handler


def register_story_tools(catalogue: ToolCatalogue) -> None:
    """Register stories tools."""
    catalogue.add("get_stories", "Get current stories.", GetStoriesInput, vk_method_handler("stories.get"))
    catalogue.add("delete_story", "Delete a story.", DeleteStoryInput, vk_method_handler("stories.delete"))
    catalogue.add(
        "upload_story_photo_from_url",
        "Publish a photo story from an image URL.",
        UploadStoryInput,
        _story_uploader("photo"),
    )
    catalogue.add(
        "upload_story_video_from_url",
        "Publish a video story from a video URL.",
        UploadStoryInput,
        _story_uploader("video"),
    )
