from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

from ..core.vk_api import VKApiClient
from .catalogue import ToolCatalogue, ToolOutput, vk_method_handler
from .common import COUNT_DESCRIPTION, OFFSET_DESCRIPTION, OWNER_ID_DESCRIPTION, IntList, StringList, VKId


class UploadWallPhotoInput(BaseModel):
    image_url: str = Field(
        ...,
        validation_alias=AliasChoices("image_url", "imageUrl"),
        description="Public URL of the image to upload.",
    )
    owner_id: Optional[VKId] = Field(
        None,
        description="Wall owner; a negative value uploads to the community's wall album.",
    )


class UploadVideoInput(BaseModel):
    video_url: str = Field(
        ...,
        validation_alias=AliasChoices("video_url", "videoUrl"),
        description="Public URL of the video file.",
    )
    owner_id: Optional[VKId] = Field(None, description=OWNER_ID_DESCRIPTION)
    name: Optional[str] = Field(None, description="Video title.")
    description: Optional[str] = Field(None, description="Video description.")


class CreateAlbumInput(BaseModel):
    title: str = Field(..., min_length=2, description="Album title.")
    description: Optional[str] = Field(None, description="Album description.")
    group_id: Optional[VKId] = Field(None, description="Community to create the album in.")
    privacy_view: Optional[StringList] = Field(None, description="Who can view the album.")
    privacy_comment: Optional[StringList] = Field(None, description="Who can comment on the album.")
    upload_by_admins_only: Optional[bool] = Field(None, description="Only community admins may upload.")
    comments_disabled: Optional[bool] = Field(None, description="Disable comments in the album.")


class GetAlbumsInput(BaseModel):
    owner_id: Optional[VKId] = Field(None, description=OWNER_ID_DESCRIPTION)
    album_ids: Optional[IntList] = Field(None, description="Album IDs to return.")
    count: Optional[int] = Field(None, ge=0, description=COUNT_DESCRIPTION)
    offset: Optional[int] = Field(None, ge=0, description=OFFSET_DESCRIPTION)
    need_system: Optional[bool] = Field(None, description="Include system albums.")
    need_covers: Optional[bool] = Field(None, description="Include cover URLs.")
    photo_sizes: Optional[bool] = Field(None, description="Return sizes of cover photos.")


class EditAlbumInput(BaseModel):
    album_id: int = Field(..., description="Album ID.")
    title: Optional[str] = Field(None, description="New album title.")
    description: Optional[str] = Field(None, description="New album description.")
    owner_id: Optional[VKId] = Field(None, description=OWNER_ID_DESCRIPTION)
    privacy_view: Optional[StringList] = Field(None, description="Who can view the album.")
    privacy_comment: Optional[StringList] = Field(None, description="Who can comment on the album.")


class DeleteAlbumInput(BaseModel):
    album_id: int = Field(..., description="Album ID.")
    group_id: Optional[VKId] = Field(None, description="Community owning the album.")


async def upload_wall_photo_from_url(client: VKApiClient, args: UploadWallPhotoInput) -> ToolOutput:
    attachment = await client.upload_wall_photo_from_url(args.image_url, owner_id=args.owner_id)
    return ToolOutput(text=attachment, data={"attachment": attachment})


async def upload_video_from_url(client: VKApiClient, args: UploadVideoInput) -> ToolOutput:
    attachment = await client.upload_video_from_url(
        args.video_url,
        owner_id=args.owner_id,
        name=args.name,
        description=args.description,
    )
    return ToolOutput(text=attachment, data={"attachment": attachment})


def register_media_tools(catalogue: ToolCatalogue) -> None:
    """Register photo/video upload and album tools."""
    catalogue.add(
        "upload_wall_photo_from_url",
        "Upload an image from a URL and return a photo attachment for wall posts.",
        UploadWallPhotoInput,
        upload_wall_photo_from_url,
    )
    catalogue.add(
        "upload_video_from_url",
        "Upload a video from a URL and return a video attachment for wall posts.",
        UploadVideoInput,
        upload_video_from_url,
    )
    catalogue.add(
        "create_photo_album",
        "Create a photo album.",
        CreateAlbumInput,
        vk_method_handler("photos.createAlbum"),
    )
    catalogue.add("get_photo_albums", "List photo albums.", GetAlbumsInput, vk_method_handler("photos.getAlbums"))
    catalogue.add("edit_photo_album", "Edit a photo album.", EditAlbumInput, vk_method_handler("photos.editAlbum"))
    catalogue.add(
        "delete_photo_album",
        "Delete a photo album.",
        DeleteAlbumInput,
        vk_method_handler("photos.deleteAlbum"),
    )
