"""Async client for the VK HTTP API.

Every VK method is a ``GET https://api.vk.com/method/<name>`` carrying the
access token and the API version as query parameters. The body is either
``{"response": ...}`` or ``{"error": {...}}``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

import httpx

from ..errors import VKAPIError, VKMCPError, VKNetworkError, VKUploadError
from .models import Group, User, WallPost
from .owner_ids import attachment_ref, group_id_from_owner

log = logging.getLogger(__name__)

DEFAULT_API_VERSION = "5.199"
DEFAULT_BASE_URL = "https://api.vk.com/method"
DEFAULT_TIMEOUT = 15.0
UPLOAD_TIMEOUT = 120.0

STORY_UPLOAD_SERVERS = {
    "photo": ("stories.getPhotoUploadServer", "file", "story.jpg"),
    "video": ("stories.getVideoUploadServer", "video_file", "story.mp4"),
}


def mask_token(token: Optional[str]) -> str:
    if not token:
        return "<none>"
    if len(token) <= 10:
        return "***"
    return f"{token[:6]}...{token[-4:]}"


def serialize_params(params: Dict[str, Any]) -> Dict[str, Any]:
    """Convert Python values into VK query parameters.

    ``None`` is dropped, sequences are joined with commas and booleans
    become ``1``/``0``.
    """
    result: Dict[str, Any] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            result[key] = 1 if value else 0
        elif isinstance(value, (list, tuple, set)):
            if not value:
                continue
            result[key] = ",".join(str(item) for item in value)
        else:
            result[key] = value
    return result


class VKApiClient(object):
    """Thin wrapper over one ``httpx.AsyncClient`` bound to an access token."""

    def __init__(
        self,
        access_token: str,
        api_version: str = DEFAULT_API_VERSION,
        timeout: float = DEFAULT_TIMEOUT,
        base_url: str = DEFAULT_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._access_token = access_token
        self.api_version = api_version
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def __aenter__(self) -> "VKApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def call(self, method: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Invoke a VK API method and return its ``response`` payload."""
        query = serialize_params(params or {})
        log.info("VK -> %s v=%s token=%s params=%s", method, self.api_version, mask_token(self._access_token), query)
        query["access_token"] = self._access_token
        query["v"] = self.api_version

        try:
            response = await self._http.get(
                f"{self.base_url}/{method}",
                params=query,
                headers={"Accept": "application/json; charset=utf-8"},
            )
        except httpx.HTTPError as exc:
            log.error("VK %s transport error: %s", method, exc)
            raise VKNetworkError(method, str(exc) or type(exc).__name__) from exc

        if response.status_code >= 400:
            log.error("VK %s HTTP %s: %s", method, response.status_code, response.text[:500])
            raise VKNetworkError(method, response.reason_phrase or "HTTP error", response.status_code)

        try:
            body = response.json()
        except ValueError as exc:
            raise VKNetworkError(method, "Invalid JSON in VK response", response.status_code) from exc

        if isinstance(body, dict) and body.get("error"):
            error = VKAPIError.from_payload(method, body["error"])
            log.error("VK %s failed: %s (%s)", method, error.error_msg, error.error_code)
            raise error

        log.info("VK <- %s OK", method)
        return body.get("response") if isinstance(body, dict) else body

    # -- typed helpers -------------------------------------------------

    async def post_to_wall(
        self,
        message: str,
        owner_id: Optional[str] = None,
        attachments: Optional[Iterable[str]] = None,
        publish_date: Optional[int] = None,
    ) -> Dict[str, Any]:
        return await self.call(
            "wall.post",
            {
                "message": message,
                "owner_id": owner_id,
                "attachments": list(attachments) if attachments else None,
                "publish_date": publish_date,
            },
        )

    async def get_wall_posts(
        self, owner_id: Optional[str] = None, count: int = 20, offset: int = 0
    ) -> Tuple[int, List[WallPost]]:
        result = await self.call("wall.get", {"owner_id": owner_id, "count": count, "offset": offset})
        return _post_listing(result)

    async def search_posts(
        self, query: str, owner_id: Optional[str] = None, count: int = 20, offset: int = 0
    ) -> Tuple[int, List[WallPost]]:
        result = await self.call(
            "wall.search",
            {"query": query, "owner_id": owner_id, "count": count, "offset": offset},
        )
        return _post_listing(result)

    async def get_group_info(self, group_id: str) -> Group:
        result = await self.call(
            "groups.getById",
            {"group_ids": group_id, "fields": ["members_count", "description"]},
        )
        # API 5.139+ wraps the list as {"groups": [...], "profiles": [...]}
        groups = result.get("groups") if isinstance(result, dict) else result
        if not groups:
            raise VKMCPError(f"Group {group_id} not found")
        return Group.from_vk(groups[0])

    async def get_user_info(self, user_id: str) -> User:
        result = await self.call("users.get", {"user_ids": user_id, "fields": ["screen_name", "photo_100"]})
        if not result:
            raise VKMCPError(f"User {user_id} not found")
        return User.from_vk(result[0])

    # -- media uploads -------------------------------------------------

    async def _download(self, url: str, what: str) -> bytes:
        log.info("Downloading %s from %s", what, url)
        try:
            response = await self._http.get(url, follow_redirects=True, timeout=UPLOAD_TIMEOUT)
        except httpx.HTTPError as exc:
            raise VKUploadError(f"Failed to fetch {what}: {exc}") from exc
        if response.status_code >= 400:
            raise VKUploadError(f"Failed to fetch {what}: HTTP {response.status_code}")
        return response.content

    async def _upload(
        self,
        upload_url: str,
        field: str,
        filename: str,
        content: bytes,
        what: str,
    ) -> Dict[str, Any]:
        try:
            response = await self._http.post(
                upload_url,
                files={field: (filename, content)},
                timeout=UPLOAD_TIMEOUT,
            )
        except httpx.HTTPError as exc:
            raise VKUploadError(f"Failed to upload {what} to VK: {exc}") from exc
        if response.status_code >= 400:
            raise VKUploadError(f"Failed to upload {what} to VK: HTTP {response.status_code}")
        try:
            body = response.json()
        except ValueError:
            return {}
        if isinstance(body, dict) and body.get("error"):
            error = body["error"]
            message = error.get("error_msg") if isinstance(error, dict) else error
            raise VKUploadError(f"VK rejected {what} upload: {message}")
        return body if isinstance(body, dict) else {}

    async def upload_wall_photo_from_url(self, image_url: str, owner_id: Optional[str] = None) -> str:
        """Upload an image for a wall post and return its ``photo<owner>_<id>`` attachment."""
        group_id = group_id_from_owner(owner_id)

        server = await self.call("photos.getWallUploadServer", {"group_id": group_id})
        content = await self._download(image_url, "image")
        uploaded = await self._upload(server["upload_url"], "photo", "image.jpg", content, "photo")

        saved = await self.call(
            "photos.saveWallPhoto",
            {
                "server": uploaded.get("server"),
                "photo": uploaded.get("photo"),
                "hash": uploaded.get("hash"),
                "group_id": group_id,
            },
        )
        photo = saved[0] if isinstance(saved, list) and saved else saved
        if not isinstance(photo, dict) or photo.get("id") is None or photo.get("owner_id") is None:
            raise VKUploadError("VK did not return saved photo info")
        return attachment_ref("photo", photo["owner_id"], photo["id"])

    async def upload_video_from_url(
        self,
        video_url: str,
        owner_id: Optional[str] = None,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> str:
        """Upload a video and return its ``video<owner>_<id>`` attachment."""
        group_id = group_id_from_owner(owner_id)

        save = await self.call(
            "video.save",
            {
                "group_id": group_id,
                "name": name or "Video",
                "description": description or "",
                "wallpost": 0,
            },
        )
        content = await self._download(video_url, "video")
        uploaded = await self._upload(save["upload_url"], "video_file", "video.mp4", content, "video")

        owner = save.get("owner_id") or uploaded.get("owner_id")
        video_id = save.get("video_id") or (save.get("video") or {}).get("id") or uploaded.get("video_id")
        if not owner or not video_id:
            raise VKUploadError("VK did not return video identifiers")
        return attachment_ref("video", owner, video_id)

    async def upload_story_from_url(
        self,
        kind: str,
        media_url: str,
        group_id: Optional[str] = None,
        link_text: Optional[str] = None,
        link_url: Optional[str] = None,
        reply_to_story: Optional[str] = None,
    ) -> Any:
        """Publish a photo or video story; returns the ``stories.save`` response."""
        if kind not in STORY_UPLOAD_SERVERS:
            raise VKUploadError(f"Unsupported story type: {kind}")
        server_method, field, filename = STORY_UPLOAD_SERVERS[kind]

        server = await self.call(
            server_method,
            {
                "add_to_news": 1,
                "group_id": group_id,
                "link_text": link_text,
                "link_url": link_url,
                "reply_to_story": reply_to_story,
            },
        )
        content = await self._download(media_url, kind)
        uploaded = await self._upload(server["upload_url"], field, filename, content, f"story {kind}")

        upload_result = (uploaded.get("response") or {}).get("upload_result") or uploaded.get("upload_result")
        if not upload_result:
            raise VKUploadError("VK did not return story upload_result")
        return await self.call("stories.save", {"upload_results": upload_result})


def _post_listing(result: Dict[str, Any]) -> Tuple[int, List[WallPost]]:
    items = result.get("items") or []
    return int(result.get("count") or 0), [WallPost.from_vk(item) for item in items]
