import httpx
import pytest

from conftest import TEST_TOKEN
from vk_mcp_server.core.vk_api import mask_token, serialize_params
from vk_mcp_server.errors import VKAPIError, VKMCPError, VKNetworkError, VKUploadError

pytestmark = pytest.mark.anyio


def test_serialize_params_uses_vk_conventions():
    params = serialize_params(
        {"a": None, "flag": True, "off": False, "ids": [1, 2, 3], "empty": [], "text": "hi", "n": 0}
    )
    assert params == {"flag": 1, "off": 0, "ids": "1,2,3", "text": "hi", "n": 0}


def test_mask_token():
    assert mask_token("abcdef1234567890wxyz") == "abcdef...wxyz"
    assert mask_token(None) == "<none>"
    assert mask_token("short") == "***"


async def test_call_sends_token_and_version(fake_vk):
    fake_vk.respond("users.get", [{"id": 1}])
    async with fake_vk.client() as client:
        result = await client.call("users.get", {"user_ids": "1"})

    assert result == [{"id": 1}]
    sent = fake_vk.params("users.get")[0]
    assert sent["access_token"] == TEST_TOKEN
    assert sent["v"] == "5.199"
    assert sent["user_ids"] == "1"


async def test_vk_error_is_decoded(fake_vk):
    fake_vk.on(
        "wall.post",
        {
            "error": {
                "error_code": 15,
                "error_msg": "Access denied",
                "request_params": [
                    {"key": "method", "value": "wall.post"},
                    {"key": "access_token", "value": "secret"},
                ],
            }
        },
    )
    async with fake_vk.client() as client:
        with pytest.raises(VKAPIError) as info:
            await client.call("wall.post", {"message": "x"})

    error = info.value
    assert str(error) == "VK API Error: Access denied (15)"
    assert error.error_code == 15
    assert error.method == "wall.post"
    assert error.request_params == [{"key": "method", "value": "wall.post"}]
    assert error.to_dict()["error_msg"] == "Access denied"


async def test_captcha_fields_are_kept(fake_vk):
    fake_vk.on(
        "wall.post",
        {"error": {"error_code": 14, "error_msg": "Captcha needed", "captcha_sid": "42", "captcha_img": "https://x/c.png"}},
    )
    async with fake_vk.client() as client:
        with pytest.raises(VKAPIError) as info:
            await client.call("wall.post")

    assert info.value.to_dict()["captcha_sid"] == "42"


async def test_http_error_becomes_network_error(fake_vk):
    fake_vk.on("wall.get", httpx.Response(502, text="bad gateway"))
    async with fake_vk.client() as client:
        with pytest.raises(VKNetworkError) as info:
            await client.call("wall.get")

    assert info.value.status_code == 502
    assert "(HTTP 502)" in str(info.value)


async def test_transport_failure_becomes_network_error():
    def broken(request):
        raise httpx.ConnectError("connection refused", request=request)

    from vk_mcp_server.core.vk_api import VKApiClient

    async with VKApiClient(TEST_TOKEN, transport=httpx.MockTransport(broken)) as client:
        with pytest.raises(VKNetworkError) as info:
            await client.call("wall.get")

    assert str(info.value).startswith("Network Error: connection refused")


async def test_get_group_info_accepts_both_response_shapes(fake_vk):
    group = {"id": 1, "name": "API Club", "screen_name": "apiclub", "type": "page", "members_count": 10}
    async with fake_vk.client() as client:
        fake_vk.respond("groups.getById", {"groups": [group], "profiles": []})
        assert (await client.get_group_info("apiclub")).name == "API Club"

        fake_vk.respond("groups.getById", [group])
        assert (await client.get_group_info("apiclub")).members_count == 10

    assert fake_vk.params("groups.getById")[0]["fields"] == "members_count,description"


async def test_get_group_info_empty(fake_vk):
    fake_vk.respond("groups.getById", {"groups": []})
    async with fake_vk.client() as client:
        with pytest.raises(VKMCPError):
            await client.get_group_info("nope")


async def test_wall_listing_is_decoded(fake_vk):
    fake_vk.respond(
        "wall.get",
        {"count": 7, "items": [{"id": 3, "date": 100, "text": "a" * 150, "likes": {"count": 2}}]},
    )
    async with fake_vk.client() as client:
        total, posts = await client.get_wall_posts(owner_id="-1", count=1)

    assert total == 7
    summary = posts[0].summary()
    assert summary["text"] == "a" * 100 + "..."
    assert summary["likes"] == 2
    assert summary["reposts"] == 0


async def test_upload_wall_photo_handshake(fake_vk):
    upload_url = "https://pu.vk.com/c1/upload"
    image_url = "https://example.com/cat.jpg"
    fake_vk.respond("photos.getWallUploadServer", {"upload_url": upload_url + "?act=do_add"})
    fake_vk.on(image_url, httpx.Response(200, content=b"\xff\xd8jpeg"))

    def upload(request):
        assert b'name="photo"' in request.content
        assert b"\xff\xd8jpeg" in request.content
        return {"server": 11, "photo": "[{}]", "hash": "abc"}

    fake_vk.on(upload_url, upload)
    fake_vk.respond("photos.saveWallPhoto", [{"id": 456, "owner_id": -77}])

    async with fake_vk.client() as client:
        attachment = await client.upload_wall_photo_from_url(image_url, owner_id="-77")

    assert attachment == "photo-77_456"
    assert fake_vk.params("photos.getWallUploadServer")[0]["group_id"] == "77"
    saved = fake_vk.params("photos.saveWallPhoto")[0]
    assert saved["server"] == "11"
    assert saved["hash"] == "abc"
    assert saved["group_id"] == "77"


async def test_upload_wall_photo_for_user_sends_no_group(fake_vk):
    fake_vk.respond("photos.getWallUploadServer", {"upload_url": "https://pu.vk.com/u"})
    fake_vk.on("https://example.com/a.png", httpx.Response(200, content=b"png"))
    fake_vk.on("https://pu.vk.com/u", {"server": 1, "photo": "p", "hash": "h"})
    fake_vk.respond("photos.saveWallPhoto", [{"id": 1, "owner_id": 42}])

    async with fake_vk.client() as client:
        assert await client.upload_wall_photo_from_url("https://example.com/a.png", owner_id="42") == "photo42_1"

    assert "group_id" not in fake_vk.params("photos.getWallUploadServer")[0]


async def test_failed_download_raises_upload_error(fake_vk):
    fake_vk.respond("photos.getWallUploadServer", {"upload_url": "https://pu.vk.com/u"})
    fake_vk.on("https://example.com/missing.jpg", httpx.Response(404))

    async with fake_vk.client() as client:
        with pytest.raises(VKUploadError) as info:
            await client.upload_wall_photo_from_url("https://example.com/missing.jpg")

    assert "HTTP 404" in str(info.value)


async def test_missing_saved_photo_raises(fake_vk):
    fake_vk.respond("photos.getWallUploadServer", {"upload_url": "https://pu.vk.com/u"})
    fake_vk.on("https://example.com/a.jpg", httpx.Response(200, content=b"x"))
    fake_vk.on("https://pu.vk.com/u", {"server": 1, "photo": "p", "hash": "h"})
    fake_vk.respond("photos.saveWallPhoto", [])

    async with fake_vk.client() as client:
        with pytest.raises(VKUploadError):
            await client.upload_wall_photo_from_url("https://example.com/a.jpg")


async def test_upload_video_handshake(fake_vk):
    fake_vk.respond(
        "video.save",
        {"upload_url": "https://vu.vk.com/upload", "owner_id": -5, "video_id": 900},
    )
    fake_vk.on("https://example.com/clip.mp4", httpx.Response(200, content=b"mp4"))
    fake_vk.on("https://vu.vk.com/upload", {"size": 3, "video_id": 900})

    async with fake_vk.client() as client:
        attachment = await client.upload_video_from_url("https://example.com/clip.mp4", owner_id="-5")

    assert attachment == "video-5_900"
    saved = fake_vk.params("video.save")[0]
    assert saved["name"] == "Video"
    assert saved["wallpost"] == "0"
    assert saved["group_id"] == "5"


async def test_upload_story_photo(fake_vk):
    fake_vk.respond("stories.getPhotoUploadServer", {"upload_url": "https://su.vk.com/story"})
    fake_vk.on("https://example.com/s.jpg", httpx.Response(200, content=b"jpg"))

    def upload(request):
        assert b'name="file"' in request.content
        return {"response": {"upload_result": "UPLOAD-RESULT"}}

    fake_vk.on("https://su.vk.com/story", upload)
    fake_vk.respond("stories.save", {"count": 1, "items": [{"id": 10}]})

    async with fake_vk.client() as client:
        result = await client.upload_story_from_url("photo", "https://example.com/s.jpg", group_id="9")

    assert result["items"][0]["id"] == 10
    assert fake_vk.params("stories.getPhotoUploadServer")[0]["add_to_news"] == "1"
    assert fake_vk.params("stories.save")[0]["upload_results"] == "UPLOAD-RESULT"


async def test_upload_rejected_by_vk(fake_vk):
    fake_vk.respond("stories.getVideoUploadServer", {"upload_url": "https://su.vk.com/v"})
    fake_vk.on("https://example.com/s.mp4", httpx.Response(200, content=b"mp4"))
    fake_vk.on("https://su.vk.com/v", {"error": {"error_code": 1, "error_msg": "bad file"}})

    async with fake_vk.client() as client:
        with pytest.raises(VKUploadError) as info:
            await client.upload_story_from_url("video", "https://example.com/s.mp4")

    assert "bad file" in str(info.value)


async def test_upload_story_video(fake_vk):
    fake_vk.respond("stories.getVideoUploadServer", {"upload_url": "https://su.vk.com/video"})
    fake_vk.on("https://example.com/s.mp4", httpx.Response(200, content=b"mp4"))

    def upload(request):
        assert b'name="video_file"' in request.content
        assert b'filename="story.mp4"' in request.content
        return {"upload_result": "VIDEO-RESULT"}

    fake_vk.on("https://su.vk.com/video", upload)
    fake_vk.respond("stories.save", {"count": 1, "items": [{"id": 11}]})

    async with fake_vk.client() as client:
        result = await client.upload_story_from_url("video", "https://example.com/s.mp4", link_text="more")

    assert result["items"][0]["id"] == 11
    sent = fake_vk.params("stories.getVideoUploadServer")[0]
    assert sent["add_to_news"] == "1"
    assert sent["link_text"] == "more"
    assert fake_vk.params("stories.save")[0]["upload_results"] == "VIDEO-RESULT"
