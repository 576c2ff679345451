"""Tests for the creative asset upload pipeline."""

import json

import httpx
import pytest

from beeswax_client.exceptions import StatusCodeError, UploadError, ValidationError
from beeswax_client.uploads import CreativeAssetUploader
from beeswax_client.uploads.creative_assets import CREATIVE_ASSET_PATH, UPLOAD_FIELD

SOURCE_URL = "https://cdn.example.com/files/banner.png"
SOURCE_PATH = "/files/banner.png"
CONTENT = b"\x89PNG fake image bytes"


@pytest.fixture
def upload_routes(fake_beeswax):
    """Script the source file and the three asset endpoints."""
    fake_beeswax.add(
        "HEAD", SOURCE_PATH, httpx.Response(200, headers={"content-length": str(len(CONTENT))})
    )
    fake_beeswax.add(
        "GET",
        SOURCE_PATH,
        httpx.Response(200, content=CONTENT, headers={"content-type": "image/png"}),
    )
    fake_beeswax.add(
        "POST", CREATIVE_ASSET_PATH, httpx.Response(200, json={"success": True, "payload": {"id": 31}})
    )
    fake_beeswax.add(
        "POST",
        f"{CREATIVE_ASSET_PATH}/upload/31",
        httpx.Response(200, json={"success": True, "payload": {"id": 31}}),
    )
    fake_beeswax.add(
        "GET",
        f"{CREATIVE_ASSET_PATH}/31",
        httpx.Response(
            200,
            json={
                "success": True,
                "payload": [{"creative_asset_id": 31, "creative_asset_name": "banner.png"}],
            },
        ),
    )
    return fake_beeswax


class TestInit:
    """Test building the asset definition."""

    def test_requires_source_url(self, bx):
        with pytest.raises(ValidationError) as exc_info:
            bx.creative_assets.init(None)
        assert exc_info.value.details == {"field": "source_url"}

    def test_name_defaults_to_file_name(self, bx):
        state = bx.creative_assets.init(SOURCE_URL, advertiser_id=4)
        assert state.asset_def == {
            "advertiser_id": 4,
            "creative_asset_name": "banner.png",
        }

    def test_explicit_name_and_unknown_params(self, bx):
        state = bx.creative_assets.init(
            SOURCE_URL, creative_asset_name="hero", notes="n", color="red"
        )
        assert state.asset_def == {"creative_asset_name": "hero", "notes": "n"}


class TestUpload:
    """Test the whole pipeline against the fake server."""

    @pytest.mark.asyncio
    async def test_upload_pipeline(self, bx, upload_routes):
        asset = await bx.upload_creative_asset(SOURCE_URL, advertiser_id=4)

        assert asset == {"creative_asset_id": 31, "creative_asset_name": "banner.png"}

        create = upload_routes.calls("POST", CREATIVE_ASSET_PATH)[0]
        assert json.loads(create.content) == {
            "advertiser_id": 4,
            "creative_asset_name": "banner.png",
            "size_in_bytes": len(CONTENT),
        }

        upload = upload_routes.calls("POST", f"{CREATIVE_ASSET_PATH}/upload/31")[0]
        assert upload.headers["content-type"].startswith("multipart/form-data")
        assert f'name="{UPLOAD_FIELD}"'.encode() in upload.content
        assert b'filename="banner.png"' in upload.content
        assert CONTENT in upload.content

    @pytest.mark.asyncio
    async def test_upload_body_resent_after_401(self, bx, upload_routes):
        upload_routes.routes[("POST", f"{CREATIVE_ASSET_PATH}/upload/31")].insert(
            0, httpx.Response(401)
        )

        await bx.upload_creative_asset(SOURCE_URL)

        uploads = upload_routes.calls("POST", f"{CREATIVE_ASSET_PATH}/upload/31")
        assert len(uploads) == 2
        assert all(CONTENT in u.content for u in uploads)
        assert upload_routes.login_count == 1
        assert len(upload_routes.calls("GET", SOURCE_PATH)) == 1

    @pytest.mark.asyncio
    async def test_source_fetched_from_its_own_host(self, bx, upload_routes):
        await bx.upload_creative_asset(SOURCE_URL)

        head = upload_routes.calls("HEAD", SOURCE_PATH)[0]
        assert head.url.host == "cdn.example.com"

    @pytest.mark.asyncio
    async def test_missing_content_length(self, bx, fake_beeswax):
        fake_beeswax.add("HEAD", SOURCE_PATH, httpx.Response(200))

        with pytest.raises(UploadError) as exc_info:
            await bx.upload_creative_asset(SOURCE_URL)

        assert exc_info.value.step == "get_size"
        assert fake_beeswax.calls("POST", CREATIVE_ASSET_PATH) == []

    @pytest.mark.asyncio
    async def test_source_not_available(self, bx, fake_beeswax):
        fake_beeswax.add("HEAD", SOURCE_PATH, httpx.Response(403))

        with pytest.raises(UploadError) as exc_info:
            await bx.upload_creative_asset(SOURCE_URL)

        assert exc_info.value.source_url == SOURCE_URL

    @pytest.mark.asyncio
    async def test_create_failure_propagates(self, bx, upload_routes):
        upload_routes.routes[("POST", CREATIVE_ASSET_PATH)] = [
            httpx.Response(400, json={"creative_asset_name": ["required"]})
        ]

        with pytest.raises(StatusCodeError):
            await bx.upload_creative_asset(SOURCE_URL)
        assert upload_routes.calls("GET", SOURCE_PATH) == []

    @pytest.mark.asyncio
    async def test_missing_asset_id(self, bx, upload_routes):
        upload_routes.routes[("POST", CREATIVE_ASSET_PATH)] = [
            httpx.Response(200, json={"success": True, "payload": []})
        ]

        with pytest.raises(UploadError) as exc_info:
            await bx.upload_creative_asset(SOURCE_URL)
        assert exc_info.value.step == "create_asset"

    @pytest.mark.asyncio
    async def test_uploader_standalone(self, bx, upload_routes):
        uploader = CreativeAssetUploader(bx.dispatcher)
        asset = await uploader.upload(SOURCE_URL)
        assert asset["creative_asset_id"] == 31
