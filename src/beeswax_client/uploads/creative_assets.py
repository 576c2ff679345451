"""Creative asset upload pipeline.

Uploading a creative asset to Beeswax takes several independent calls:

1. Build the asset definition from the caller's parameters
2. HEAD the source URL to learn the file size
3. Create the creative asset record
4. Upload the file content against that record
5. Fetch the stored asset

Steps 3 to 5 go through the request dispatcher and so re-authenticate
transparently. The source file is fetched with the plain HTTP client.

The source file is held in memory for the upload. The multipart body
must be re-readable because a 401 resends it, which rules out streaming
the source straight into the request. Very large assets need that much
memory.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import httpx

from ..exceptions import TransportError, UploadError, ValidationError
from ..utils.http import RequestDispatcher

logger = logging.getLogger(__name__)

CREATIVE_ASSET_PATH = "/rest/creative_asset"
UPLOAD_FIELD = "creative_content"

_ASSET_FIELDS = (
    "advertiser_id",
    "creative_asset_name",
    "size_in_bytes",
    "notes",
    "active",
)


@dataclass
class UploadState:
    """Data threaded through the upload steps."""

    source_url: str
    asset_def: Dict[str, Any] = field(default_factory=dict)
    create_response: Any = None
    upload_response: Any = None


class CreativeAssetUploader:
    """Uploads a remote file as a Beeswax creative asset.

    :param dispatcher: Dispatcher of the owning client
    :type dispatcher: RequestDispatcher
    """

    def __init__(self, dispatcher: RequestDispatcher):
        self._dispatcher = dispatcher

    async def upload(self, source_url: Optional[str] = None, **params: Any) -> Dict[str, Any]:
        """Run the whole upload pipeline.

        :param source_url: URL of the file to upload
        :type source_url: Optional[str]
        :param params: Asset fields (``advertiser_id``,
            ``creative_asset_name``, ``notes``, ``active``)
        :return: The stored creative asset record
        :rtype: Dict[str, Any]
        :raises ValidationError: If ``source_url`` is missing
        :raises UploadError: If the source file cannot be sized or fetched
        """
        state = self.init(source_url, **params)
        await self.get_size(state)
        await self.create_asset(state)
        await self.post_file(state)
        return await self.get_asset(state)

    def init(self, source_url: Optional[str], **params: Any) -> UploadState:
        if not source_url:
            raise ValidationError(
                "upload_creative_asset requires a source_url",
                field="source_url",
            )
        asset_def = {k: params[k] for k in _ASSET_FIELDS if params.get(k)}
        if not asset_def.get("creative_asset_name"):
            asset_def["creative_asset_name"] = urlparse(source_url).path.split("/")[-1]
        return UploadState(source_url=source_url, asset_def=asset_def)

    async def get_size(self, state: UploadState) -> UploadState:
        """Read the source file size from a HEAD request."""
        response = await self._fetch_source(state, "HEAD", "get_size")
        content_length = response.headers.get("content-length")
        if not content_length:
            raise UploadError(
                f"Unable to detect content-length of source_url: {state.source_url}",
                step="get_size",
                source_url=state.source_url,
            )
        state.asset_def["size_in_bytes"] = int(content_length)
        return state

    async def create_asset(self, state: UploadState) -> UploadState:
        state.create_response = await self._dispatcher.dispatch(
            "POST", CREATIVE_ASSET_PATH, state.asset_def
        )
        return state

    async def post_file(self, state: UploadState) -> UploadState:
        """Upload the source file content against the created asset.

        The whole file is read into memory first; see the module notes.
        """
        asset_id = _payload_id(state.create_response, "create_asset", state.source_url)
        response = await self._fetch_source(state, "GET", "post_file")
        filename = state.asset_def["creative_asset_name"]
        content_type = response.headers.get("content-type", "application/octet-stream")

        state.upload_response = await self._dispatcher.dispatch(
            "POST",
            f"{CREATIVE_ASSET_PATH}/upload/{asset_id}",
            files={UPLOAD_FIELD: (filename, response.content, content_type)},
        )
        logger.info(f"Uploaded {len(response.content)} bytes to creative asset {asset_id}")
        return state

    async def get_asset(self, state: UploadState) -> Dict[str, Any]:
        asset_id = _payload_id(state.upload_response, "post_file", state.source_url)
        body = await self._dispatcher.dispatch("GET", f"{CREATIVE_ASSET_PATH}/{asset_id}")
        try:
            return body["payload"][0]
        except (KeyError, IndexError, TypeError):
            raise UploadError(
                f"Creative asset {asset_id} not returned after upload",
                step="get_asset",
                source_url=state.source_url,
            ) from None

    async def _fetch_source(
        self, state: UploadState, method: str, step: str
    ) -> httpx.Response:
        try:
            response = await self._dispatcher.http_client.request(method, state.source_url)
        except httpx.TransportError as e:
            raise TransportError(
                f"{method} {state.source_url} failed: {e}",
                method=method,
                url=state.source_url,
            ) from e
        if response.status_code != 200:
            raise UploadError(
                f"{method} {state.source_url} returned {response.status_code}",
                step=step,
                source_url=state.source_url,
            )
        return response


def _payload_id(body: Any, step: str, source_url: str) -> Any:
    try:
        return body["payload"]["id"]
    except (KeyError, TypeError):
        raise UploadError(
            f"No asset id in {step} response",
            step=step,
            source_url=source_url,
        ) from None
