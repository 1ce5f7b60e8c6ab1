"""Image upload collaborator.

HTTP client for the document store's upload endpoint. The editor only
needs an ``async upload_image(file) -> url`` callable; HttpImageUploader
is the stock implementation:
- Multipart POST of the image to {upload_url}/upload/
- Retry with exponential backoff for transient transport failures
- Optional data: URL fallback while the endpoint is unavailable
"""

from __future__ import annotations

import base64
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path

import httpx
import tenacity

from ..errors import UploadError
from ..settings import settings

logger = logging.getLogger(__name__)


# =============================================================================
# Retry Configuration
# =============================================================================


def _is_retryable(exc: BaseException) -> bool:
    """Check if an exception should trigger a retry."""
    return isinstance(exc, (httpx.TimeoutException, httpx.ConnectError))


_retry_transient = tenacity.retry(
    stop=tenacity.stop_after_attempt(3),
    wait=tenacity.wait_exponential(multiplier=1, min=1, max=4),
    retry=tenacity.retry_if_exception(_is_retryable),
    before_sleep=lambda rs: logger.debug(
        "Retrying image upload (attempt %d)", rs.attempt_number + 1
    ),
    reraise=True,
)


@dataclass(frozen=True)
class ImageFile:
    """An image picked by the user, ready to upload."""

    name: str
    data: bytes
    content_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: Path | str) -> ImageFile:
        path = Path(path)
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(name=path.name, data=path.read_bytes(), content_type=content_type)

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.content_type};base64,{encoded}"


class HttpImageUploader:
    """Uploads images to the document store over HTTP.

    Example:
        uploader = HttpImageUploader(base_url="http://localhost:8000/api")
        url = await uploader(ImageFile.from_path("diagram.png"))
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        fallback_to_data_url: bool | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the uploader.

        Args:
            base_url: API root. Defaults to settings.upload_url.
            token: Bearer token sent with each upload.
            timeout: Request timeout in seconds.
            fallback_to_data_url: Return a data: URL instead of failing.
            transport: Custom httpx transport (tests).
        """
        self._base_url = (base_url or settings.upload_url).rstrip("/")
        self._token = token if token is not None else settings.upload_token
        self._timeout = timeout if timeout is not None else settings.upload_timeout_seconds
        self._fallback = (
            settings.upload_data_url_fallback if fallback_to_data_url is None else fallback_to_data_url
        )
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}/upload/"

    async def __call__(self, image: ImageFile) -> str:
        """Upload an image and return its URL.

        Raises:
            UploadError: If the upload failed and the data URL fallback is off.
        """
        try:
            return await self._upload(image)
        except (httpx.HTTPError, UploadError) as e:
            if not self._fallback:
                if isinstance(e, UploadError):
                    raise
                raise UploadError(f"Image upload failed: {e}", filename=image.name) from e
            logger.warning("Upload endpoint not available, using data URL fallback: %s", e)
            return image.to_data_url()

    async def _upload(self, image: ImageFile) -> str:
        response = await self._post(image)
        if response.status_code >= 400:
            raise UploadError(
                f"Upload endpoint returned HTTP {response.status_code}",
                status_code=response.status_code,
                filename=image.name,
            )
        try:
            data = response.json()
        except ValueError as e:
            raise UploadError("Upload response was not JSON", filename=image.name) from e
        if not isinstance(data, dict):
            data = {}
        url = data.get("url") or data.get("fileUrl") or ""
        if not url:
            raise UploadError("Upload response carried no url", filename=image.name)
        return url

    @_retry_transient
    async def _post(self, image: ImageFile) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self._token}"} if self._token else {}
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            return await client.post(
                self.endpoint,
                headers=headers,
                files={"file": (image.name, image.data, image.content_type)},
            )
