from __future__ import annotations

import asyncio
import hashlib
import logging
import random
import time
from pathlib import Path, PurePosixPath
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Protocol
from urllib.parse import quote, urlparse

import httpx

from leasing_migration.core.settings import settings

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = {429, 500, 502, 503, 504}
# characters encodeURI leaves alone, plus "%" so already escaped URLs survive
URI_SAFE = ";,/?:@&=+$!*'()#%"
DEFAULT_EXTENSION = ".jpg"


class ImageStoreError(Exception):
    """Raised when an image could not be relocated."""


class ImageStoreRetryableError(ImageStoreError):
    """Raised when a retryable HTTP status/error is encountered."""


class AsyncTransport(Protocol):
    async def post(self, path: str, data: Dict[str, Any], timeout: float) -> httpx.Response: ...

    async def get(self, url: str, timeout: float) -> httpx.Response: ...

    async def close(self) -> None: ...


class HttpxTransport:
    """httpx-based transport with connection pooling."""

    def __init__(self, base_url: str = ""):
        self._client = httpx.AsyncClient(base_url=base_url, timeout=None, follow_redirects=True)

    async def post(self, path: str, data: Dict[str, Any], timeout: float) -> httpx.Response:
        return await self._client.post(path, data=data, timeout=timeout)

    async def get(self, url: str, timeout: float) -> httpx.Response:
        return await self._client.get(url, timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()


def encode_uri(url: str) -> str:
    return quote(url, safe=URI_SAFE)


def sign_params(params: Mapping[str, Any], api_secret: str) -> str:
    """Cloudinary request signature: SHA-1 of the sorted ``k=v`` pairs plus the secret."""
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params) if params[key] not in (None, ""))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class ImageStore:
    """Re-hosts an image found at ``url`` and returns its new public URL."""

    def __init__(
        self,
        *,
        timeout: float = 60.0,
        max_attempts: int = 2,
        backoff_base: float = 0.5,
        transport: Optional[AsyncTransport] = None,
        base_url: str = "",
    ):
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)
        self.backoff_base = backoff_base
        self._transport = transport or HttpxTransport(base_url)
        self._owns_transport = transport is None

    async def relocate(self, url: str, public_id: str, folder: str) -> str:
        raise NotImplementedError

    async def aclose(self) -> None:
        if self._owns_transport:
            await self._transport.close()

    async def _send(self, label: str, send: Callable[[], Awaitable[httpx.Response]]) -> httpx.Response:
        attempts = 0
        last_error: Optional[Exception] = None
        while attempts < self.max_attempts:
            try:
                response = await send()
            except httpx.RequestError as exc:
                last_error = exc
                await self._maybe_wait(attempts)
                attempts += 1
                continue

            if response.status_code in RETRYABLE_STATUS:
                last_error = ImageStoreRetryableError(f"{label} returned {response.status_code}")
                await self._maybe_wait(attempts)
                attempts += 1
                continue

            try:
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise ImageStoreError(str(exc)) from exc
            return response

        if isinstance(last_error, ImageStoreError):
            raise last_error
        if last_error:
            raise ImageStoreError(str(last_error)) from last_error
        raise ImageStoreError(f"{label} failed")

    async def _maybe_wait(self, attempt: int) -> None:
        if attempt >= self.max_attempts - 1:
            return
        delay = self.backoff_base * (2 ** attempt)
        jitter = random.uniform(0, 0.3)
        await asyncio.sleep(delay + jitter)


class CloudinaryImageStore(ImageStore):
    """Upload-by-URL against the Cloudinary REST API."""

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        *,
        base_url: str = "https://api.cloudinary.com",
        clock: Callable[[], float] = time.time,
        **kwargs: Any,
    ):
        super().__init__(base_url=base_url.rstrip("/"), **kwargs)
        self.cloud_name = cloud_name or settings.cloudinary_cloud_name
        self.api_key = api_key or settings.cloudinary_api_key
        self.api_secret = api_secret or settings.cloudinary_api_secret
        self._clock = clock

    def signed_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        signed = {key: value for key, value in params.items() if value not in (None, "")}
        signed["timestamp"] = str(int(self._clock()))
        signed["signature"] = sign_params(signed, self.api_secret or "")
        signed["api_key"] = self.api_key
        return signed

    async def relocate(self, url: str, public_id: str, folder: str) -> str:
        payload = self.signed_params({"folder": folder, "overwrite": "true", "public_id": public_id})
        payload["file"] = encode_uri(url)
        path = f"/v1_1/{self.cloud_name}/auto/upload"

        logger.info("uploading %s as %s/%s", url, folder, public_id)
        response = await self._send(path, lambda: self._transport.post(path, data=payload, timeout=self.timeout))
        try:
            body = response.json()
        except ValueError as exc:
            raise ImageStoreError("Invalid JSON from Cloudinary") from exc
        secure_url = body.get("secure_url") if isinstance(body, dict) else None
        if not secure_url:
            error = body.get("error") if isinstance(body, dict) else None
            message = error.get("message") if isinstance(error, dict) else None
            raise ImageStoreError(message or "Cloudinary response has no secure_url")
        return secure_url


class LocalImageStore(ImageStore):
    """Filesystem-backed store: downloads the image and serves it from ``public_base_url``."""

    def __init__(
        self,
        root: Optional[str | Path] = None,
        public_base_url: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.root = Path(root or settings.local_image_root)
        self.root.mkdir(parents=True, exist_ok=True)
        self.public_base_url = (public_base_url or settings.local_image_base_url).rstrip("/")

    @staticmethod
    def _extension(url: str) -> str:
        suffix = PurePosixPath(urlparse(url).path).suffix.lower()
        return suffix or DEFAULT_EXTENSION

    async def relocate(self, url: str, public_id: str, folder: str) -> str:
        encoded = encode_uri(url)
        response = await self._send(url, lambda: self._transport.get(encoded, timeout=self.timeout))
        filename = f"{public_id}{self._extension(url)}"
        path = self.root / folder / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(path.write_bytes, response.content)
        return f"{self.public_base_url}/{folder}/{filename}"
