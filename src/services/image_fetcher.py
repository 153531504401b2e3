"""
Download of receipt images from user-supplied URLs.

URLs come straight from API clients, so every request (including each
redirect hop) is checked before it is sent:
- only http/https
- no localhost / cloud metadata hostnames
- the host must not resolve to a loopback, private, link-local or
  otherwise non-public address

Downloads are capped at OCR_MAX_IMAGE_BYTES whether or not the server
sends a Content-Length.
"""

import asyncio
import ipaddress
import socket
import tempfile
import uuid
from pathlib import Path
from urllib.parse import urlsplit

import httpx
from loguru import logger
from .errors import ImageDownloadError, InvalidImageURLError
from ..core.config import settings

FORBIDDEN_HOSTS = {
    "localhost",
    "127.0.0.1",
    "0.0.0.0",
    "::1",
    # Cloud metadata endpoints
    "169.254.169.254",
    "metadata.google.internal",
    "metadata",
}

CONTENT_TYPE_EXTENSIONS = {
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/bmp": ".bmp",
}
DEFAULT_EXTENSION = ".jpg"


async def resolve_host(hostname: str) -> list[str]:
    """Resolve a hostname to all of its IP addresses"""
    loop = asyncio.get_running_loop()
    infos = await loop.getaddrinfo(hostname, None)
    return [info[4][0] for info in infos]


def is_forbidden_address(address: str) -> bool:
    # Drop IPv6 zone index ("fe80::1%eth0")
    ip = ipaddress.ip_address(address.split("%", 1)[0])
    return not ip.is_global or ip.is_multicast


async def validate_image_url(url: str) -> None:
    """
    Reject URLs that could reach internal services.

    Raises:
        InvalidImageURLError: scheme, hostname or resolved address not allowed
    """
    try:
        parsed = urlsplit(url)
        hostname = parsed.hostname
    except ValueError as e:
        raise InvalidImageURLError(f"invalid URL: {str(e)}") from e

    scheme = parsed.scheme.lower()
    if scheme not in ("http", "https"):
        raise InvalidImageURLError(f"forbidden URL scheme: {scheme} (only http/https allowed)")

    if not hostname:
        raise InvalidImageURLError("URL must have a hostname")

    if hostname.lower() in FORBIDDEN_HOSTS:
        raise InvalidImageURLError(f"forbidden hostname: {hostname}")

    try:
        addresses = [str(ipaddress.ip_address(hostname))]
    except ValueError:
        try:
            addresses = await resolve_host(hostname)
        except (socket.gaierror, UnicodeError) as e:
            raise InvalidImageURLError(f"failed to resolve hostname: {str(e)}") from e

    for address in addresses:
        if is_forbidden_address(address):
            raise InvalidImageURLError(
                f"private IP address not allowed: {hostname} resolves to {address}"
            )


def extension_for(content_type: str | None) -> str:
    if not content_type:
        return DEFAULT_EXTENSION
    media_type = content_type.split(";", 1)[0].strip().lower()
    return CONTENT_TYPE_EXTENSIONS.get(media_type, DEFAULT_EXTENSION)


async def _check_request(request: httpx.Request) -> None:
    await validate_image_url(str(request.url))


async def _stream_to_file(client: httpx.AsyncClient, url: str) -> Path:
    max_bytes = settings.ocr_max_image_bytes

    async with client.stream("GET", url) as response:
        if response.status_code != 200:
            raise ImageDownloadError(f"failed to fetch image: status {response.status_code}")

        content_length = response.headers.get("content-length", "")
        if content_length.isdigit() and int(content_length) > max_bytes:
            raise ImageDownloadError(
                f"image too large: {content_length} bytes (max {max_bytes})"
            )

        extension = extension_for(response.headers.get("content-type"))
        path = Path(tempfile.gettempdir()) / f"ocr_{uuid.uuid4()}{extension}"
        written = 0
        try:
            with path.open("wb") as out:
                async for chunk in response.aiter_bytes():
                    written += len(chunk)
                    if written > max_bytes:
                        raise ImageDownloadError(f"image exceeds maximum size of {max_bytes} bytes")
                    out.write(chunk)
        except BaseException:
            path.unlink(missing_ok=True)
            raise

    logger.info("Downloaded receipt image", path=str(path), size_bytes=written)
    return path


async def download_image(url: str) -> Path:
    """
    Download an image to a temporary file and return its path.

    The caller owns the file and must delete it.

    Raises:
        InvalidImageURLError: URL or a redirect target failed validation
        ImageDownloadError: transport error, non-200 status, size limit or deadline hit
    """
    await validate_image_url(url)

    try:
        async with asyncio.timeout(settings.ocr_download_timeout):
            async with httpx.AsyncClient(
                timeout=settings.ocr_download_timeout,
                follow_redirects=True,
                max_redirects=settings.ocr_max_redirects,
                event_hooks={"request": [_check_request]},
            ) as client:
                return await _stream_to_file(client, url)
    except TimeoutError as e:
        raise ImageDownloadError(
            f"image download timed out after {settings.ocr_download_timeout}s"
        ) from e
    except httpx.TooManyRedirects as e:
        raise ImageDownloadError("too many redirects") from e
    except httpx.HTTPError as e:
        raise ImageDownloadError(f"failed to fetch image: {str(e)}") from e
    except OSError as e:
        raise ImageDownloadError(f"failed to save image: {str(e)}") from e
