from __future__ import annotations

import base64
import mimetypes
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from ..errors import ReadError

# Advisory only: the upload surface announces these, the encoder does not enforce them.
ACCEPTED_MIME_TYPES = ("image/png", "image/jpeg", "image/jpg")
MAX_UPLOAD_BYTES = 10 * 1024 * 1024

DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class UploadedImage:
    """
    A user-selected image before encoding.

    `data` is either the raw bytes or a binary file-like object with `.read()`.
    """
    data: Any
    mime_type: str
    name: str = ""


@dataclass(frozen=True)
class EncodedImagePart:
    data: str  # base64 payload, no data-URL header
    mime_type: str

    def as_inline_data(self) -> Dict[str, Dict[str, str]]:
        return {"inlineData": {"data": self.data, "mimeType": self.mime_type}}

    def as_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.data)


def guess_mime_type(path: Union[str, Path]) -> str:
    mime, _ = mimetypes.guess_type(str(path))
    return mime or DEFAULT_MIME_TYPE


def load_uploaded_image(path: Union[str, Path]) -> UploadedImage:
    """
    Read an image file from disk into an UploadedImage.

    Raises:
        FileNotFoundError: if path does not exist
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Image not found: {path}")
    return UploadedImage(data=p.read_bytes(), mime_type=guess_mime_type(p), name=p.name)


def strip_data_url_header(text: str) -> str:
    """
    Drop a leading "data:<mime>;base64," header, keeping only the payload.
    """
    if text.startswith("data:") and "," in text:
        return text.split(",", 1)[1]
    return text


def _read_bytes(image: UploadedImage) -> bytes:
    source = image.data
    label = image.name or "<unnamed>"
    try:
        raw = source.read() if hasattr(source, "read") else source
    except (OSError, ValueError) as exc:
        # ValueError: read on a closed file
        raise ReadError(f"Failed to read image {label}: {exc}") from exc

    if isinstance(raw, (bytearray, memoryview)):
        raw = bytes(raw)
    if not isinstance(raw, bytes):
        raise ReadError(f"Image {label} did not yield binary data (got {type(raw).__name__})")
    if not raw:
        raise ReadError(f"Image {label} is empty")
    return raw


def encode_image(image: UploadedImage) -> EncodedImagePart:
    """
    Encode one uploaded image as an inline base64 part.

    No size or type validation happens here.
    """
    raw = _read_bytes(image)
    b64 = base64.b64encode(raw).decode("ascii")
    return EncodedImagePart(data=strip_data_url_header(b64), mime_type=image.mime_type)


def encode_images(
    images: Sequence[UploadedImage],
    max_workers: Optional[int] = None,
) -> List[EncodedImagePart]:
    """
    Encode all images concurrently.

    The result has the same length and order as `images`; the first
    ReadError raised by any worker propagates.
    """
    if not images:
        return []

    workers = max(1, min(max_workers or len(images), len(images)))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        # map() yields in submission order regardless of completion order
        return list(executor.map(encode_image, images))
