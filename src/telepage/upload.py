"""
File upload to telegra.ph.

The upload endpoint takes a multipart form with one part per file, named
"0", "1", ... and answers with either ``[{"src": "/file/..."}, ...]`` or
``{"error": "..."}``.
"""
import os
import tempfile
import logging
from typing import Any, List, Sequence, Tuple, Union

from .exceptions import ParseError, UploadError, ValidationError
from .types import ImageInfo
from .utils import (
    MAX_IMAGE_SIZE, compress_image_to_size, guess_mime, read_to_bytes, validate_file_size
)

logger = logging.getLogger(__name__)

# A file path, or a (filename, data) pair for in-memory content
Uploadable = Union[str, 'os.PathLike', Tuple[str, bytes]]

UploadPart = Tuple[str, Tuple[str, bytes, str]]


def _compress(path: str, filename: str, max_size: int) -> Tuple[str, bytes]:
    upload_path, compressed = compress_image_to_size(path, max_size)
    try:
        logger.debug("Compressed %s for upload", filename)
        # Compressed output is always JPEG
        return os.path.splitext(filename)[0] + '.jpg', read_to_bytes(upload_path)
    finally:
        if compressed and upload_path != path and os.path.exists(upload_path):
            os.unlink(upload_path)


def _read_path(path: str, auto_compress: bool, max_size: int) -> Tuple[str, bytes]:
    if not os.path.exists(path):
        raise FileNotFoundError(f"File not found: {path}")

    filename = os.path.basename(path)
    if not auto_compress:
        validate_file_size(path, max_size, f"File too large: {filename}")
    if os.path.getsize(path) <= max_size:
        return filename, read_to_bytes(path)
    return _compress(path, filename, max_size)


def _read_pair(filename: str, data: bytes, auto_compress: bool, max_size: int) -> Tuple[str, bytes]:
    if len(data) <= max_size:
        return filename, data
    if not auto_compress:
        raise ValidationError(
            f"File too large: {filename} ({len(data)} bytes, max {max_size} bytes)"
        )

    # Pillow picks the format from the extension, so keep it on the temp file
    fd, temp_path = tempfile.mkstemp(suffix=os.path.splitext(filename)[1])
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
        return _compress(temp_path, filename, max_size)
    finally:
        os.unlink(temp_path)


def build_upload_files(
    files: Sequence[Uploadable],
    auto_compress: bool = False,
    max_size: int = MAX_IMAGE_SIZE
) -> List[UploadPart]:
    """
    Build the multipart entries for ``requests`` from paths or (name, bytes) pairs.

    Args:
        files: Paths or (filename, data) pairs
        auto_compress: Recompress oversized images with Pillow instead of failing
        max_size: Size limit per file in bytes (default: 5MB)

    Raises:
        FileNotFoundError: If a path does not exist
        ValidationError: If nothing is given or a file exceeds max_size
    """
    if not files:
        raise ValidationError("No files to upload")

    parts = []
    for i, item in enumerate(files):
        if isinstance(item, tuple):
            filename, data = _read_pair(item[0], item[1], auto_compress, max_size)
        else:
            filename, data = _read_path(os.fspath(item), auto_compress, max_size)
        parts.append((str(i), (filename, data, guess_mime(filename))))
    return parts


def parse_upload_response(data: Any) -> List[ImageInfo]:
    """Turn the decoded upload response into ImageInfo objects."""
    if isinstance(data, dict):
        if 'error' in data:
            raise UploadError(f"Upload failed: {data['error']}")
        raise ParseError(f"Unexpected upload response: {data!r}")
    if not isinstance(data, list):
        raise ParseError(f"Unexpected upload response: {data!r}")
    return [ImageInfo.from_dict(item) for item in data]
