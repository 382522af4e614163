import os
import io
import mimetypes
import tempfile
from dataclasses import replace
from typing import List, Optional, Tuple
from .exceptions import ValidationError, ConversionError
from .types import Node, NodeElement

try:
    from PIL import Image
    PIL_AVAILABLE = True
except ImportError:
    PIL_AVAILABLE = False

# Constants for limits
MAX_CONTENT_SIZE = 64 * 1024  # Telegraph rejects content JSON above ~64KB
MAX_IMAGE_SIZE = 5 * 1024 * 1024  # 5MB limit per file (Telegraph hard limit)

# Telegraph renders h3/h4 only; h1/h2 are taken by the page title and author
HEADING_MAP = {
    'h1': 'h3',
    'h2': 'h4',
    'h5': 'h4',
    'h6': 'h4',
}


def validate_file_size(path: str, max_size: int, error_msg: str):
    """Checks if file size is within limits."""
    if os.path.getsize(path) > max_size:
        raise ValidationError(f"{error_msg} (Size: {os.path.getsize(path)/1024/1024:.2f}MB, Max: {max_size/1024/1024}MB)")


def validate_content_size(content: str, max_size: int = MAX_CONTENT_SIZE):
    """Checks the serialized page content against Telegraph's size limit."""
    size = len(content.encode('utf-8'))
    if size > max_size:
        raise ValidationError(f"Page content too large ({size} bytes, max {max_size} bytes)")


def sanitize_nodes(nodes: List[Node]) -> List[Node]:
    """
    Recursively downgrades headers h1->h3, h2/h5/h6->h4 because Telegraph
    only supports h3 and h4. Returns new nodes; the input is left untouched.
    """
    result = []
    for node in nodes:
        if isinstance(node, NodeElement):
            children = sanitize_nodes(node.children) if node.children else node.children
            node = replace(node, tag=HEADING_MAP.get(node.tag, node.tag), children=children)
        result.append(node)
    return result


def strip_blank_text(nodes: List[Node]) -> List[Node]:
    """Drops whitespace-only text nodes from a node list (top level only)."""
    return [n for n in nodes if not (isinstance(n, str) and not n.strip())]


def guess_mime(filename: str) -> str:
    """Guess a MIME type from a file name, defaulting to text/plain."""
    return mimetypes.guess_type(filename)[0] or 'text/plain'


def read_to_bytes(path: str) -> bytes:
    with open(path, 'rb') as f:
        return f.read()


# Formats that support compression
COMPRESSIBLE_FORMATS = {'.jpg', '.jpeg', '.png', '.webp', '.bmp', '.tiff', '.tif'}
SKIP_COMPRESSION_FORMATS = {'.gif'}  # Animated, complex to handle


def compress_image_to_size(
    image_path: str,
    max_size: int = MAX_IMAGE_SIZE,
    min_quality: int = 30,
    min_scale: float = 0.3
) -> Tuple[str, bool]:
    """
    Compress an image to fit within max_size bytes before uploading it.

    Strategy (prioritizing quality):
    1. Try quality reduction (95 -> min_quality)
    2. If still too large, progressively scale down
    Output is always JPEG.

    Args:
        image_path: Path to the source image
        max_size: Maximum file size in bytes (default: 5MB)
        min_quality: Minimum quality to try before scaling (default: 30)
        min_scale: Minimum scale factor before giving up (default: 0.3)

    Returns:
        Tuple of (output_path, was_compressed). When was_compressed is True
        output_path is a temporary file the caller must delete.

    Raises:
        ConversionError: If the image cannot be compressed to the target size
        ValidationError: If Pillow is not available
    """
    file_size = os.path.getsize(image_path)
    if file_size <= max_size:
        return image_path, False

    if not PIL_AVAILABLE:
        raise ValidationError(
            "Pillow library is required for image compression. "
            "Install with: pip install Pillow"
        )

    ext = os.path.splitext(image_path)[1].lower()

    if ext in SKIP_COMPRESSION_FORMATS:
        raise ConversionError(
            f"Cannot auto-compress {ext.upper()} files (may be animated). "
            f"File size: {file_size / 1024 / 1024:.2f}MB, max: {max_size / 1024 / 1024:.0f}MB"
        )
    if ext not in COMPRESSIBLE_FORMATS:
        raise ConversionError(f"Cannot compress '{ext}' files")

    img = None
    try:
        img = Image.open(image_path)
        img = _convert_to_rgb(img)
        original_size = img.size

        # Phase 1: quality only
        result = _try_quality_compression(img, max_size, min_quality)
        if result:
            return _save_compressed_image(result)

        # Phase 2: scale down progressively
        result = _try_scale_compression(img, original_size, max_size, min_quality, min_scale)
        if result:
            return _save_compressed_image(result)

        raise ConversionError(
            f"Unable to compress image to under {max_size / 1024 / 1024:.0f}MB. "
            f"Original: {file_size / 1024 / 1024:.2f}MB, "
            f"dimensions: {original_size[0]}x{original_size[1]}"
        )

    except ConversionError:
        raise
    except Exception as e:
        raise ConversionError(f"Failed to compress image: {e}") from e
    finally:
        if img:
            img.close()


def _convert_to_rgb(img: 'Image.Image') -> 'Image.Image':
    """Convert image to RGB mode for JPEG output, flattening alpha onto white."""
    if img.mode == 'RGB':
        return img

    if img.mode in ('RGBA', 'LA') or (img.mode == 'P' and 'transparency' in img.info):
        background = Image.new('RGB', img.size, (255, 255, 255))
        img = img.convert('RGBA')
        background.paste(img, mask=img.split()[3])
        return background

    return img.convert('RGB')


def _try_quality_compression(img: 'Image.Image', max_size: int, min_quality: int) -> Optional[io.BytesIO]:
    for quality in range(95, min_quality - 1, -5):
        buffer = io.BytesIO()
        img.save(buffer, format='JPEG', quality=quality, optimize=True)
        if buffer.tell() <= max_size:
            return buffer
        buffer.close()
    return None


def _try_scale_compression(
    img: 'Image.Image',
    original_size: Tuple[int, int],
    max_size: int,
    min_quality: int,
    min_scale: float
) -> Optional[io.BytesIO]:
    scale = 0.9
    while scale >= min_scale:
        new_size = (int(original_size[0] * scale), int(original_size[1] * scale))
        scaled_img = img.resize(new_size, Image.LANCZOS)

        try:
            for quality in range(85, min_quality - 1, -10):
                buffer = io.BytesIO()
                scaled_img.save(buffer, format='JPEG', quality=quality, optimize=True)
                if buffer.tell() <= max_size:
                    return buffer
                buffer.close()
        finally:
            scaled_img.close()

        scale -= 0.1
    return None


def _save_compressed_image(buffer: io.BytesIO) -> Tuple[str, bool]:
    """Save compressed image buffer to a temp .jpg file and return its path."""
    buffer.seek(0)
    fd, temp_path = tempfile.mkstemp(suffix='.jpg')
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(buffer.read())
        return temp_path, True
    except Exception:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise
