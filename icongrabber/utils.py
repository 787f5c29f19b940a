"""Helpers for title ids, strings and writing title icons."""

from __future__ import annotations

import io
import logging
import re
from functools import reduce
from pathlib import Path
from typing import Iterable

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

HOME_DIR = "sdmc:/switch/NewIconGrabber/"
ICON_SIZE = (256, 256)

_TITLE_ID = re.compile(r"0100[a-fA-F0-9]{12}")
_SPACES = frozenset(" \t\n\v\f\r")


def format_application_id(application_id: int) -> str:
    """Format a title id as 16 upper-case hex digits."""
    return f"{application_id:016X}"


def format_strings_array(items: Iterable[str], separator: str) -> str:
    """Join ``items`` with ``separator``; leading empty items are dropped."""
    return reduce(lambda acc, item: item if not acc else acc + separator + item, items, "")


def _is_ascii_alnum(ch: str) -> bool:
    return ch.isascii() and ch.isalnum()


def clear_special_characters(text: str) -> str:
    """Keep only ASCII letters and digits."""
    return "".join(ch for ch in text if _is_ascii_alnum(ch))


def get_file_extension(path: str) -> str:
    """Text after the last ``.`` or ``\\`` in ``path``, stripped to letters and digits."""
    cut = max(path.rfind("."), path.rfind("\\"))
    return clear_special_characters(path[cut + 1:])


def get_icon_path(tid: str) -> str:
    return f"sdmc:/atmosphere/contents/{tid}/icon.jpg"


def extract_title_id(text: str) -> int | None:
    """Return the first title id found in ``text``, or None."""
    match = _TITLE_ID.search(text)
    if match is None:
        return None
    return int(match.group(0), 16)


def capitalize_words(text: str) -> str:
    """Upper-case the first ASCII letter that starts each whitespace-separated word."""
    result = []
    new_word = True
    for ch in text:
        if ch in _SPACES:
            new_word = True
        elif new_word and ch.isascii() and ch.isalpha():
            ch = ch.upper()
            new_word = False
        else:
            new_word = False
        result.append(ch)
    return "".join(result)


def to_upper_string(text: str) -> str:
    """Upper-case ASCII letters, leaving every other character alone."""
    return "".join(ch.upper() if ch.isascii() else ch for ch in text)


def _open_image(image_path: str, image_buffer: bytes | None) -> Image.Image | None:
    if image_buffer:
        source = io.BytesIO(image_buffer)
    elif image_path:
        source = image_path
    else:
        logger.error("[overwrite_icon] Both image_buffer and image_path are empty, please provide one.")
        raise ValueError("either image_path or image_buffer must be given")
    try:
        image = Image.open(source)
        image.load()
    except (UnidentifiedImageError, OSError):
        logger.error("[overwrite_icon] Image could not be loaded")
        return None
    return image


def overwrite_icon(out_path, image_path: str = "", image_buffer: bytes | None = None) -> None:
    """Resize an image to 256x256 and write it as a JPEG icon at ``out_path``.

    The image comes from ``image_buffer`` if given, else from ``image_path``.
    An image that cannot be decoded is logged and nothing is written.
    """
    image = _open_image(image_path, image_buffer)
    if image is None:
        return
    with image:
        if image.mode in ("L", "LA", "I", "I;16"):
            converted = image.convert("L")
        else:
            converted = image.convert("RGB")
        resized = converted.resize(ICON_SIZE, Image.Resampling.LANCZOS)

    target = Path(out_path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        logger.error("[overwrite_icon] Could not create directory: %s", target.parent)
        raise
    try:
        resized.save(target, format="JPEG", quality=100)
    except OSError:
        logger.error("[overwrite_icon] Could not write image")
        raise