# export.py
"""Save/export flow for the generated image: native share first, file download otherwise."""

import base64
import binascii
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol, Union

from config import DEFAULT_IMAGE_NAME, DRIVE_FOLDER_URL, MESSAGES, SAVE_NOTICE_SECONDS
from logger_setup import get_logger

logger = get_logger()

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')
# Most filesystems cap a file name at 255 bytes; leaves room for the extension
MAX_FILENAME_STEM_BYTES = 200


class ExportMethod(Enum):
    SHARE = "share"
    DOWNLOAD = "download"


class ShareTarget(Protocol):
    """A platform share sheet able to receive files."""

    def can_share_files(self) -> bool:
        ...

    def share(self, data: bytes, filename: str, title: str) -> None:
        ...


@dataclass(frozen=True)
class ExportResult:
    method: ExportMethod
    filename: str
    path: Optional[Path]
    folder_url: str = DRIVE_FOLDER_URL
    notice: str = MESSAGES["save_notice"]
    notice_seconds: int = SAVE_NOTICE_SECONDS


def decode_data_uri(data_uri: str) -> bytes:
    """Returns the bytes held by a base64 data URI."""
    if not data_uri or not data_uri.startswith("data:"):
        raise ValueError("Not a data URI.")
    header, sep, payload = data_uri.partition(",")
    if not sep or not header.endswith(";base64"):
        raise ValueError("Data URI is not base64 encoded.")
    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e


def export_filename(title: Optional[str]) -> str:
    name = _UNSAFE_FILENAME_CHARS.sub("_", (title or "").strip()) or DEFAULT_IMAGE_NAME
    while len(name.encode("utf-8")) > MAX_FILENAME_STEM_BYTES:
        name = name[:-1]
    return f"{name.rstrip() or DEFAULT_IMAGE_NAME}.png"


def save_image(image_data_uri: str,
               recipe_title: Optional[str],
               export_dir: Union[str, Path],
               share_target: Optional[ShareTarget] = None) -> ExportResult:
    """
    Hands the image to `share_target` when it can share files, otherwise writes it
    to `export_dir` for download. Errors propagate to the caller.
    """
    data = decode_data_uri(image_data_uri)
    filename = export_filename(recipe_title)

    if share_target is not None and share_target.can_share_files():
        logger.info(f"Export: Sharing '{filename}' ({len(data)} bytes) via native share.")
        share_target.share(data, filename, recipe_title or DEFAULT_IMAGE_NAME)
        return ExportResult(method=ExportMethod.SHARE, filename=filename, path=None)

    target_dir = Path(export_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / filename
    path.write_bytes(data)
    logger.info(f"Export: Wrote '{path}' ({len(data)} bytes) for download.")
    return ExportResult(method=ExportMethod.DOWNLOAD, filename=filename, path=path)
