"""Load texture records from a CSV manifest.

Each row describes one decoded texture and points at a raw payload file
next to the manifest::

    path_id,name,width,height,format,mipmap,color_space,data
    12,rock_albedo,256,256,DXT5,1,1,payloads/rock_albedo.bin
"""

import csv
import logging
import os
from typing import List

from .formats import parse_format
from .paths import resolve_payload_path
from .records import TextureRecord

logger = logging.getLogger("texpack.manifest")

MANIFEST_COLUMNS = [
    "path_id", "name", "width", "height", "format", "mipmap", "color_space", "data",
]
_REQUIRED_COLUMNS = ["name", "width", "height", "format", "data"]


class ManifestError(ValueError):
    """Raised when a manifest file or one of its rows is malformed."""


def _parse_bool(value, field_name: str, row_idx: int) -> bool:
    text = str(value).strip().lower()
    if text in {"1", "true", "yes", "y", "on"}:
        return True
    if text in {"0", "false", "no", "n", "off", ""}:
        return False
    raise ValueError(
        f"field '{field_name}' has invalid boolean value '{value}' at row {row_idx}"
    )


def _parse_int(value, field_name: str, row_idx: int, default: int = None) -> int:
    text = "" if value is None else str(value).strip()
    if not text:
        if default is not None:
            return default
        raise ValueError(f"field '{field_name}' is empty at row {row_idx}")
    try:
        return int(text, 0)
    except ValueError:
        raise ValueError(
            f"field '{field_name}' has invalid integer value '{value}' at row {row_idx}"
        ) from None


def _read_payload(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def load_manifest(path: str) -> List[TextureRecord]:
    """Load texture records and their payloads from a CSV manifest file."""
    base_dir = os.path.dirname(os.path.abspath(path))
    records = []
    try:
        with open(path, "r", newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            header = reader.fieldnames or []
            missing = [name for name in _REQUIRED_COLUMNS if name not in header]
            if missing:
                raise ManifestError(
                    f"Manifest '{path}' is missing required columns: {', '.join(missing)}"
                )
            for row_idx, row in enumerate(reader, start=2):
                try:
                    payload_path = resolve_payload_path(base_dir, row["data"] or "")
                    record = TextureRecord(
                        name=(row["name"] or "").strip(),
                        width=_parse_int(row["width"], "width", row_idx),
                        height=_parse_int(row["height"], "height", row_idx),
                        format_code=parse_format(row["format"]),
                        mip_map=_parse_bool(row.get("mipmap", ""), "mipmap", row_idx),
                        color_space=_parse_int(
                            row.get("color_space"), "color_space", row_idx, default=0
                        ),
                        image_data=_read_payload(payload_path),
                        path_id=_parse_int(
                            row.get("path_id"), "path_id", row_idx, default=row_idx - 1
                        ),
                    )
                except (ValueError, TypeError, OSError) as exc:
                    raise ManifestError(f"{path}: row {row_idx}: {exc}") from exc
                records.append(record)
    except OSError as exc:
        raise ManifestError(f"Cannot read manifest '{path}': {exc}") from exc
    logger.info("Manifest loaded: %s (%d entries)", path, len(records))
    return records
