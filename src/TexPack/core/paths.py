"""Payload and output path helpers."""

import os
import re
from pathlib import Path, PurePosixPath, PureWindowsPath

_UNSAFE_NAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def normalize_rel_path(rel_path: str) -> Path:
    """Normalize a relative path to a canonical, traversal-free form."""
    original = str(rel_path)
    raw = original.replace("\\", "/")
    p = PurePosixPath(raw)
    drive_like = len(raw) >= 2 and raw[1] == ":"
    if p.is_absolute() or PureWindowsPath(original).is_absolute() or drive_like:
        raise ValueError(f"Path must be relative, got absolute path: {rel_path}")

    parts = []
    for part in p.parts:
        if part in ("", "."):
            continue
        if part == "..":
            if parts:
                parts.pop()
            else:
                raise ValueError(f"Path escapes root via '..': {rel_path}")
            continue
        parts.append(part)

    if not parts:
        raise ValueError(f"Path is empty after normalization: {rel_path}")
    return Path(*parts)


def resolve_payload_path(base_dir: str, rel_path: str) -> str:
    """Return the payload file path for a manifest entry."""
    return os.path.join(base_dir, normalize_rel_path(rel_path))


def safe_output_name(name: str, fallback: str = "unnamed") -> str:
    """Reduce an asset name to a single file-name component."""
    cleaned = _UNSAFE_NAME_CHARS.sub("_", str(name)).strip().strip(".")
    return cleaned or fallback


def get_output_path(output_dir: str, name: str, ext: str, suffix: str = "") -> str:
    """Return output path for an extracted asset."""
    stem = safe_output_name(name) + suffix
    return os.path.join(output_dir, f"{stem}.{ext.lstrip('.')}")
