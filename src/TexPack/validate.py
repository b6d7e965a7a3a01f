"""Check written DDS containers for structural problems.

`validate_dds` inspects the header bytes directly; `verify_with_pillow`
confirms that a third-party reader can actually open the file.
"""

import logging
import os

from PIL import Image

from .core.dds import (
    DDPF_FOURCC, DDS_FILE_HEADER_SIZE, DDS_HEADER_FLAGS_TEXTURE, DDS_HEADER_SIZE,
    DDS_PIXELFORMAT_SIZE, DDSCAPS_MIPMAP, DDSCAPS_TEXTURE, DDSD_MIPMAPCOUNT,
    mip_levels, parse_header,
)

logger = logging.getLogger("texpack.validate")


def _issue(filename: str, check: str, message: str) -> dict:
    return {"file": filename, "check": check, "message": message}


def validate_dds(data: bytes, filename: str = "<memory>") -> list:
    """Perform structural validation of DDS header fields."""
    try:
        header = parse_header(data)
    except ValueError as exc:
        return [_issue(filename, "dds_header", str(exc))]

    issues = []
    pf = header.pixel_format
    if header.size != DDS_HEADER_SIZE:
        issues.append(_issue(
            filename, "dds_header",
            f"Invalid DDS header size: {header.size} (expected {DDS_HEADER_SIZE})",
        ))
    if pf.size != DDS_PIXELFORMAT_SIZE:
        issues.append(_issue(
            filename, "dds_pixel_format",
            f"Invalid DDS pixel format size: {pf.size} (expected {DDS_PIXELFORMAT_SIZE})",
        ))
    missing_flags = DDS_HEADER_FLAGS_TEXTURE & ~header.flags
    if missing_flags:
        issues.append(_issue(
            filename, "dds_flags",
            f"DDS header flags missing required bits: "
            f"flags=0x{header.flags:08X}, missing=0x{missing_flags:08X}",
        ))
    if not (header.caps & DDSCAPS_TEXTURE):
        issues.append(_issue(
            filename, "dds_caps_texture",
            f"DDS caps missing DDSCAPS_TEXTURE bit: caps=0x{header.caps:08X}",
        ))
    if header.width <= 0 or header.height <= 0:
        issues.append(_issue(
            filename, "dds_dimensions",
            f"Invalid DDS dimensions: {header.width}x{header.height}",
        ))

    if header.flags & DDSD_MIPMAPCOUNT and header.mip_map_count == 0:
        issues.append(_issue(
            filename, "dds_mip_count", "DDS declares mipmap flag but mip count is 0",
        ))
    if header.mip_map_count > 0 and max(header.width, header.height) > 0:
        max_possible = mip_levels(header.width, header.height)
        if header.mip_map_count > max_possible:
            issues.append(_issue(
                filename, "dds_mip_count",
                f"DDS mip count {header.mip_map_count} exceeds plausible max "
                f"{max_possible} for {header.width}x{header.height}",
            ))
    if header.caps & DDSCAPS_MIPMAP and header.mip_map_count < 1:
        issues.append(_issue(
            filename, "dds_caps_mipmap", "DDS mipmap caps set but mip count is 0",
        ))

    has_fourcc = bool(pf.flags & DDPF_FOURCC)
    if has_fourcc != pf.has_fourcc:
        issues.append(_issue(
            filename, "dds_fourcc",
            f"DDPF_FOURCC flag and FourCC field disagree (fourcc={pf.fourcc!r})",
        ))
    if not has_fourcc and pf.rgb_bit_count == 0:
        issues.append(_issue(
            filename, "dds_pixel_format", "Uncompressed DDS declares a bit count of 0",
        ))
    if len(data) == DDS_FILE_HEADER_SIZE:
        issues.append(_issue(filename, "dds_payload", "DDS file has no pixel payload"))
    return issues


def verify_with_pillow(path: str) -> list:
    """Open a written DDS with Pillow and report any decode error as an issue."""
    filename = os.path.basename(path)
    try:
        with Image.open(path) as img:
            img.load()
            size = img.size
    except Exception as exc:
        logger.debug("Pillow could not read %s", path, exc_info=True)
        return [_issue(filename, "pillow_open", f"Pillow failed to read DDS: {exc}")]
    logger.debug("Pillow read %s as %dx%d", path, size[0], size[1])
    return []
