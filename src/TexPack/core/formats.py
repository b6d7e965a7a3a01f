"""Engine texture format codes and their container descriptors."""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Optional, Union


class TextureFormat(IntEnum):
    """Raw pixel-encoding codes stored in engine texture records."""

    Alpha8 = 1
    ARGB4444 = 2
    RGB24 = 3
    RGBA32 = 4
    ARGB32 = 5
    RGB565 = 7
    DXT1 = 10
    DXT5 = 12
    RGBA4444 = 13
    BGRA32 = 14
    PVRTC_RGB2 = 30
    PVRTC_RGBA2 = 31
    PVRTC_RGB4 = 32
    PVRTC_RGBA4 = 33
    ETC_RGB4 = 34
    ATC_RGB4 = 35
    ATC_RGBA8 = 36


class FormatFamily(Enum):
    """Container family a descriptor is routed to."""

    UNCOMPRESSED = "uncompressed"
    BLOCK_COMPRESSED = "block_compressed"
    MOBILE_COMPRESSED = "mobile_compressed"
    UNMAPPED = "unmapped"


class MobileFamily(Enum):
    """Mobile compression schemes that need their own container."""

    PVR = "pvr"
    ATC = "atc"


@dataclass(frozen=True)
class UncompressedFormat:
    """Bit-mask layout of a raw pixel format."""

    name: str
    r_mask: int
    g_mask: int
    b_mask: int
    a_mask: int
    bits_per_pixel: int
    has_alpha: bool

    @property
    def family(self) -> FormatFamily:
        return FormatFamily.UNCOMPRESSED

    @property
    def alpha_only(self) -> bool:
        """True when the format stores nothing but an alpha channel."""
        return not (self.r_mask or self.g_mask or self.b_mask) and bool(self.a_mask)


@dataclass(frozen=True)
class BlockCompressedFormat:
    """Block-compressed format identified by its FourCC tag."""

    name: str
    fourcc: bytes
    bits_per_pixel: int

    @property
    def family(self) -> FormatFamily:
        return FormatFamily.BLOCK_COMPRESSED


@dataclass(frozen=True)
class MobileCompressedFormat:
    name: str
    family_tag: MobileFamily

    @property
    def family(self) -> FormatFamily:
        return FormatFamily.MOBILE_COMPRESSED


@dataclass(frozen=True)
class UnmappedFormat:
    """Known engine format with no container mapping."""

    name: str

    @property
    def family(self) -> FormatFamily:
        return FormatFamily.UNMAPPED


FormatDescriptor = Union[
    UncompressedFormat, BlockCompressedFormat, MobileCompressedFormat, UnmappedFormat
]


def make_fourcc(tag: str) -> bytes:
    """Return the 4-byte FourCC literal for an ASCII tag."""
    raw = tag.encode("ascii")
    if len(raw) != 4:
        raise ValueError(f"FourCC tag must be 4 ASCII characters, got {tag!r}")
    return raw


FOURCC_DXT1 = make_fourcc("DXT1")
FOURCC_DXT5 = make_fourcc("DXT5")


FORMAT_TABLE: Dict[int, FormatDescriptor] = {
    TextureFormat.Alpha8: UncompressedFormat(
        "Alpha8", 0, 0, 0, 0xFF, 8, has_alpha=True,
    ),
    TextureFormat.ARGB4444: UncompressedFormat(
        "ARGB4444", 0x0F00, 0x00F0, 0x000F, 0xF000, 16, has_alpha=True,
    ),
    TextureFormat.RGB24: UncompressedFormat(
        "RGB24", 0xFF0000, 0x00FF00, 0x0000FF, 0, 24, has_alpha=False,
    ),
    TextureFormat.RGBA32: UncompressedFormat(
        "RGBA32", 0x000000FF, 0x0000FF00, 0x00FF0000, 0xFF000000, 32, has_alpha=True,
    ),
    TextureFormat.ARGB32: UncompressedFormat(
        "ARGB32", 0x0000FF00, 0x00FF0000, 0xFF000000, 0x000000FF, 32, has_alpha=True,
    ),
    TextureFormat.RGB565: UncompressedFormat(
        "RGB565", 0xF800, 0x07E0, 0x001F, 0, 16, has_alpha=False,
    ),
    TextureFormat.DXT1: BlockCompressedFormat("DXT1", FOURCC_DXT1, 4),
    TextureFormat.DXT5: BlockCompressedFormat("DXT5", FOURCC_DXT5, 8),
    TextureFormat.RGBA4444: UncompressedFormat(
        "RGBA4444", 0xF000, 0x0F00, 0x00F0, 0x000F, 16, has_alpha=True,
    ),
    TextureFormat.BGRA32: UncompressedFormat(
        "BGRA32", 0x00FF0000, 0x0000FF00, 0x000000FF, 0xFF000000, 32, has_alpha=True,
    ),
    TextureFormat.PVRTC_RGB2: MobileCompressedFormat("PVRTC_RGB2", MobileFamily.PVR),
    TextureFormat.PVRTC_RGBA2: MobileCompressedFormat("PVRTC_RGBA2", MobileFamily.PVR),
    TextureFormat.PVRTC_RGB4: MobileCompressedFormat("PVRTC_RGB4", MobileFamily.PVR),
    TextureFormat.PVRTC_RGBA4: MobileCompressedFormat("PVRTC_RGBA4", MobileFamily.PVR),
    TextureFormat.ETC_RGB4: UnmappedFormat("ETC_RGB4"),
    TextureFormat.ATC_RGB4: MobileCompressedFormat("ATC_RGB4", MobileFamily.ATC),
    TextureFormat.ATC_RGBA8: MobileCompressedFormat("ATC_RGBA8", MobileFamily.ATC),
}


def resolve_format(code: int) -> Optional[FormatDescriptor]:
    """Return the descriptor for an engine format code, or None if unknown."""
    return FORMAT_TABLE.get(code)


def format_name(code: int) -> str:
    """Return a readable label for a format code, known or not."""
    try:
        return TextureFormat(code).name
    except ValueError:
        return f"<unknown {code}>"


def parse_format(value) -> int:
    """Parse a format given as a numeric code or a `TextureFormat` name."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid texture format: {value!r}")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        raise ValueError("Texture format is empty")
    try:
        return int(text, 0)
    except ValueError:
        pass
    lookup = {member.name.lower(): int(member) for member in TextureFormat}
    code = lookup.get(text.lower())
    if code is None:
        raise ValueError(f"Unknown texture format name: {text!r}")
    return code
