"""DirectDraw Surface header model and its little-endian wire codec.

The on-disk header is 128 bytes: the ``"DDS "`` magic followed by the
124-byte DDS_HEADER, which nests a 32-byte DDS_PIXELFORMAT.
"""

import struct
from dataclasses import dataclass, field
from typing import List

DDS_MAGIC = b"DDS "
DDS_HEADER_SIZE = 124
DDS_PIXELFORMAT_SIZE = 32
DDS_FILE_HEADER_SIZE = 128

# DDS_HEADER.dwFlags
DDSD_CAPS = 0x00000001
DDSD_HEIGHT = 0x00000002
DDSD_WIDTH = 0x00000004
DDSD_PITCH = 0x00000008
DDSD_PIXELFORMAT = 0x00001000
DDSD_MIPMAPCOUNT = 0x00020000
DDSD_LINEARSIZE = 0x00080000
DDSD_DEPTH = 0x00800000
DDS_HEADER_FLAGS_TEXTURE = DDSD_CAPS | DDSD_HEIGHT | DDSD_WIDTH | DDSD_PIXELFORMAT

# DDS_HEADER.dwCaps
DDSCAPS_COMPLEX = 0x00000008
DDSCAPS_TEXTURE = 0x00001000
DDSCAPS_MIPMAP = 0x00400000
DDS_SURFACE_FLAGS_MIPMAP = DDSCAPS_COMPLEX | DDSCAPS_MIPMAP

# DDS_PIXELFORMAT.dwFlags
DDPF_ALPHAPIXELS = 0x00000001
DDPF_ALPHA = 0x00000002
DDPF_FOURCC = 0x00000004
DDPF_RGB = 0x00000040
DDPF_RGBA = DDPF_RGB | DDPF_ALPHAPIXELS

_NO_FOURCC = b"\x00\x00\x00\x00"

# magic, size, flags, height, width, pitch, depth, mips, reserved1[11],
# pf.size, pf.flags, pf.fourcc, pf.bitcount, pf.r/g/b/a,
# caps, caps2, caps3, caps4, reserved2
_HEADER_STRUCT = struct.Struct("<4s7I11I2I4s5I5I")
assert _HEADER_STRUCT.size == DDS_FILE_HEADER_SIZE


@dataclass
class DDSPixelFormat:
    """DDS_PIXELFORMAT sub-record."""

    size: int = DDS_PIXELFORMAT_SIZE
    flags: int = 0
    fourcc: bytes = _NO_FOURCC
    rgb_bit_count: int = 0
    r_bit_mask: int = 0
    g_bit_mask: int = 0
    b_bit_mask: int = 0
    a_bit_mask: int = 0

    @property
    def has_fourcc(self) -> bool:
        return self.fourcc != _NO_FOURCC


@dataclass
class DDSHeader:
    """DDS_HEADER plus magic, initialized for a plain 2D texture."""

    magic: bytes = DDS_MAGIC
    size: int = DDS_HEADER_SIZE
    flags: int = DDS_HEADER_FLAGS_TEXTURE
    height: int = 0
    width: int = 0
    pitch_or_linear_size: int = 0
    depth: int = 0
    mip_map_count: int = 0
    reserved1: List[int] = field(default_factory=lambda: [0] * 11)
    pixel_format: DDSPixelFormat = field(default_factory=DDSPixelFormat)
    caps: int = DDSCAPS_TEXTURE
    caps2: int = 0
    caps3: int = 0
    caps4: int = 0
    reserved2: int = 0


def mip_levels(width: int, height: int) -> int:
    """Return the number of mip levels down to 1x1, including the base level."""
    count = 1
    dim = max(width, height)
    while dim > 1:
        dim //= 2
        count += 1
    return count


def pack_header(header: DDSHeader) -> bytes:
    """Encode a header into its 128-byte little-endian form."""
    pf = header.pixel_format
    if len(header.reserved1) != 11:
        raise ValueError(
            f"DDS reserved1 must hold 11 values, got {len(header.reserved1)}"
        )
    for label, tag in (("magic", header.magic), ("fourcc", pf.fourcc)):
        if len(tag) != 4:
            raise ValueError(f"DDS {label} must be 4 bytes, got {tag!r}")
    try:
        return _HEADER_STRUCT.pack(
            header.magic,
            header.size,
            header.flags,
            header.height,
            header.width,
            header.pitch_or_linear_size,
            header.depth,
            header.mip_map_count,
            *header.reserved1,
            pf.size,
            pf.flags,
            pf.fourcc,
            pf.rgb_bit_count,
            pf.r_bit_mask,
            pf.g_bit_mask,
            pf.b_bit_mask,
            pf.a_bit_mask,
            header.caps,
            header.caps2,
            header.caps3,
            header.caps4,
            header.reserved2,
        )
    except struct.error as exc:
        raise ValueError(f"DDS header field out of uint32 range: {exc}") from exc


def serialize(header: DDSHeader, payload: bytes) -> bytes:
    """Return the header bytes immediately followed by the unmodified payload."""
    return pack_header(header) + bytes(payload)


def parse_header(data: bytes) -> DDSHeader:
    """Decode the first 128 bytes of a DDS file back into a `DDSHeader`."""
    if len(data) < DDS_FILE_HEADER_SIZE:
        raise ValueError(
            f"DDS header truncated: {len(data)} bytes (expected {DDS_FILE_HEADER_SIZE})"
        )
    values = _HEADER_STRUCT.unpack_from(data, 0)
    if values[0] != DDS_MAGIC:
        raise ValueError(f"Not a DDS file: magic {values[0]!r}")
    pf = DDSPixelFormat(
        size=values[19],
        flags=values[20],
        fourcc=values[21],
        rgb_bit_count=values[22],
        r_bit_mask=values[23],
        g_bit_mask=values[24],
        b_bit_mask=values[25],
        a_bit_mask=values[26],
    )
    return DDSHeader(
        magic=values[0],
        size=values[1],
        flags=values[2],
        height=values[3],
        width=values[4],
        pitch_or_linear_size=values[5],
        depth=values[6],
        mip_map_count=values[7],
        reserved1=list(values[8:19]),
        pixel_format=pf,
        caps=values[27],
        caps2=values[28],
        caps3=values[29],
        caps4=values[30],
        reserved2=values[31],
    )
