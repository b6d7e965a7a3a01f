"""Core utilities -- re-exports all public symbols for convenience."""

from .records import TextureRecord
from .formats import (
    TextureFormat, FormatFamily, MobileFamily,
    UncompressedFormat, BlockCompressedFormat, MobileCompressedFormat, UnmappedFormat,
    FormatDescriptor, FORMAT_TABLE, FOURCC_DXT1, FOURCC_DXT5,
    resolve_format, format_name, parse_format, make_fourcc,
)
from .dds import (
    DDSHeader, DDSPixelFormat,
    mip_levels, pack_header, serialize, parse_header,
)
from .io import FileSink, OutputSink, write_bytes_atomic
from .manifest import ManifestError, load_manifest
from .paths import get_output_path, safe_output_name
from .logging import setup_logging

__all__ = [
    "TextureRecord",
    "TextureFormat", "FormatFamily", "MobileFamily",
    "UncompressedFormat", "BlockCompressedFormat", "MobileCompressedFormat",
    "UnmappedFormat", "FormatDescriptor", "FORMAT_TABLE",
    "FOURCC_DXT1", "FOURCC_DXT5",
    "resolve_format", "format_name", "parse_format", "make_fourcc",
    "DDSHeader", "DDSPixelFormat",
    "mip_levels", "pack_header", "serialize", "parse_header",
    "FileSink", "OutputSink", "write_bytes_atomic",
    "ManifestError", "load_manifest",
    "get_output_path", "safe_output_name",
    "setup_logging",
]
