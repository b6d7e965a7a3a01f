"""Provide package metadata and the public extraction API for `TexPack`."""

__version__ = "0.3.0"

from .extract import (  # noqa: E402
    Extracted, Failed, Skipped, Outcome, SkipReason, FailReason,
    TextureExtractor, build_dds_header, extract_texture,
)
from .core import TextureRecord, TextureFormat  # noqa: E402

__all__ = [
    "__version__",
    "TextureRecord", "TextureFormat",
    "Extracted", "Failed", "Skipped", "Outcome", "SkipReason", "FailReason",
    "TextureExtractor", "build_dds_header", "extract_texture",
]
