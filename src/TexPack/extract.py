"""Repackage engine texture records as standalone image containers.

`extract_texture` is the pure per-record entry point: it resolves the
record's format, builds the matching container header and returns an
`Extracted`, `Skipped` or `Failed` result. `TextureExtractor` drives it over
a batch of records and forwards finished containers to an output sink.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Union

from tqdm import tqdm

from .config import ExtractConfig
from .core import (
    BlockCompressedFormat, DDSHeader, FormatDescriptor, MobileCompressedFormat,
    MobileFamily, OutputSink, TextureRecord, UncompressedFormat,
    format_name, mip_levels, resolve_format, serialize,
)
from .core.dds import (
    DDPF_ALPHA, DDPF_FOURCC, DDPF_RGB, DDPF_RGBA,
    DDS_SURFACE_FLAGS_MIPMAP, DDSD_LINEARSIZE, DDSD_MIPMAPCOUNT,
)

logger = logging.getLogger("texpack.extract")

DDS_EXTENSION = "dds"
_UINT32_MAX = 0xFFFFFFFF


class UnsupportedFormatError(ValueError):
    """Raised when a resolved format has no mapping into the target container."""


class ContainerNotImplementedError(NotImplementedError):
    """Raised by container builders that are known but not written yet."""

    def __init__(self, family: MobileFamily):
        super().__init__(f"{family.value.upper()} containers are not implemented")
        self.family = family


class Outcome(Enum):
    EXTRACTED = "extracted"
    SKIPPED = "skipped"
    FAILED = "failed"


class SkipReason(Enum):
    """Expected, non-fatal reasons to produce no output."""

    EMPTY_PAYLOAD = "empty_payload"
    UNKNOWN_FORMAT = "unknown_format"
    UNSUPPORTED_FORMAT = "unsupported_format"


class FailReason(Enum):
    NOT_IMPLEMENTED = "not_implemented"


@dataclass(frozen=True)
class Extracted:
    data: bytes
    extension: str

    @property
    def outcome(self) -> Outcome:
        return Outcome.EXTRACTED


@dataclass(frozen=True)
class Skipped:
    reason: SkipReason
    message: str = ""

    @property
    def outcome(self) -> Outcome:
        return Outcome.SKIPPED


@dataclass(frozen=True)
class Failed:
    reason: FailReason
    family: Optional[MobileFamily] = None
    message: str = ""

    @property
    def outcome(self) -> Outcome:
        return Outcome.FAILED


ExtractionResult = Union[Extracted, Skipped, Failed]


def _pixel_format_flags(descriptor: UncompressedFormat) -> int:
    if descriptor.alpha_only:
        return DDPF_ALPHA
    if descriptor.has_alpha:
        return DDPF_RGBA
    return DDPF_RGB


def build_dds_header(record: TextureRecord, descriptor: FormatDescriptor) -> DDSHeader:
    """Build the DDS header describing `record`'s payload.

    Raises:
        UnsupportedFormatError: ``descriptor`` is neither an uncompressed
            nor a block-compressed format, or the top-level size does not
            fit the header's uint32 pitch field.
    """
    header = DDSHeader(width=record.width, height=record.height)
    pf = header.pixel_format

    if isinstance(descriptor, UncompressedFormat):
        pf.flags = _pixel_format_flags(descriptor)
        pf.rgb_bit_count = descriptor.bits_per_pixel
        pf.r_bit_mask = descriptor.r_mask
        pf.g_bit_mask = descriptor.g_mask
        pf.b_bit_mask = descriptor.b_mask
        pf.a_bit_mask = descriptor.a_mask
    elif isinstance(descriptor, BlockCompressedFormat):
        pf.fourcc = descriptor.fourcc
    else:
        raise UnsupportedFormatError(
            f"{descriptor.name} cannot be stored in a DDS container"
        )

    if record.mip_map:
        header.flags |= DDSD_MIPMAPCOUNT
        header.caps |= DDS_SURFACE_FLAGS_MIPMAP
        header.mip_map_count = mip_levels(header.width, header.height)

    header.flags |= DDSD_LINEARSIZE
    if pf.has_fourcc:
        header.pitch_or_linear_size = header.width * header.height
        # DXT1 packs 4 bits per pixel; DXT5 packs 8.
        if descriptor.bits_per_pixel == 4:
            header.pitch_or_linear_size //= 2
        pf.flags |= DDPF_FOURCC
    else:
        header.pitch_or_linear_size = (
            record.width * record.height * pf.rgb_bit_count
        ) // 8
    if header.pitch_or_linear_size > _UINT32_MAX:
        raise UnsupportedFormatError(
            f"{descriptor.name} top level of {record.width}x{record.height} is "
            f"{header.pitch_or_linear_size} bytes, too large for a uint32 linear size"
        )

    # TODO: convert AG-packed normal maps to RGB when color_space is linear.
    return header


def build_pvr_container(record: TextureRecord, descriptor: MobileCompressedFormat) -> bytes:
    """Return a complete PVR file for `record`, header and payload included.

    Not written yet: always raises `ContainerNotImplementedError`. The
    dispatcher wraps whatever a mobile builder returns as-is, so a real
    implementation only has to honour the ``bytes`` return.
    """
    raise ContainerNotImplementedError(MobileFamily.PVR)


def build_atc_container(record: TextureRecord, descriptor: MobileCompressedFormat) -> bytes:
    """Return a complete ATC container for `record`; not written yet."""
    raise ContainerNotImplementedError(MobileFamily.ATC)


_MOBILE_BUILDERS = {
    MobileFamily.PVR: build_pvr_container,
    MobileFamily.ATC: build_atc_container,
}


def extract_texture(record: TextureRecord) -> ExtractionResult:
    """Resolve, build and serialize one texture record without side effects."""
    if not record.image_data:
        return Skipped(SkipReason.EMPTY_PAYLOAD, f"Texture {record.name} is empty")

    descriptor = resolve_format(record.format_code)
    if descriptor is None:
        return Skipped(
            SkipReason.UNKNOWN_FORMAT,
            f"Texture {record.name} has unknown texture format {record.format_code}",
        )

    if isinstance(descriptor, MobileCompressedFormat):
        builder = _MOBILE_BUILDERS[descriptor.family_tag]
        try:
            data = builder(record, descriptor)
        except ContainerNotImplementedError as exc:
            return Failed(FailReason.NOT_IMPLEMENTED, exc.family, str(exc))
        return Extracted(data, descriptor.family_tag.value)

    try:
        header = build_dds_header(record, descriptor)
    except UnsupportedFormatError as exc:
        return Skipped(
            SkipReason.UNSUPPORTED_FORMAT,
            f"Texture {record.name} has unsupported texture format "
            f"{format_name(record.format_code)}: {exc}",
        )
    return Extracted(serialize(header, record.image_data), DDS_EXTENSION)


@dataclass
class ExtractionSummary:
    """Per-run counters."""

    extracted: int = 0
    skipped: int = 0
    failed: int = 0
    written: List[str] = field(default_factory=list)
    issues: List[dict] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.extracted + self.skipped + self.failed


class TextureExtractor:
    """Run `extract_texture` over records and hand results to a sink."""

    def __init__(self, config: ExtractConfig, sink: OutputSink):
        self.config = config
        self.sink = sink
        self.summary = ExtractionSummary()
        self._lock = threading.Lock()

    def _count(self, outcome: Outcome, path: str = None, issues: list = None):
        with self._lock:
            if outcome is Outcome.EXTRACTED:
                self.summary.extracted += 1
                if path:
                    self.summary.written.append(path)
            elif outcome is Outcome.SKIPPED:
                self.summary.skipped += 1
            else:
                self.summary.failed += 1
            if issues:
                self.summary.issues.extend(issues)

    def _validate_output(self, path: str, data: bytes) -> list:
        from .validate import validate_dds, verify_with_pillow

        issues = validate_dds(data, filename=path)
        if self.config.validation.open_with_pillow:
            issues.extend(verify_with_pillow(path))
        for issue in issues:
            logger.warning("[validate] %s: %s", issue["file"], issue["message"])
        return issues

    def extract(self, record: TextureRecord) -> ExtractionResult:
        """Extract one record, emit it on success, and update the summary."""
        result = extract_texture(record)

        if isinstance(result, Skipped):
            logger.warning("%s", result.message)
            self._count(Outcome.SKIPPED)
            return result

        if isinstance(result, Failed):
            if self.config.extract.fail_on_unimplemented:
                logger.error("Texture %s: %s", record.name, result.message)
                self._count(Outcome.FAILED)
            else:
                logger.warning("Texture %s skipped: %s", record.name, result.message)
                self._count(Outcome.SKIPPED)
            return result

        if self.config.dry_run:
            logger.info(
                "[DRY RUN] would write %s.%s (%d bytes)",
                record.name, result.extension, len(result.data),
            )
            self._count(Outcome.EXTRACTED)
            return result

        path = self.sink.emit(result.data, record.path_id, record.name, result.extension)
        issues = []
        if path and self.config.validation.enabled and result.extension == DDS_EXTENSION:
            issues = self._validate_output(path, result.data)
        if issues and self.config.validation.fail_on_issues:
            self._count(Outcome.FAILED, issues=issues)
        else:
            self._count(Outcome.EXTRACTED, path=path, issues=issues)
        return result

    def _extract_guarded(self, record: TextureRecord) -> Optional[ExtractionResult]:
        try:
            return self.extract(record)
        except Exception as e:
            logger.error("Failed %s: %s", record.describe(), e, exc_info=True)
            self._count(Outcome.FAILED)
            return None

    def run(self, records: Iterable[TextureRecord]) -> ExtractionSummary:
        """Extract every record; per-record errors are counted, not raised."""
        records = list(records)
        workers = max(1, int(self.config.max_workers))
        desc = "Extracting textures"

        if workers <= 1 or len(records) <= 1:
            for record in tqdm(records, desc=desc):
                self._extract_guarded(record)
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = [executor.submit(self._extract_guarded, r) for r in records]
                with tqdm(total=len(futures), desc=desc) as pbar:
                    for future in as_completed(futures):
                        future.result()
                        pbar.update(1)

        s = self.summary
        logger.info(
            "Extraction finished: %d extracted, %d skipped, %d failed (of %d)",
            s.extracted, s.skipped, s.failed, s.total,
        )
        return s
