"""Texture record dataclass."""

from dataclasses import dataclass

_UINT32_MAX = 0xFFFFFFFF
_INT32_MIN = -0x80000000
_INT32_MAX = 0x7FFFFFFF


@dataclass(frozen=True)
class TextureRecord:
    """One decoded engine texture, ready to be repackaged."""

    name: str
    width: int
    height: int
    format_code: int
    mip_map: bool = False
    color_space: int = 0
    image_data: bytes = b""
    path_id: int = 0

    def __post_init__(self) -> None:
        """Validate integer ranges and freeze the payload as bytes."""
        for field_name in ("width", "height"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(
                    f"TextureRecord.{field_name} must be int, got {type(value).__name__}"
                )
            if not (0 <= value <= _UINT32_MAX):
                raise ValueError(
                    f"TextureRecord.{field_name} out of uint32 range: {value}"
                )
        if isinstance(self.format_code, bool) or not isinstance(self.format_code, int):
            raise TypeError(
                f"TextureRecord.format_code must be int, got {type(self.format_code).__name__}"
            )
        if not (_INT32_MIN <= self.format_code <= _INT32_MAX):
            raise ValueError(
                f"TextureRecord.format_code out of int32 range: {self.format_code}"
            )
        if not isinstance(self.image_data, bytes):
            object.__setattr__(self, "image_data", bytes(self.image_data))
        object.__setattr__(self, "mip_map", bool(self.mip_map))

    @property
    def payload_size(self) -> int:
        return len(self.image_data)

    def describe(self) -> str:
        """Short label for log lines."""
        return f"{self.name} (id={self.path_id}, {self.width}x{self.height})"
