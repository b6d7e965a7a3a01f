"""Output sinks for extracted containers."""

import logging
import os
import threading
import uuid
from typing import Dict, Optional, Protocol

from .paths import get_output_path

logger = logging.getLogger("texpack.io")


class OutputSink(Protocol):
    """Receives one finished container per extracted record."""

    def emit(self, data: bytes, path_id: int, name: str, extension: str) -> Optional[str]:
        ...


def write_bytes_atomic(path: str, data: bytes) -> None:
    """Write bytes via a temp file and `os.replace` so readers never see partial files."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    tmp_path = f"{path}.tmp.{os.getpid()}.{threading.get_ident()}.{uuid.uuid4().hex[:8]}"
    try:
        with open(tmp_path, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            try:
                os.remove(tmp_path)
            except OSError:
                pass


class FileSink:
    """Write extracted containers as `<output_dir>/<name>.<ext>`."""

    def __init__(self, output_dir: str, overwrite: bool = True):
        self.output_dir = output_dir
        self.overwrite = overwrite
        self._claimed: Dict[str, int] = {}
        self._lock = threading.Lock()

    def _claim_path(self, path_id: int, name: str, extension: str) -> Optional[str]:
        path = get_output_path(self.output_dir, name, extension)
        with self._lock:
            key = os.path.normcase(path)
            owner = self._claimed.get(key)
            if owner is not None and owner != path_id:
                # Another record of this run already owns the name.
                path = get_output_path(self.output_dir, name, extension, f"_{path_id}")
                key = os.path.normcase(path)
            if key not in self._claimed and os.path.exists(path) and not self.overwrite:
                logger.warning("Output exists, not overwriting: %s", path)
                return None
            self._claimed[key] = path_id
        return path

    def emit(self, data: bytes, path_id: int, name: str, extension: str) -> Optional[str]:
        """Write one container and return its path, or None if it was left alone."""
        path = self._claim_path(path_id, name, extension)
        if path is None:
            return None
        write_bytes_atomic(path, data)
        logger.debug("Wrote %s (%d bytes)", path, len(data))
        return path
