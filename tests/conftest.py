"""Shared test fixtures."""

import csv
import os
import shutil
import tempfile

import pytest

from TexPack.config import ExtractConfig
from TexPack.core import TextureFormat, TextureRecord


@pytest.fixture
def tmp_dir():
    d = tempfile.mkdtemp()
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def default_config():
    return ExtractConfig()


@pytest.fixture
def sample_record():
    return TextureRecord(
        name="rock_albedo",
        width=64,
        height=64,
        format_code=TextureFormat.DXT5,
        mip_map=False,
        color_space=1,
        image_data=b"\x00" * 4096,
        path_id=12,
    )


def make_record(fmt=TextureFormat.RGBA32, width=64, height=64, mip_map=False,
                data=None, name="tex", path_id=1):
    """Build a record whose payload defaults to one zero-filled top level."""
    if data is None:
        data = b"\x00" * (width * height * 4)
    return TextureRecord(
        name=name, width=width, height=height, format_code=int(fmt),
        mip_map=mip_map, color_space=0, image_data=data, path_id=path_id,
    )


def write_manifest(directory, rows, payloads=None):
    """Write a manifest CSV plus payload files and return the manifest path."""
    for rel_path, data in (payloads or {}).items():
        full = os.path.join(directory, rel_path)
        os.makedirs(os.path.dirname(full) or ".", exist_ok=True)
        with open(full, "wb") as f:
            f.write(data)
    path = os.path.join(directory, "textures.csv")
    fieldnames = ["path_id", "name", "width", "height", "format",
                  "mipmap", "color_space", "data"]
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
    return path
