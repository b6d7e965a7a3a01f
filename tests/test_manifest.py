"""Tests for CSV manifest loading."""

import os

import pytest

from TexPack.core import ManifestError, TextureFormat, load_manifest

from conftest import write_manifest


def _row(**overrides):
    row = {
        "path_id": "5", "name": "rock", "width": "64", "height": "64",
        "format": "DXT5", "mipmap": "1", "color_space": "1", "data": "bin/rock.bin",
    }
    row.update(overrides)
    return row


def test_load_manifest_reads_records_and_payloads(tmp_dir):
    path = write_manifest(
        tmp_dir,
        [_row(), _row(path_id="", name="sky", format="4", mipmap="no", data="bin/sky.bin")],
        {"bin/rock.bin": b"\x11" * 4096, "bin/sky.bin": b"\x22" * 16},
    )
    records = load_manifest(path)
    assert len(records) == 2
    rock, sky = records
    assert rock.name == "rock"
    assert rock.format_code == TextureFormat.DXT5
    assert rock.mip_map is True
    assert rock.color_space == 1
    assert rock.path_id == 5
    assert rock.image_data == b"\x11" * 4096
    assert sky.format_code == TextureFormat.RGBA32
    assert sky.mip_map is False
    # Missing path_id falls back to the data row number.
    assert sky.path_id == 2


def test_empty_payload_file_is_loaded_as_empty(tmp_dir):
    path = write_manifest(tmp_dir, [_row()], {"bin/rock.bin": b""})
    assert load_manifest(path)[0].image_data == b""


def test_missing_columns_rejected(tmp_dir):
    path = os.path.join(tmp_dir, "bad.csv")
    with open(path, "w", encoding="utf-8") as f:
        f.write("name,width\nrock,4\n")
    with pytest.raises(ManifestError, match="missing required columns"):
        load_manifest(path)


def test_missing_payload_names_row(tmp_dir):
    path = write_manifest(tmp_dir, [_row(data="bin/nope.bin")])
    with pytest.raises(ManifestError, match="row 2"):
        load_manifest(path)


@pytest.mark.parametrize("data", ["../escape.bin", "/etc/passwd", "C:/x.bin"])
def test_payload_paths_must_stay_inside_manifest_dir(tmp_dir, data):
    path = write_manifest(tmp_dir, [_row(data=data)])
    with pytest.raises(ManifestError):
        load_manifest(path)


@pytest.mark.parametrize("field,value", [
    ("width", "wide"), ("format", "DXT9"), ("mipmap", "maybe"), ("height", ""),
])
def test_malformed_fields_rejected(tmp_dir, field, value):
    path = write_manifest(tmp_dir, [_row(**{field: value})], {"bin/rock.bin": b"\x00"})
    with pytest.raises(ManifestError):
        load_manifest(path)


def test_unreadable_manifest(tmp_dir):
    with pytest.raises(ManifestError):
        load_manifest(os.path.join(tmp_dir, "missing.csv"))
