"""Data URL and upload helpers."""

from __future__ import annotations

import base64
import io

import pytest
from PIL import Image

from landscaper.images import (
    export_image,
    load_image_file,
    normalize_image,
    split_data_url,
    to_data_url,
    to_part,
)

from .conftest import make_png


class TestDataUrls:

    def test_round_trip(self):
        data = make_png()
        assert split_data_url(to_data_url(data)) == (data, "image/png")

    def test_declared_mime(self):
        url = "data:image/jpeg;base64," + base64.b64encode(b"abc").decode()
        assert split_data_url(url) == (b"abc", "image/jpeg")

    def test_bare_base64_is_png(self):
        assert split_data_url(base64.b64encode(b"xyz").decode()) == (b"xyz", "image/png")

    @pytest.mark.parametrize("bad", ["", "data:image/png;base64,***"])
    def test_malformed(self, bad):
        with pytest.raises(ValueError):
            split_data_url(bad)

    def test_part(self):
        part = to_part(to_data_url(b"img", "image/webp"))
        assert part.inline_data.data == b"img"
        assert part.inline_data.mime_type == "image/webp"


class TestFiles:

    def test_load_converts_to_png(self, tmp_path):
        path = tmp_path / "yard.jpg"
        Image.new("RGB", (10, 6), (10, 200, 10)).save(path, format="JPEG")

        data, mime = split_data_url(load_image_file(path))

        assert mime == "image/png"
        with Image.open(io.BytesIO(data)) as img:
            assert img.format == "PNG"
            assert img.size == (10, 6)

    def test_large_images_are_downscaled(self):
        buf = io.BytesIO()
        Image.new("RGB", (300, 150)).save(buf, format="PNG")
        with Image.open(io.BytesIO(normalize_image(buf.getvalue(), max_edge=100))) as img:
            assert img.size == (100, 50)

    def test_rejects_unknown_extension(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        with pytest.raises(ValueError):
            load_image_file(path)

    def test_rejects_corrupt_image(self, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"not really a png")
        with pytest.raises(ValueError):
            load_image_file(path)

    def test_export(self, tmp_path):
        target = tmp_path / "out" / "render.jpg"
        export_image(to_data_url(make_png()), target)
        with Image.open(target) as img:
            assert img.format == "JPEG"
