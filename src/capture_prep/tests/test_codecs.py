#!/usr/bin/env python3
"""
Unit tests for core/codecs.py
"""

import os
import base64
import shutil
import tempfile
import unittest

from PIL import Image

from capture_prep.core.codecs import PillowImageBackend, ensure_rgb, fit_within
from capture_prep.core.errors import CodecError, EncodingError, ProbeError
from capture_prep.core.models import CompressionStrategy, CropRectangle


class TestCodecHelpers(unittest.TestCase):
    """Test cases for codec helper functions"""

    def test_fit_within(self):
        self.assertEqual(fit_within(3000, 1000, 1920, 1920), (1920, 640))
        self.assertEqual(fit_within(400, 300, 200, 200), (200, 150))
        self.assertEqual(fit_within(400, 300, 200, 200, cover=True), (267, 200))

    def test_ensure_rgb(self):
        rgba = Image.new("RGBA", (4, 4), (255, 0, 0, 0))
        self.assertEqual(ensure_rgb(rgba).mode, "RGB")
        # Transparent pixels flatten onto white
        self.assertEqual(ensure_rgb(rgba).getpixel((0, 0)), (255, 255, 255))
        self.assertEqual(ensure_rgb(Image.new("L", (4, 4))).mode, "RGB")


class TestPillowImageBackend(unittest.TestCase):
    """Test cases for the Pillow codecs on real files"""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.backend = PillowImageBackend(os.path.join(self.temp_dir, "out"))
        self.photo = self._make_image("photo.jpg", (3000, 1000))

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _make_image(self, name, size, mode="RGB", image_format="JPEG"):
        path = os.path.join(self.temp_dir, name)
        color = (120, 60, 30, 255) if mode == "RGBA" else (120, 60, 30)
        Image.new(mode, size, color).save(path, format=image_format)
        return path

    def _size_of(self, path):
        with Image.open(path) as img:
            return img.size

    def test_probe_dimensions(self):
        self.assertEqual(self.backend.probe_dimensions(self.photo), (3000, 1000))
        self.assertEqual(self.backend.probe_dimensions("file://" + self.photo), (3000, 1000))

    def test_probe_byte_size(self):
        self.assertEqual(self.backend.probe_byte_size(self.photo), os.path.getsize(self.photo))

    def test_probe_missing_file(self):
        missing = os.path.join(self.temp_dir, "missing.jpg")
        with self.assertRaises(ProbeError):
            self.backend.probe_dimensions(missing)
        with self.assertRaises(ProbeError):
            self.backend.probe_byte_size(missing)

    def test_probe_non_image(self):
        path = os.path.join(self.temp_dir, "notes.txt")
        with open(path, "w") as f:
            f.write("not an image")
        with self.assertRaises(ProbeError):
            self.backend.probe_dimensions(path)

    def test_crop(self):
        output = self.backend.crop(self.photo, CropRectangle(x=10, y=20, width=100, height=50))
        self.assertTrue(output.startswith(self.backend.output_dir))
        self.assertEqual(self._size_of(output), (100, 50))

    def test_crop_missing_file(self):
        with self.assertRaises(CodecError):
            self.backend.crop(os.path.join(self.temp_dir, "missing.jpg"), CropRectangle(x=0, y=0, width=1, height=1))

    def test_compress_scales_to_bounds(self):
        strategy = CompressionStrategy(quality=0.6, max_width=1920, max_height=1920)
        output = self.backend.compress(self.photo, strategy)
        self.assertEqual(self._size_of(output), (1920, 640))

    def test_compress_keeps_small_images(self):
        small = self._make_image("small.jpg", (640, 480))
        strategy = CompressionStrategy(quality=0.8, max_width=1920, max_height=1920)
        self.assertEqual(self._size_of(self.backend.compress(small, strategy)), (640, 480))

    def test_compress_flattens_transparency(self):
        png = self._make_image("overlay.png", (300, 200), mode="RGBA", image_format="PNG")
        strategy = CompressionStrategy(quality=0.8, max_width=1920, max_height=1920)
        output = self.backend.compress(png, strategy)
        with Image.open(output) as img:
            self.assertEqual(img.format, "JPEG")
            self.assertEqual(img.mode, "RGB")

    def test_resize_modes(self):
        source = self._make_image("source.jpg", (400, 300))
        self.assertEqual(self._size_of(self.backend.resize(source, 200, 100, mode="stretch")), (200, 100))
        self.assertEqual(self._size_of(self.backend.resize(source, 200, 200, mode="contain")), (200, 150))
        self.assertEqual(self._size_of(self.backend.resize(source, 200, 200, mode="cover")), (267, 200))

    def test_resize_only_scale_down(self):
        source = self._make_image("source.jpg", (400, 300))
        output = self.backend.resize(source, 1920, 1920, "JPEG", 80, mode="contain", only_scale_down=True)
        self.assertEqual(self._size_of(output), (400, 300))

    def test_resize_explicit_output_and_rotation(self):
        source = self._make_image("source.jpg", (400, 300))
        target = os.path.join(self.temp_dir, "rotated.png")
        output = self.backend.resize(source, 300, 400, "PNG", 90, rotation=90, output_path=target, mode="contain")
        self.assertEqual(output, target)
        with Image.open(output) as img:
            self.assertEqual(img.format, "PNG")
            self.assertEqual(img.size, (300, 400))

    def test_resize_unknown_mode(self):
        with self.assertRaises(CodecError):
            self.backend.resize(self.photo, 100, 100, mode="tile")

    def test_encode_base64(self):
        with open(self.photo, "rb") as f:
            expected = f.read()
        self.assertEqual(base64.b64decode(self.backend.encode_base64(self.photo)), expected)

    def test_encode_missing_file(self):
        with self.assertRaises(EncodingError):
            self.backend.encode_base64(os.path.join(self.temp_dir, "missing.jpg"))


if __name__ == "__main__":
    unittest.main()
