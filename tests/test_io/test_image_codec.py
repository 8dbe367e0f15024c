"""
Tests for the image codec boundary.

Covers buffer normalisation, Pillow round trips through temporary files
and the async load/save helpers.
"""

import os
import tempfile
import unittest

import numpy as np
from PIL import Image

from imager.core.matrix import Matrix
from imager.core.errors import ValidationError
from imager.io.image_codec import (
    buffer_to_matrix, matrix_to_buffer, read_image, write_image,
    load_image, save_image
)


class TestBufferConversion(unittest.TestCase):
    """Test buffer_to_matrix() and matrix_to_buffer()."""

    def test_buffer_to_matrix_normalises(self):
        buffer = np.array([[[0, 255, 51]]], dtype=np.uint8)
        matrix = buffer_to_matrix(buffer)
        self.assertEqual(matrix.shape, (1, 1, 3))
        self.assertTrue(np.allclose(matrix.get(0, 0), [0.0, 1.0, 0.2]))

    def test_grayscale_buffer(self):
        matrix = buffer_to_matrix(np.full((2, 3), 255, dtype=np.uint8))
        self.assertEqual(matrix.shape, (2, 3, 1))
        self.assertEqual(matrix.get(1, 2), 1.0)

    def test_non_contiguous_buffer(self):
        """Test a strided view of a larger buffer is read correctly."""
        big = np.arange(4 * 6 * 4, dtype=np.uint8).reshape(4, 6, 4)
        view = big[1:3, ::2]
        matrix = buffer_to_matrix(view)
        self.assertEqual(matrix.shape, (2, 3, 4))
        self.assertTrue(np.allclose(matrix.array * 255, view))

    def test_rejects_non_uint8(self):
        with self.assertRaises(ValidationError):
            buffer_to_matrix(np.zeros((2, 2, 3), dtype=np.float32))
        with self.assertRaises(ValidationError):
            buffer_to_matrix([[0, 1]])

    def test_rejects_bad_rank(self):
        with self.assertRaises(ValidationError):
            buffer_to_matrix(np.zeros(4, dtype=np.uint8))

    def test_matrix_to_buffer_truncates(self):
        """Test denormalisation truncates toward zero instead of rounding."""
        matrix = Matrix.load([[0.999, 0.5, 1.0]])
        buffer = matrix_to_buffer(matrix)
        self.assertEqual(buffer.dtype, np.uint8)
        self.assertEqual(buffer[0, :, 0].tolist(), [254, 127, 255])

    def test_matrix_to_buffer_clips(self):
        buffer = matrix_to_buffer(Matrix.load([[-0.5, 1.5]]))
        self.assertEqual(buffer[0, :, 0].tolist(), [0, 255])

    def test_matrix_to_buffer_leaves_matrix(self):
        matrix = Matrix.load([[0.5]])
        matrix_to_buffer(matrix)
        self.assertEqual(matrix.get(0, 0), 0.5)

    def test_buffer_is_contiguous(self):
        matrix = Matrix.random(3, 4, 4, seed=1).flip_horizontal()
        self.assertTrue(matrix_to_buffer(matrix).flags['C_CONTIGUOUS'])


class TestFileCodec(unittest.TestCase):
    """Test read_image() and write_image()."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmpdir.cleanup()

    def path(self, name):
        return os.path.join(self.tmpdir.name, name)

    def test_png_round_trip(self):
        rng = np.random.default_rng(0)
        buffer = rng.integers(0, 255, (5, 7, 4), dtype=np.uint8, endpoint=True)
        write_image(buffer, self.path("out.png"))
        self.assertTrue(np.array_equal(read_image(self.path("out.png")), buffer))

    def test_grayscale_round_trip(self):
        buffer = np.arange(12, dtype=np.uint8).reshape(3, 4, 1)
        write_image(buffer, self.path("gray.png"))
        loaded = read_image(self.path("gray.png"))
        self.assertEqual(loaded.shape, (3, 4, 1))
        self.assertTrue(np.array_equal(loaded, buffer))

    def test_palette_image_is_converted(self):
        """Test palette images decode as RGB."""
        Image.new('P', (4, 2), color=3).save(self.path("palette.png"))
        loaded = read_image(self.path("palette.png"))
        self.assertEqual(loaded.shape, (2, 4, 3))

    def test_missing_extension(self):
        with self.assertRaises(ValidationError):
            write_image(np.zeros((2, 2, 3), dtype=np.uint8), self.path("noext"))

    def test_unencodable_channels(self):
        with self.assertRaises(ValidationError):
            write_image(np.zeros((2, 2, 5), dtype=np.uint8), self.path("five.png"))

    def test_jpeg_quality(self):
        buffer = np.full((8, 8, 3), 128, dtype=np.uint8)
        write_image(buffer, self.path("out.jpg"), quality=90)
        loaded = read_image(self.path("out.jpg"))
        self.assertEqual(loaded.shape, (8, 8, 3))
        self.assertLessEqual(int(np.abs(loaded.astype(int) - 128).max()), 2)


class TestAsyncCodec(unittest.IsolatedAsyncioTestCase):
    """Test load_image() and save_image()."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmpdir.cleanup()

    async def test_save_then_load(self):
        """Test a matrix survives a PNG round trip within one 8-bit step."""
        path = os.path.join(self.tmpdir.name, "image.png")
        matrix = Matrix.random(6, 5, 4, seed=12)

        await save_image(matrix, path)
        loaded = await load_image(path)

        self.assertEqual(loaded.shape, matrix.shape)
        self.assertTrue(loaded.allclose(matrix, atol=1 / 255))

    async def test_load_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            await load_image(os.path.join(self.tmpdir.name, "missing.png"))


if __name__ == '__main__':
    unittest.main()
