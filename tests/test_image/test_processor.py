"""
Tests for the ImageProcessor facade.
"""

import os
import tempfile
import unittest

import numpy as np

from imager import ImageProcessor, ImagerConfig, Matrix
from imager.core.errors import InvalidModeError


class TestProcessorConfig(unittest.TestCase):
    """Test config defaults flow into the filters."""

    def test_invalid_config(self):
        with self.assertRaises(ValueError):
            ImageProcessor(ImagerConfig(pixel_size=0))

    def test_default_config(self):
        self.assertEqual(ImageProcessor().config, ImagerConfig())

    def test_pixelize_default_size(self):
        processor = ImageProcessor(ImagerConfig(pixel_size=2))
        image = Matrix.generate(2, 2, 3)
        image.set(0, 0, 0.4)
        processor.pixelize(image)
        self.assertTrue(np.allclose(image.array, 0.1))

    def test_sharp_default_amount(self):
        """Test a zero sharpen amount blacks out the image."""
        processor = ImageProcessor(ImagerConfig(sharp_amount=0.0))
        image = processor.sharp(Matrix.white(3, 3))
        self.assertTrue(image.is_all_black())

    def test_explicit_argument_overrides_config(self):
        processor = ImageProcessor(ImagerConfig(sharp_amount=0.0))
        image = Matrix.white(5, 5)
        processor.sharp(image, 1.0)
        self.assertAlmostEqual(image.get(2, 2, 0), 1.0)

    def test_blur_default(self):
        image = Matrix.generate(11, 11, 4, fill=0.5)
        ImageProcessor().blur(image)
        self.assertAlmostEqual(image.get(5, 5, 0), 0.5)


class TestProcessorOperations(unittest.TestCase):
    """Test delegation to the engines."""

    def setUp(self):
        self.processor = ImageProcessor()

    def test_blend_by_name(self):
        base = Matrix.generate(2, 2, 4, fill=0.5)
        self.processor.blend(base, Matrix.generate(2, 2, 4, fill=0.5), "multiply")
        self.assertAlmostEqual(base.get(0, 0, 0), 0.25)

    def test_crop_and_gray(self):
        image = Matrix.random(4, 4, 4, seed=3)
        cropped = self.processor.gray(self.processor.crop(image, 0, 0, 2, 2))
        self.assertEqual(cropped.shape, (2, 2, 4))
        self.assertAlmostEqual(cropped.get(1, 1, 0), cropped.get(1, 1, 2))

    def test_invalid_mode_propagates(self):
        with self.assertRaises(InvalidModeError):
            self.processor.burn(Matrix.white(2, 2), Matrix.white(2, 2), "dodge")


class TestProcessorCodec(unittest.IsolatedAsyncioTestCase):
    """Test async load and save."""

    async def test_load_save(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "red.png")
            processor = ImageProcessor()

            await processor.save(Matrix.red(3, 2), path)
            image = await processor.load(path)

        self.assertEqual(image.shape, (3, 2, 4))
        self.assertEqual(image.get(2, 1).tolist(), [1.0, 0.0, 0.0, 1.0])


if __name__ == '__main__':
    unittest.main()
