"""Tests for background polarity estimation."""
import itertools

import numpy as np
import pytest

from traceify.polarity import estimate_background_is_dark, resolve_invert, sample_border
from traceify.types import PolarityFlags

from conftest import framed_buffer, solid_buffer


class TestSampleBorder:
    """Test cases for border sampling."""

    def test_small_image_samples_every_border_pixel(self):
        """Below 50 pixels per edge the stride is 1."""
        samples = sample_border(solid_buffer(10, 6, (1, 2, 3, 255)))

        # top + bottom rows, left + right columns
        assert len(samples) == 10 * 2 + 6 * 2

    def test_stride_scales_with_size(self):
        """A 200 wide image is sampled every 4 columns."""
        samples = sample_border(solid_buffer(200, 10, (0, 0, 0, 255)))

        assert len(samples) == 50 * 2 + 10 * 2

    def test_interior_is_ignored(self):
        """Only border pixels are sampled."""
        buffer = framed_buffer(20, (0, 0, 0, 255), (255, 255, 255, 255), border=1)
        samples = sample_border(buffer)

        assert np.all(samples[:, :3] == 0)


class TestEstimateBackgroundIsDark:
    """Test cases for estimate_background_is_dark."""

    def test_black_border_is_dark(self):
        """An all-black opaque border is dark."""
        buffer = framed_buffer(20, (0, 0, 0, 255), (255, 255, 255, 255))
        assert estimate_background_is_dark(buffer) is True

    def test_white_border_is_light(self):
        """An all-white opaque border is light."""
        buffer = framed_buffer(20, (255, 255, 255, 255), (0, 0, 0, 255))
        assert estimate_background_is_dark(buffer) is False

    def test_transparent_border_is_light(self):
        """No opaque samples falls back to a light background."""
        buffer = framed_buffer(20, (0, 0, 0, 0), (0, 0, 0, 255))
        assert estimate_background_is_dark(buffer) is False

    def test_nearly_transparent_samples_skipped(self):
        """Samples with alpha below 10 don't count."""
        buffer = solid_buffer(20, 20, (255, 255, 255, 255))
        buffer.pixels[0, :] = (0, 0, 0, 9)
        buffer.pixels[-1, :] = (0, 0, 0, 9)

        assert estimate_background_is_dark(buffer) is False

    def test_alpha_at_cutoff_counts(self):
        """Alpha of exactly 10 is opaque enough."""
        buffer = solid_buffer(20, 20, (0, 0, 0, 10))
        assert estimate_background_is_dark(buffer) is True

    def test_cutoff_is_strict(self):
        """Mean luminance of exactly 128 is not dark."""
        buffer = solid_buffer(10, 10, (128, 128, 128, 255))
        assert estimate_background_is_dark(buffer) is False

        buffer = solid_buffer(10, 10, (127, 127, 127, 255))
        assert estimate_background_is_dark(buffer) is True

    def test_single_pixel(self):
        """A 1x1 image samples its only pixel."""
        assert estimate_background_is_dark(solid_buffer(1, 1, (5, 5, 5, 255))) is True


class TestResolveInvert:
    """Test cases for combining polarity flags."""

    @pytest.mark.parametrize(
        "auto_invert,flip_invert,dark",
        list(itertools.product([False, True], repeat=3)),
    )
    def test_truth_table(self, auto_invert, flip_invert, dark):
        """All eight combinations follow auto ? flip xor dark : flip."""
        flags = PolarityFlags(auto_invert=auto_invert, flip_invert=flip_invert)
        expected = (flip_invert != dark) if auto_invert else flip_invert

        assert resolve_invert(flags, dark) is expected
