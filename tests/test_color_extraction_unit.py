"""
Unit tests for the public extraction functions.

Tests the behavior callers rely on:
- single-color and two-region images
- result count ceiling and percentage conservation
- dominance ordering and seeded determinism
- fail-fast parameter validation
- decoding of encoded buffers
"""

import numpy as np
import pytest
from PIL import Image

from dominant_colors import (
    ClusterResult, ExtractionError, InvalidArgumentError,
    extract, extract_detailed, extract_from_bytes
)
from dominant_colors.services.colors import extraction
from synthetic_images import (
    BLUE, CAMEL, GREEN, NAVY, RED, encode_png, noise_image, solid_image, split_image
)


class TestSingleColor:
    """Test uniform images"""

    def test_extract_returns_exact_color(self, rng):
        colors = extract(solid_image(100, 100, RED), count=1, rng=rng)
        assert colors == [RED]

    def test_extract_detailed_covers_all_pixels(self, rng):
        clusters = extract_detailed(solid_image(100, 100, RED), count=1, rng=rng)

        assert len(clusters) == 1
        assert clusters[0].color == RED
        assert clusters[0].pixel_count == 100 * 100
        assert clusters[0].percentage == pytest.approx(100.0, abs=0.1)

    def test_more_clusters_than_colors_shrinks(self, rng):
        colors = extract(solid_image(100, 100, NAVY), count=3, rng=rng)
        assert colors == [NAVY]

    def test_without_explicit_generator(self):
        assert extract(solid_image(20, 20, CAMEL), count=2, resize_width=20) == [CAMEL]


class TestDistinctRegions:
    """Test images made of uniform regions"""

    def test_two_regions_recovered(self, rng):
        img = split_image(100, 100, RED, GREEN, top_rows=50)

        colors = extract(img, count=2, rng=rng)

        assert len(colors) == 2
        assert set(colors) == {RED, GREEN}

    def test_larger_region_ranked_first(self, rng):
        img = split_image(100, 100, RED, GREEN, top_rows=30)

        clusters = extract_detailed(img, count=2, rng=rng)

        assert [c.color for c in clusters] == [GREEN, RED]
        assert [c.pixel_count for c in clusters] == [7000, 3000]
        assert clusters[0].percentage == pytest.approx(70.0)
        assert clusters[1].percentage == pytest.approx(30.0)

    def test_three_regions(self, rng):
        img = solid_image(90, 100, BLUE)
        img[:30] = RED
        img[30:60] = GREEN

        colors = extract(img, count=3, rng=rng)

        assert set(colors) == {RED, GREEN, BLUE}

    def test_count_ceiling_with_two_colors(self, rng):
        img = split_image(100, 100, NAVY, CAMEL, top_rows=40)

        colors = extract(img, count=5, rng=rng)

        assert len(colors) <= 2
        assert set(colors) <= {NAVY, CAMEL}


class TestResultInvariants:
    """Test properties that hold for arbitrary images"""

    @pytest.mark.parametrize("count", [1, 2, 4, 8])
    def test_percentages_sum_to_hundred(self, count):
        clusters = extract_detailed(noise_image(60, 100, seed=count), count=count,
                                    rng=np.random.default_rng(count))

        assert sum(c.percentage for c in clusters) == pytest.approx(100.0, abs=1e-6)
        assert sum(c.pixel_count for c in clusters) == 100 * 60

    @pytest.mark.parametrize("count", [2, 5, 10])
    def test_ranked_by_pixel_count(self, count):
        clusters = extract_detailed(noise_image(50, 100, seed=7), count=count,
                                    rng=np.random.default_rng(1))

        counts = [c.pixel_count for c in clusters]
        assert counts == sorted(counts, reverse=True)
        assert len(clusters) <= count

    def test_channels_in_range(self, rng):
        clusters = extract_detailed(noise_image(40, 100), count=6, rng=rng)
        for cluster in clusters:
            assert all(0 <= v <= 255 for v in cluster.color)

    def test_same_seed_same_output(self):
        img = noise_image(80, 100, seed=11)

        first = extract_detailed(img, count=5, rng=np.random.default_rng(2024))
        second = extract_detailed(img, count=5, rng=np.random.default_rng(2024))

        assert first == second

    def test_extract_projects_colors(self):
        img = noise_image(30, 100, seed=3)

        colors = extract(img, count=4, rng=np.random.default_rng(8))
        clusters = extract_detailed(img, count=4, rng=np.random.default_rng(8))

        assert colors == [c.color for c in clusters]


class TestInputs:
    """Test accepted image types and resizing"""

    def test_pil_image(self, rng):
        image = Image.new("RGB", (40, 20), CAMEL)
        assert extract(image, count=1, resize_width=40, rng=rng) == [CAMEL]

    def test_pil_rgba_image(self, rng):
        image = Image.new("RGBA", (40, 20), (10, 42, 67, 0))
        assert extract(image, count=1, resize_width=40, rng=rng) == [NAVY]

    def test_rgba_array_alpha_ignored(self, rng):
        img = np.zeros((20, 20, 4), dtype=np.uint8)
        img[:, :] = (211, 181, 143, 10)
        assert extract(img, count=1, resize_width=20, rng=rng) == [CAMEL]

    def test_resized_before_sampling(self, rng):
        clusters = extract_detailed(solid_image(100, 200, BLUE), count=1, resize_width=50, rng=rng)

        # 200x100 -> 50x25
        assert clusters[0].pixel_count == 50 * 25
        assert clusters[0].color == BLUE

    def test_one_pixel_image(self, rng):
        img = solid_image(1, 1, GREEN)
        clusters = extract_detailed(img, count=3, resize_width=1, rng=rng)
        assert clusters == [ClusterResult(color=GREEN, pixel_count=1, percentage=100.0)]


class TestValidation:
    """Test fail-fast parameter validation"""

    @pytest.fixture
    def image(self):
        return solid_image(10, 10, RED)

    @pytest.fixture
    def no_clustering(self, monkeypatch):
        """Fail loudly if clustering starts."""
        def _fail(*args, **kwargs):
            raise AssertionError("clustering should not run")
        monkeypatch.setattr(extraction, "run_kmeans", _fail)
        monkeypatch.setattr(extraction, "resize_to_width", _fail)

    @pytest.mark.parametrize("kwargs", [
        {"count": 0},
        {"count": -2},
        {"max_iterations": 0},
        {"max_iterations": -1},
        {"resize_width": 0},
        {"resize_width": -100},
    ])
    def test_invalid_parameters(self, image, no_clustering, kwargs):
        with pytest.raises(InvalidArgumentError):
            extract(image, **kwargs)
        with pytest.raises(InvalidArgumentError):
            extract_detailed(image, **kwargs)

    @pytest.mark.parametrize("shape", [(0, 0, 3), (0, 10, 3), (10, 0, 3)])
    def test_zero_dimension_image(self, no_clustering, shape):
        with pytest.raises(InvalidArgumentError):
            extract(np.zeros(shape, dtype=np.uint8))

    def test_malformed_array(self, no_clustering):
        with pytest.raises(InvalidArgumentError):
            extract(np.zeros((10, 10), dtype=np.uint8))

    def test_float_image_rejected(self, no_clustering):
        with pytest.raises(InvalidArgumentError):
            extract(np.full((10, 10, 3), 0.5))

    def test_invalid_argument_is_value_error(self, image):
        with pytest.raises(ValueError):
            extract(image, count=0)


class TestExtractFromBytes:
    """Test extraction from encoded image buffers"""

    def test_png_bytes(self, rng):
        data = encode_png(split_image(100, 100, RED, BLUE, top_rows=80))

        clusters = extract_from_bytes(data, count=2, rng=rng)

        assert [c.color for c in clusters] == [RED, BLUE]

    def test_rgba_png_bytes(self, rng):
        img = np.zeros((20, 20, 4), dtype=np.uint8)
        img[:, :] = (255, 0, 0, 128)

        assert [c.color for c in extract_from_bytes(encode_png(img), count=1,
                                                    resize_width=20, rng=rng)] == [RED]

    def test_undecodable_bytes(self):
        with pytest.raises(ExtractionError) as exc_info:
            extract_from_bytes(b"definitely not an image")

        assert exc_info.value.__cause__ is not None
        assert isinstance(exc_info.value, RuntimeError)

    def test_empty_bytes(self):
        with pytest.raises(ExtractionError):
            extract_from_bytes(b"")

    def test_options_checked_before_decoding(self):
        with pytest.raises(InvalidArgumentError):
            extract_from_bytes(b"garbage", count=0)
