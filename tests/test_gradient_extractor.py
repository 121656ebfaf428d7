import numpy as np
import pytest

from flexhog.gradient_extractor import GradientOrientationHistogramExtractor, to_grayscale_float


def vertical_edge(height=16, width=16, dark_left=True):
    image = np.zeros((height, width), dtype=np.float32)
    if dark_left:
        image[:, width // 2:] = 1.0
    else:
        image[:, :width // 2] = 1.0
    return image


def test_vertical_edge_votes_horizontal_gradient_bin():
    extractor = GradientOrientationHistogramExtractor(num_bins=9, interpolate=False)
    extractor.analyse_image(vertical_edge())

    hist = extractor.compute_histogram(0, 0, 16, 16)

    # Two edge columns, 16 rows, unit gradient magnitude
    expected = np.zeros(9)
    expected[0] = 32.0
    np.testing.assert_allclose(hist, expected)


def test_horizontal_edge_votes_vertical_gradient_bin():
    extractor = GradientOrientationHistogramExtractor(num_bins=9, interpolate=False)
    extractor.analyse_image(vertical_edge().T.copy())

    hist = extractor.compute_histogram(0, 0, 16, 16)

    expected = np.zeros(9)
    expected[4] = 32.0
    np.testing.assert_allclose(hist, expected)


def test_interpolated_vote_is_split_between_neighbouring_bins():
    extractor = GradientOrientationHistogramExtractor(num_bins=9, interpolate=True)
    extractor.analyse_image(vertical_edge())

    hist = extractor.compute_histogram(0, 0, 16, 16)

    expected = np.zeros(9)
    expected[0] = 16.0
    expected[8] = 16.0
    np.testing.assert_allclose(hist, expected)


def test_signed_orientation_separates_opposite_gradients():
    signed = GradientOrientationHistogramExtractor(num_bins=9, signed=True, interpolate=False)
    unsigned = GradientOrientationHistogramExtractor(num_bins=9, signed=False, interpolate=False)

    image = vertical_edge(dark_left=False)
    signed_hist = signed.analyse_image(image).compute_histogram(0, 0, 16, 16)
    unsigned_hist = unsigned.analyse_image(image).compute_histogram(0, 0, 16, 16)

    assert signed_hist[4] == pytest.approx(32.0)
    assert unsigned_hist[0] == pytest.approx(32.0)


def test_histograms_are_additive(rng):
    image = rng.random((40, 30)).astype(np.float32)
    extractor = GradientOrientationHistogramExtractor(num_bins=6).analyse_image(image)

    whole = extractor.compute_histogram(0, 0, 30, 40)
    parts = (extractor.compute_histogram(0, 0, 12, 25)
             + extractor.compute_histogram(12, 0, 18, 25)
             + extractor.compute_histogram(0, 25, 12, 15)
             + extractor.compute_histogram(12, 25, 18, 15))

    np.testing.assert_allclose(parts, whole)
    assert (whole >= 0).all()


def test_rectangle_is_clipped_to_image(rng):
    image = rng.random((20, 20)).astype(np.float32)
    extractor = GradientOrientationHistogramExtractor().analyse_image(image)

    np.testing.assert_allclose(
        extractor.compute_histogram(-5, -5, 15, 15),
        extractor.compute_histogram(0, 0, 10, 10)
    )
    assert not extractor.compute_histogram(25, 0, 10, 10).any()
    assert not extractor.compute_histogram(5, 5, 0, 10).any()


def test_writes_into_buffer(rng):
    extractor = GradientOrientationHistogramExtractor(num_bins=4)
    extractor.analyse_image(rng.random((10, 10)).astype(np.float32))
    out = np.full(4, -1.0)

    result = extractor.compute_histogram(0, 0, 10, 10, out)

    assert result is out
    assert (out >= 0).all()


def test_buffer_length_checked(rng):
    extractor = GradientOrientationHistogramExtractor(num_bins=4)
    extractor.analyse_image(rng.random((10, 10)).astype(np.float32))

    with pytest.raises(ValueError):
        extractor.compute_histogram(0, 0, 10, 10, np.zeros(5))


def test_requires_analysed_image():
    extractor = GradientOrientationHistogramExtractor()

    with pytest.raises(RuntimeError):
        extractor.compute_histogram(0, 0, 10, 10)
    with pytest.raises(RuntimeError):
        extractor.get_image_size()


def test_invalid_bin_count():
    with pytest.raises(ValueError):
        GradientOrientationHistogramExtractor(num_bins=0)


def test_color_uint8_image(rng):
    image = rng.integers(0, 256, size=(12, 20, 3), dtype=np.uint8)
    extractor = GradientOrientationHistogramExtractor().analyse_image(image)

    assert extractor.get_image_size() == (20, 12)
    assert extractor.get_num_bins() == 9


def test_to_grayscale_float_scales_uint8():
    image = np.full((4, 4), 255, dtype=np.uint8)
    gray = to_grayscale_float(image)

    assert gray.dtype == np.float64
    np.testing.assert_allclose(gray, 1.0)
