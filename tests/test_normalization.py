import numpy as np
import pytest

from flexhog.normalization import (
    available_block_normalisations,
    get_block_normalisation,
    normalise_l1,
    normalise_l1_sqrt,
    normalise_l2,
    normalise_l2_hys,
    normalise_none,
)


def test_l2():
    block = np.array([3.0, 4.0])
    normalise_l2(block, 1)
    np.testing.assert_allclose(block, [0.6, 0.8], rtol=1e-6)


def test_l1():
    block = np.array([1.0, 3.0])
    normalise_l1(block, 1)
    np.testing.assert_allclose(block, [0.25, 0.75], rtol=1e-4)


def test_l1_sqrt():
    block = np.array([1.0, 3.0])
    normalise_l1_sqrt(block, 1)
    np.testing.assert_allclose(block, [0.5, np.sqrt(0.75)], rtol=1e-4)


def test_l2_hys_clips_dominant_bins():
    block = np.array([3.0, 4.0, 0.0, 0.0])
    normalise_l2_hys(block, 4)
    np.testing.assert_allclose(block, [np.sqrt(0.5), np.sqrt(0.5), 0.0, 0.0], rtol=1e-4)


def test_none_leaves_block():
    block = np.array([3.0, 4.0])
    normalise_none(block, 4)
    np.testing.assert_array_equal(block, [3.0, 4.0])


@pytest.mark.parametrize("name", ['none', 'L1', 'L1-sqrt', 'L2', 'L2-Hys'])
def test_zero_block_stays_zero(name):
    block = np.zeros(8)
    get_block_normalisation(name)(block, 4)
    assert np.isfinite(block).all()
    assert not block.any()


@pytest.mark.parametrize("name, expected", [
    ('L2', normalise_l2),
    ('l2', normalise_l2),
    ('L2-Hys', normalise_l2_hys),
    ('l2_hys', normalise_l2_hys),
    ('L1_SQRT', normalise_l1_sqrt),
    ('L1', normalise_l1),
    ('none', normalise_none),
    (None, normalise_none),
])
def test_lookup_by_name(name, expected):
    assert get_block_normalisation(name) is expected


def test_callable_passes_through():
    def custom(block, area):
        block /= area

    assert get_block_normalisation(custom) is custom


def test_unknown_scheme():
    with pytest.raises(ValueError):
        get_block_normalisation('max')


def test_available_names():
    assert set(available_block_normalisations()) == {'none', 'l1', 'l1-sqrt', 'l2', 'l2-hys'}
