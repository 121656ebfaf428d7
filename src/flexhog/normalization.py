"""
Block normalisation schemes for HOG descriptors.
Each scheme normalises a block histogram in place.
"""
from typing import Callable, Dict, Union
import numpy as np

# Signature: normalise(block, block_area) -> None, mutating block
BlockNormalisation = Callable[[np.ndarray, int], None]

EPS = 1e-5
HYS_CLIP = 0.2


def normalise_none(block: np.ndarray, block_area: int) -> None:
    """Leave the block untouched."""


def normalise_l1(block: np.ndarray, block_area: int) -> None:
    """L1 normalisation: v / (|v|_1 + eps)."""
    block /= np.abs(block).sum() + EPS


def normalise_l1_sqrt(block: np.ndarray, block_area: int) -> None:
    """L1 normalisation followed by an element-wise square root."""
    normalise_l1(block, block_area)
    np.sqrt(block, out=block)


def normalise_l2(block: np.ndarray, block_area: int) -> None:
    """L2 normalisation: v / sqrt(|v|_2^2 + eps^2)."""
    block /= np.sqrt(np.dot(block, block) + EPS ** 2)


def normalise_l2_hys(block: np.ndarray, block_area: int) -> None:
    """
    L2-Hys normalisation (Lowe-style clipping).

    L2 normalise, clip every value at 0.2, then L2 normalise again.
    """
    normalise_l2(block, block_area)
    np.minimum(block, HYS_CLIP, out=block)
    normalise_l2(block, block_area)


_SCHEMES: Dict[str, BlockNormalisation] = {
    'none': normalise_none,
    'l1': normalise_l1,
    'l1-sqrt': normalise_l1_sqrt,
    'l2': normalise_l2,
    'l2-hys': normalise_l2_hys,
}


def available_block_normalisations() -> list:
    """Names accepted by get_block_normalisation."""
    return list(_SCHEMES.keys())


def get_block_normalisation(norm: Union[str, BlockNormalisation, None]) -> BlockNormalisation:
    """
    Resolve a block normalisation scheme.

    Args:
        norm: Scheme name ('none', 'L1', 'L1-sqrt', 'L2', 'L2-Hys'; case
            and '_'/'-' insensitive), a callable (block, area) -> None,
            or None for no normalisation

    Returns:
        Normalisation callable
    """
    if norm is None:
        return normalise_none
    if callable(norm):
        return norm

    key = str(norm).strip().lower().replace('_', '-')
    if key not in _SCHEMES:
        raise ValueError(
            f"Unknown block normalisation '{norm}'. "
            f"Choose from {available_block_normalisations()}"
        )
    return _SCHEMES[key]
