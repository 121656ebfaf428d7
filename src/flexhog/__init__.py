"""
Flexible-cell HOG descriptors for arbitrary image windows.
"""
from .flexible_hog_strategy import FlexibleHOGStrategy, WindowedHistogramExtractor
from .geometry import Rectangle, as_rectangle, sliding_windows
from .gradient_extractor import GradientOrientationHistogramExtractor
from .hog_extractor import HOGExtractor
from .normalization import available_block_normalisations, get_block_normalisation

__version__ = "0.1.0"

__all__ = [
    'FlexibleHOGStrategy',
    'WindowedHistogramExtractor',
    'GradientOrientationHistogramExtractor',
    'HOGExtractor',
    'Rectangle',
    'as_rectangle',
    'sliding_windows',
    'available_block_normalisations',
    'get_block_normalisation',
]
