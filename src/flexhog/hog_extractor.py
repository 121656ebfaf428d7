"""
HOG (Histogram of Oriented Gradients) feature extractor.
Describes whole images or arbitrary windows with a fixed-length vector.
"""
from typing import Dict, Iterable, Optional, Tuple
import numpy as np

from .flexible_hog_strategy import FlexibleHOGStrategy
from .geometry import Rectangle, RegionLike
from .gradient_extractor import GradientOrientationHistogramExtractor


class HOGExtractor:
    """
    HOG feature extractor.

    Analyses an image once and describes any number of windows of it.
    The number of cells per window is fixed, so windows of different
    sizes all produce vectors of the same length.
    """

    def __init__(self,
                 num_cells: Tuple[int, int] = (8, 16),
                 cells_per_block: Tuple[int, int] = (2, 2),
                 block_step: Tuple[int, int] = (1, 1),
                 num_bins: int = 9,
                 signed: bool = False,
                 interpolate: bool = True,
                 block_norm: str = 'L2'):
        """
        Initialize HOG extractor.

        Args:
            num_cells: Number of cells per window (x, y)
            cells_per_block: Number of cells per block (x, y)
            block_step: Stride between blocks in cells (x, y)
            num_bins: Number of orientation bins
            signed: Use signed gradient orientations
            interpolate: Interpolate orientation votes between bins
            block_norm: Block normalisation ('none', 'L1', 'L1-sqrt', 'L2', 'L2-Hys')
        """
        self.num_cells = tuple(num_cells)
        self.cells_per_block = tuple(cells_per_block)
        self.block_step = tuple(block_step)
        self.num_bins = num_bins
        self.block_norm = block_norm

        self.gradients = GradientOrientationHistogramExtractor(
            num_bins=num_bins,
            signed=signed,
            interpolate=interpolate
        )
        self.strategy = FlexibleHOGStrategy(
            num_cells_x=self.num_cells[0],
            num_cells_y=self.num_cells[1],
            cells_per_block_x=self.cells_per_block[0],
            cells_per_block_y=self.cells_per_block[1],
            block_step_x=self.block_step[0],
            block_step_y=self.block_step[1],
            norm=block_norm
        )

        # For num_cells=(8,16), cells_per_block=(2,2), block_step=(1,1), 9 bins:
        # - Blocks: (8-2)//1 = 6 by (16-2)//1 = 14
        # - Features per block: 2*2*9 = 36
        # - Total features: 6 * 14 * 36 = 3024
        self.feature_dim = self.strategy.get_feature_dim(num_bins)

    @classmethod
    def from_config(cls, config: Dict) -> 'HOGExtractor':
        """
        Build an extractor from a configuration dictionary.

        Args:
            config: Full configuration (uses the features.hog section)
        """
        hog_config = config.get('features', {}).get('hog', {})
        return cls(
            num_cells=tuple(hog_config.get('num_cells', [8, 16])),
            cells_per_block=tuple(hog_config.get('cells_per_block', [2, 2])),
            block_step=tuple(hog_config.get('block_step', [1, 1])),
            num_bins=hog_config.get('num_bins', 9),
            signed=hog_config.get('signed', False),
            interpolate=hog_config.get('interpolate', True),
            block_norm=hog_config.get('block_norm', 'L2')
        )

    def extract(self, image: np.ndarray, region: Optional[RegionLike] = None) -> np.ndarray:
        """
        Extract HOG features from an image window.

        Args:
            image: Input image (grayscale or color, uint8 or float32 0-1 range)
            region: Window to describe (defaults to the whole image)

        Returns:
            HOG feature vector (float64)
        """
        self.gradients.analyse_image(image)

        if region is None:
            width, height = self.gradients.get_image_size()
            region = Rectangle(0, 0, width, height)

        return self.strategy.extract(self.gradients, region)

    def extract_windows(self, image: np.ndarray, regions: Iterable[RegionLike]) -> np.ndarray:
        """
        Extract HOG features for many windows of the same image.

        Args:
            image: Input image
            regions: Windows to describe

        Returns:
            Feature matrix (num_windows, feature_dim)
        """
        regions = list(regions)
        self.gradients.analyse_image(image)

        features = np.zeros((len(regions), self.feature_dim), dtype=np.float64)
        for row, region in zip(features, regions):
            # Each row is handed over as the output buffer and filled in place
            self.strategy.extract(self.gradients, region, row)

        return features

    def get_feature_dim(self) -> int:
        """Get feature dimension."""
        return self.feature_dim
