"""
Flexible HOG spatial binning strategy.
Computes the HOG descriptor of any rectangular window using a fixed number
of cells whose pixel size grows/shrinks with the window.
"""
from typing import Optional, Protocol, Union
import numpy as np

from .geometry import RegionLike, as_rectangle
from .normalization import BlockNormalisation, get_block_normalisation


class WindowedHistogramExtractor(Protocol):
    """Source of orientation histograms for arbitrary pixel rectangles."""

    def get_num_bins(self) -> int:
        ...

    def compute_histogram(self, x: int, y: int, width: int, height: int,
                          out: np.ndarray) -> None:
        ...


class FlexibleHOGStrategy:
    """
    HOG binning with a constant number of cells per window.

    Unlike a fixed-cell-size HOG, the cell width and height are derived
    from each window (window size // number of cells), so every window,
    whatever its size, produces a descriptor of the same length. Coupled
    with a windowed gradient-orientation histogram extractor this gives
    an efficient way to describe many windows of one image.

    Cell, block and output buffers are cached on the instance and only
    reallocated when the bin count of the histogram source changes. An
    instance is therefore not safe to share between threads; use one
    strategy per thread.
    """

    def __init__(self,
                 num_cells_x: int = 8,
                 num_cells_y: int = 16,
                 cells_per_block_x: int = 2,
                 cells_per_block_y: Optional[int] = None,
                 block_step_x: int = 1,
                 block_step_y: Optional[int] = None,
                 norm: Union[str, BlockNormalisation, None] = 'L2'):
        """
        Initialize the strategy.

        Args:
            num_cells_x: Number of cells per window in the x direction
            num_cells_y: Number of cells per window in the y direction
            cells_per_block_x: Number of cells per block in the x direction
            cells_per_block_y: Number of cells per block in the y direction
                (defaults to cells_per_block_x, i.e. square blocks)
            block_step_x: Block shift in cells in the x direction
                (1 = blocks overlap by cells_per_block - 1)
            block_step_y: Block shift in cells in the y direction
                (defaults to block_step_x)
            norm: Block normalisation scheme name or callable (block, area)
        """
        if cells_per_block_y is None:
            cells_per_block_y = cells_per_block_x
        if block_step_y is None:
            block_step_y = block_step_x

        for name, value in (('num_cells_x', num_cells_x),
                            ('num_cells_y', num_cells_y),
                            ('cells_per_block_x', cells_per_block_x),
                            ('cells_per_block_y', cells_per_block_y),
                            ('block_step_x', block_step_x),
                            ('block_step_y', block_step_y)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

        if cells_per_block_x > num_cells_x:
            raise ValueError(
                f"cells_per_block_x ({cells_per_block_x}) exceeds num_cells_x ({num_cells_x})"
            )
        if cells_per_block_y > num_cells_y:
            raise ValueError(
                f"cells_per_block_y ({cells_per_block_y}) exceeds num_cells_y ({num_cells_y})"
            )

        self.num_cells_x = int(num_cells_x)
        self.num_cells_y = int(num_cells_y)
        self.cells_per_block_x = int(cells_per_block_x)
        self.cells_per_block_y = int(cells_per_block_y)
        self.block_step_x = int(block_step_x)
        self.block_step_y = int(block_step_y)
        self.norm = get_block_normalisation(norm)

        self.num_blocks_x = (self.num_cells_x - self.cells_per_block_x) // self.block_step_x
        self.num_blocks_y = (self.num_cells_y - self.cells_per_block_y) // self.block_step_y
        self.block_area = self.cells_per_block_x * self.cells_per_block_y

        # Lazily sized on the first extract() call
        self.num_bins = None
        self.block_length = 0
        self.cells = None
        self.blocks = None

    def get_feature_dim(self, num_bins: int) -> int:
        """Descriptor length for a histogram source with num_bins bins."""
        return self.num_blocks_x * self.num_blocks_y * num_bins * self.block_area

    def extract(self,
                binned_data: WindowedHistogramExtractor,
                region: RegionLike,
                output: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Extract the HOG descriptor of a window.

        Args:
            binned_data: Histogram source (get_num_bins, compute_histogram)
            region: Window (x, y, width, height) in pixels
            output: Optional 1-D float buffer; reused if its length is correct

        Returns:
            Descriptor vector of length
            num_blocks_x * num_blocks_y * num_bins * cells_per_block_x * cells_per_block_y
        """
        self._ensure_buffers(binned_data.get_num_bins())

        self._compute_cells(binned_data, as_rectangle(region))
        self._compute_blocks()

        length = self.num_blocks_x * self.num_blocks_y * self.block_length
        if (not isinstance(output, np.ndarray) or output.ndim != 1
                or output.shape[0] != length
                or not np.issubdtype(output.dtype, np.floating)):
            output = np.zeros(length, dtype=np.float64)

        k = 0
        for y in range(self.num_blocks_y):
            for x in range(self.num_blocks_x):
                block = self.blocks[y, x]
                self.norm(block, self.block_area)

                output[k * self.block_length:(k + 1) * self.block_length] = block
                k += 1

        return output

    def _ensure_buffers(self, num_bins: int) -> None:
        """(Re)allocate the cell and block grids when the bin count changes."""
        if self.cells is not None and self.num_bins == num_bins:
            return

        self.num_bins = num_bins
        self.cells = np.zeros((self.num_cells_y, self.num_cells_x, num_bins), dtype=np.float64)
        self.blocks = np.zeros(
            (self.num_blocks_y, self.num_blocks_x, num_bins * self.block_area),
            dtype=np.float64
        )
        self.block_length = num_bins * self.block_area

    def _compute_cells(self, binned_data: WindowedHistogramExtractor, region) -> None:
        cell_width = int(region.width / self.num_cells_x)
        cell_height = int(region.height / self.num_cells_y)

        y = int(region.y)
        for j in range(self.num_cells_y):
            x = int(region.x)
            for i in range(self.num_cells_x):
                cell = self.cells[j, i]
                cell.fill(0.0)
                binned_data.compute_histogram(x, y, cell_width, cell_height, cell)

                # L2; an empty cell stays all zeros
                norm = np.linalg.norm(cell)
                if norm > 0:
                    cell /= norm

                x += cell_width
            y += cell_height

    def _compute_blocks(self) -> None:
        for y in range(self.num_blocks_y):
            for x in range(self.num_blocks_x):
                block = self.blocks[y, x]

                k = 0
                for j in range(self.cells_per_block_y):
                    for i in range(self.cells_per_block_x):
                        cell = self.cells[y * self.block_step_y + j, x * self.block_step_x + i]
                        block[k:k + cell.shape[0]] = cell
                        k += cell.shape[0]
