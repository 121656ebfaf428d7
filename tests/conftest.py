import numpy as np
import pytest


class RecordingSource:
    """Histogram source that logs every requested rectangle."""

    def __init__(self, num_bins=9, fill=None):
        self.num_bins = num_bins
        self.fill = fill
        self.calls = []

    def get_num_bins(self):
        return self.num_bins

    def compute_histogram(self, x, y, width, height, out):
        self.calls.append((x, y, width, height))
        if self.fill is not None:
            out[:] = self.fill(x, y, width, height, len(out))


class ZeroSource(RecordingSource):
    def __init__(self, num_bins=9):
        super().__init__(num_bins, fill=lambda x, y, w, h, n: np.zeros(n))


class PatternSource(RecordingSource):
    """Deterministic, position-dependent positive histograms."""

    def __init__(self, num_bins=9):
        super().__init__(
            num_bins,
            fill=lambda x, y, w, h, n: 1.0 + np.arange(n) * (x + 1) + 0.5 * (y + 1)
        )


class OneHotCellSource(RecordingSource):
    """Each cell gets a one-hot histogram at its own linear cell index."""

    def __init__(self, num_cells_x, num_cells_y, cell_width, cell_height):
        self.num_cells_x = num_cells_x

        def fill(x, y, w, h, n):
            hist = np.zeros(n)
            hist[(y // cell_height) * num_cells_x + (x // cell_width)] = 1.0
            return hist

        super().__init__(num_cells_x * num_cells_y, fill=fill)


@pytest.fixture
def recording_source():
    return RecordingSource()


@pytest.fixture
def zero_source():
    return ZeroSource()


@pytest.fixture
def pattern_source():
    return PatternSource()


@pytest.fixture
def rng():
    return np.random.default_rng(0)
