"""
Gradient orientation histogram extractor.
Bins gradient magnitudes by orientation and answers histogram queries for
arbitrary rectangles through per-bin integral images.
"""
from typing import Optional, Tuple
import numpy as np
import cv2


class GradientOrientationHistogramExtractor:
    """
    Windowed gradient orientation histogram extractor.

    After analyse_image(), the magnitude-weighted orientation histogram of
    any rectangle can be computed in O(num_bins) regardless of its size.
    """

    def __init__(self,
                 num_bins: int = 9,
                 signed: bool = False,
                 interpolate: bool = True):
        """
        Initialize Gradient orientation histogram extractor.

        Args:
            num_bins: Number of orientation bins
            signed: Use signed gradients (0-360 degrees) instead of
                unsigned (0-180 degrees)
            interpolate: Split each vote linearly between the two nearest
                bin centres instead of voting into a single bin
        """
        if num_bins <= 0:
            raise ValueError(f"num_bins must be positive, got {num_bins}")

        self.num_bins = num_bins
        self.signed = signed
        self.interpolate = interpolate

        # Summed-area tables, shape (H+1, W+1, num_bins)
        self.integral = None

    def analyse_image(self, image: np.ndarray) -> 'GradientOrientationHistogramExtractor':
        """
        Compute gradients and build the per-bin integral images.

        Args:
            image: Input image (grayscale or BGR, uint8 or float32 0-1 range)

        Returns:
            self, ready for compute_histogram()
        """
        gray = to_grayscale_float(image)

        # Centred differences [-1, 0, 1]
        grad_x = cv2.Sobel(gray, cv2.CV_64F, 1, 0, ksize=1)
        grad_y = cv2.Sobel(gray, cv2.CV_64F, 0, 1, ksize=1)

        magnitude = np.sqrt(grad_x**2 + grad_y**2)
        direction = np.arctan2(grad_y, grad_x)

        period = 2 * np.pi if self.signed else np.pi
        direction = np.mod(direction, period)

        h, w = gray.shape
        binned = np.zeros((h, w, self.num_bins), dtype=np.float64)
        rows, cols = np.indices((h, w))

        position = direction / period * self.num_bins
        if self.interpolate:
            # Bin centres sit at (b + 0.5); wrap around the circle
            position = position - 0.5
            lower = np.floor(position)
            frac = position - lower
            lower = lower.astype(np.int64) % self.num_bins
            upper = (lower + 1) % self.num_bins

            binned[rows, cols, lower] += magnitude * (1.0 - frac)
            binned[rows, cols, upper] += magnitude * frac
        else:
            index = np.floor(position).astype(np.int64) % self.num_bins
            binned[rows, cols, index] = magnitude

        self.integral = np.zeros((h + 1, w + 1, self.num_bins), dtype=np.float64)
        self.integral[1:, 1:] = binned.cumsum(axis=0).cumsum(axis=1)

        return self

    def get_num_bins(self) -> int:
        """Get number of orientation bins."""
        return self.num_bins

    def get_image_size(self) -> Tuple[int, int]:
        """Get (width, height) of the analysed image."""
        if self.integral is None:
            raise RuntimeError("No image analysed; call analyse_image() first")
        return self.integral.shape[1] - 1, self.integral.shape[0] - 1

    def compute_histogram(self, x: int, y: int, width: int, height: int,
                          out: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Compute the orientation histogram of a rectangle.

        The rectangle is clipped to the image; parts outside contribute
        nothing.

        Args:
            x, y: Top-left corner in pixels
            width, height: Size in pixels
            out: Optional buffer of length num_bins to write into

        Returns:
            Histogram (out, if given)
        """
        if self.integral is None:
            raise RuntimeError("No image analysed; call analyse_image() first")

        if out is None:
            out = np.zeros(self.num_bins, dtype=np.float64)
        elif out.shape != (self.num_bins,):
            raise ValueError(
                f"Histogram buffer must have length {self.num_bins}, got shape {out.shape}"
            )

        img_w, img_h = self.get_image_size()
        x0 = min(max(int(x), 0), img_w)
        y0 = min(max(int(y), 0), img_h)
        x1 = min(max(int(x + width), 0), img_w)
        y1 = min(max(int(y + height), 0), img_h)

        if x1 <= x0 or y1 <= y0:
            out.fill(0.0)
            return out

        ii = self.integral
        out[:] = ii[y1, x1] - ii[y0, x1] - ii[y1, x0] + ii[y0, x0]
        return out


def to_grayscale_float(image: np.ndarray) -> np.ndarray:
    """
    Convert an image to a single-channel float64 array.

    Args:
        image: Grayscale or BGR image, uint8 (0-255) or float (0-1 range)

    Returns:
        Grayscale image (float64, 0-1 range for uint8 input)
    """
    if image.ndim == 3 and image.shape[2] == 1:
        image = image[:, :, 0]

    if image.dtype == np.uint8:
        if image.ndim == 3:
            image = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        return image.astype(np.float64) / 255.0

    image = image.astype(np.float32)
    if image.ndim == 3:
        image = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    return image.astype(np.float64)
