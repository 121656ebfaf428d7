"""
Window geometry helpers.
Rectangles describing image regions and sliding-window generation.
"""
from typing import Iterator, NamedTuple, Sequence, Tuple, Union


class Rectangle(NamedTuple):
    """Axis-aligned image region (origin at top-left, sizes in pixels)."""
    x: float
    y: float
    width: float
    height: float


RegionLike = Union[Rectangle, Sequence[float]]


def as_rectangle(region: RegionLike) -> Rectangle:
    """
    Coerce a region into a Rectangle.

    Args:
        region: A Rectangle, any object with x/y/width/height attributes,
            or a 4-sequence (x, y, width, height)

    Returns:
        Rectangle
    """
    if isinstance(region, Rectangle):
        return region
    if all(hasattr(region, attr) for attr in ('x', 'y', 'width', 'height')):
        return Rectangle(region.x, region.y, region.width, region.height)
    if len(region) != 4:
        raise ValueError(f"Expected region (x, y, width, height), got {region!r}")
    x, y, width, height = region
    return Rectangle(x, y, width, height)


def sliding_windows(image_size: Tuple[int, int],
                    window_size: Tuple[int, int],
                    stride: Union[int, Tuple[int, int]]) -> Iterator[Rectangle]:
    """
    Generate windows that lie fully inside the image, row by row.

    Args:
        image_size: (width, height) of the image
        window_size: (width, height) of each window
        stride: Step between windows in pixels, scalar or (x, y)

    Yields:
        Window rectangles in row-major order
    """
    if isinstance(stride, int):
        stride = (stride, stride)

    img_w, img_h = image_size
    win_w, win_h = window_size
    step_x, step_y = stride

    if win_w <= 0 or win_h <= 0:
        raise ValueError(f"Window size must be positive, got {window_size}")
    if step_x <= 0 or step_y <= 0:
        raise ValueError(f"Stride must be positive, got {stride}")

    for y in range(0, img_h - win_h + 1, step_y):
        for x in range(0, img_w - win_w + 1, step_x):
            yield Rectangle(x, y, win_w, win_h)
