"""
HOG descriptor visualization module.
Plots cell orientation glyphs, block heatmaps and value distributions.
"""
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import seaborn as sns
from pathlib import Path
from typing import Optional
import numpy as np

from .flexible_hog_strategy import FlexibleHOGStrategy
from .utils import ensure_dir


def visualize_cell_orientations(strategy: FlexibleHOGStrategy,
                                output_path: Path,
                                signed: bool = False,
                                image: Optional[np.ndarray] = None,
                                title: str = "Cell Orientation Histograms") -> None:
    """
    Draw the last extracted cell histograms as star glyphs.

    Each cell gets one line per bin, oriented perpendicular to the bin's
    gradient direction (i.e. along the edge) and scaled by the bin value.

    Args:
        strategy: Strategy that has run extract() at least once
        output_path: Path to save visualization
        signed: Whether the histograms cover 0-360 degrees
        image: Optional image (the extracted window) to draw underneath
        title: Plot title
    """
    if strategy.cells is None:
        raise RuntimeError("Strategy has no cell histograms yet; call extract() first")

    cells = strategy.cells
    num_cells_y, num_cells_x, num_bins = cells.shape
    period = 2 * np.pi if signed else np.pi
    angles = (np.arange(num_bins) + 0.5) * period / num_bins + np.pi / 2

    fig, ax = plt.subplots(figsize=(num_cells_x * 0.6 + 2, num_cells_y * 0.6 + 2))

    if image is not None:
        ax.imshow(image, cmap='gray', extent=(0, num_cells_x, num_cells_y, 0), alpha=0.5)
    else:
        ax.set_facecolor('black')

    for j in range(num_cells_y):
        for i in range(num_cells_x):
            cx, cy = i + 0.5, j + 0.5
            for value, angle in zip(cells[j, i], angles):
                dx = 0.5 * value * np.cos(angle)
                dy = 0.5 * value * np.sin(angle)
                ax.plot([cx - dx, cx + dx], [cy - dy, cy + dy], color='white', linewidth=1)

    ax.set_xlim(0, num_cells_x)
    ax.set_ylim(num_cells_y, 0)
    ax.set_aspect('equal')
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.set_xticks([])
    ax.set_yticks([])

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close()

    print(f"✓ Saved cell orientation plot to {output_path}")


def visualize_block_energy(descriptor: np.ndarray,
                           strategy: FlexibleHOGStrategy,
                           output_path: Path,
                           title: str = "Block Peak Response") -> None:
    """
    Heatmap of the strongest normalized bin in each block.

    Args:
        descriptor: Descriptor produced by strategy.extract()
        strategy: Strategy that produced the descriptor
        output_path: Path to save visualization
        title: Plot title
    """
    grid = descriptor.reshape(strategy.num_blocks_y, strategy.num_blocks_x, strategy.block_length)
    peak = grid.max(axis=2)

    fig, ax = plt.subplots(figsize=(strategy.num_blocks_x * 0.6 + 3, strategy.num_blocks_y * 0.5 + 2))

    sns.heatmap(
        peak,
        cmap='viridis',
        vmin=0,
        cbar_kws={'label': 'Max Bin Value'},
        ax=ax
    )

    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.set_xlabel('Block X', fontsize=12)
    ax.set_ylabel('Block Y', fontsize=12)

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close()

    print(f"✓ Saved block heatmap to {output_path}")


def visualize_feature_distribution(features: np.ndarray,
                                   output_path: Path,
                                   title: str = "Descriptor Value Distribution") -> None:
    """
    Visualize distribution of descriptor values.

    Args:
        features: Feature array (feature_dim,) or (N, feature_dim)
        output_path: Path to save visualization
        title: Plot title
    """
    features = np.atleast_2d(features)

    fig, axes = plt.subplots(1, 2, figsize=(14, 5))
    fig.suptitle(title, fontsize=16, fontweight='bold')

    axes[0].hist(features.ravel(), bins=50, edgecolor='black', alpha=0.7)
    axes[0].set_xlabel('Value')
    axes[0].set_ylabel('Frequency')
    axes[0].grid(True, alpha=0.3)

    axes[1].plot(features.mean(axis=0), linewidth=0.8)
    axes[1].set_xlabel('Feature Dimension')
    axes[1].set_ylabel('Mean Value')
    axes[1].grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close()

    print(f"✓ Saved feature distribution to {output_path}")


def create_feature_extraction_report(features: np.ndarray,
                                     strategy: FlexibleHOGStrategy,
                                     output_dir: Path,
                                     name: str = 'descriptor',
                                     signed: bool = False) -> None:
    """
    Create all visualizations for one extracted image.

    Args:
        features: Descriptor (feature_dim,) or per-window matrix (N, feature_dim);
            the block heatmap uses the last row
        strategy: Strategy used for the extraction (its cells hold the last window)
        output_dir: Directory to save visualizations
        name: Prefix for output files
        signed: Whether orientations are signed
    """
    ensure_dir(output_dir)
    output_dir = Path(output_dir)

    last = np.atleast_2d(features)[-1]

    visualize_cell_orientations(strategy, output_dir / f"{name}_cells.png", signed=signed)
    visualize_block_energy(last, strategy, output_dir / f"{name}_blocks.png")
    visualize_feature_distribution(features, output_dir / f"{name}_distribution.png")
