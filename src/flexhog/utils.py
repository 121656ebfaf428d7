"""
Utility functions for HOG feature extraction.
Config loading, image loading and feature persistence.
"""
from pathlib import Path
from typing import Dict, Generator, List, Optional, Tuple
import numpy as np
import cv2
import yaml

IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.bmp', '.tif', '.tiff', '.npy')


def load_config(config_path: Path) -> dict:
    """Load configuration from YAML file."""
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    with open(config_path, 'r') as f:
        return yaml.safe_load(f) or {}


def load_image(image_path: Path) -> Optional[np.ndarray]:
    """
    Load an image from file path.

    .npy files are loaded as float32 arrays (0-1 range expected); other
    files are read with OpenCV in BGR order.

    Args:
        image_path: Path to image file

    Returns:
        Image as numpy array or None if loading fails
    """
    image_path = Path(image_path)
    if not image_path.exists():
        return None

    if image_path.suffix == '.npy':
        try:
            return np.load(str(image_path)).astype(np.float32)
        except (OSError, ValueError) as e:
            print(f"Warning: Failed to load {image_path}: {e}")
            return None

    img = cv2.imread(str(image_path))
    if img is None:
        print(f"Warning: Failed to load {image_path}")
    return img


def collect_image_paths(data_dir: Path) -> List[Path]:
    """
    Collect all image paths under a directory (recursively, sorted).

    Args:
        data_dir: Directory containing images

    Returns:
        List of image paths
    """
    data_dir = Path(data_dir)
    if not data_dir.exists():
        return []
    return sorted(p for p in data_dir.rglob('*')
                  if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS)


def image_generator(image_paths: List[Path]) -> Generator[Tuple[np.ndarray, Path], None, None]:
    """
    Generator that yields images one at a time for memory efficiency.

    Args:
        image_paths: List of image file paths

    Yields:
        Tuple of (image, image_path)
    """
    for img_path in image_paths:
        img = load_image(img_path)
        if img is not None:
            yield img, img_path


def ensure_dir(path: Path) -> None:
    """Ensure directory exists."""
    Path(path).mkdir(parents=True, exist_ok=True)


def save_features(features: np.ndarray, output_dir: Path, name: str) -> Path:
    """
    Save extracted features to a .npy file.

    Args:
        features: Feature array (feature_dim,) or (N, feature_dim)
        output_dir: Output directory
        name: Base name (file is <name>_features.npy)

    Returns:
        Path of the written file
    """
    ensure_dir(output_dir)
    features_file = Path(output_dir) / f"{name}_features.npy"
    np.save(str(features_file), features.astype(np.float32))
    return features_file


def load_features(output_dir: Path, name: str) -> np.ndarray:
    """
    Load features saved by save_features.

    Args:
        output_dir: Directory containing feature files
        name: Base name used when saving
    """
    features_file = Path(output_dir) / f"{name}_features.npy"
    if not features_file.exists():
        raise FileNotFoundError(f"Features file not found: {features_file}")
    return np.load(str(features_file))


def check_cache_exists(output_dir: Path, name: str) -> bool:
    """Check if cached features exist."""
    return (Path(output_dir) / f"{name}_features.npy").exists()


def summarize_features(features: np.ndarray) -> Dict[str, float]:
    """
    Calculate descriptor statistics.

    Args:
        features: Feature array of any shape

    Returns:
        Dictionary with min, max, mean, std and fraction of zero values
    """
    if features.size == 0:
        return {'min': 0.0, 'max': 0.0, 'mean': 0.0, 'std': 0.0, 'zero_fraction': 0.0}
    return {
        'min': float(np.min(features)),
        'max': float(np.max(features)),
        'mean': float(np.mean(features)),
        'std': float(np.std(features)),
        'zero_fraction': float(np.mean(features == 0)),
    }
