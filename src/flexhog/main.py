"""
Main HOG feature extraction pipeline.
Extracts flexible-cell HOG descriptors for a directory of images.
"""
import sys
import json
import argparse
from pathlib import Path
from typing import Dict, Optional, Tuple
import numpy as np
from tqdm import tqdm

from .geometry import sliding_windows
from .hog_extractor import HOGExtractor
from .utils import (
    load_config,
    collect_image_paths,
    image_generator,
    save_features,
    check_cache_exists,
    ensure_dir,
    summarize_features
)
from . import visualization as feat_vis


def extract_features_for_image(image: np.ndarray,
                               extractor: HOGExtractor,
                               window: Optional[Tuple[int, int]] = None,
                               stride: int = 8) -> np.ndarray:
    """
    Extract descriptors for one image.

    Args:
        image: Input image
        extractor: HOG extractor instance
        window: Optional sliding window size (width, height); None = whole image
        stride: Sliding window stride in pixels

    Returns:
        Descriptor (feature_dim,) or matrix (num_windows, feature_dim)
    """
    if window is None:
        return extractor.extract(image)

    height, width = image.shape[:2]
    regions = list(sliding_windows((width, height), window, stride))
    return extractor.extract_windows(image, regions)


def run_feature_extraction_pipeline(config_path: Path,
                                    input_dir: Optional[Path] = None,
                                    output_dir: Optional[Path] = None,
                                    window: Optional[Tuple[int, int]] = None,
                                    stride: int = 8,
                                    use_cache: bool = True,
                                    visualize: bool = False) -> Dict:
    """
    Run the complete feature extraction pipeline.

    Args:
        config_path: Path to config.yaml
        input_dir: Directory of images (defaults to data.input_dir)
        output_dir: Directory for features (defaults to data.features_dir)
        window: Optional sliding window size (width, height)
        stride: Sliding window stride in pixels
        use_cache: Skip images whose features already exist
        visualize: Write descriptor visualizations per image

    Returns:
        Dictionary with extraction statistics
    """
    config = load_config(config_path)
    data_config = config.get('data', {})

    input_dir = Path(input_dir or data_config.get('input_dir', 'data/images'))
    output_dir = Path(output_dir or data_config.get('features_dir', 'data/features'))

    extractor = HOGExtractor.from_config(config)

    print("\n" + "=" * 60)
    print("HOG Feature Extraction Pipeline")
    print("=" * 60)
    print(f"Images: {input_dir}")
    print(f"Features output: {output_dir}")
    print(f"Cells per window: {extractor.num_cells}")
    print(f"Feature dimension: {extractor.get_feature_dim()}")
    if window is not None:
        print(f"Sliding window: {window[0]}x{window[1]}, stride {stride}")
    print("=" * 60)

    image_paths = collect_image_paths(input_dir)
    if len(image_paths) == 0:
        print(f"⚠️  No images found in {input_dir}")
        return {'num_images': 0, 'processed': 0, 'failed': 0, 'cached': 0}

    print(f"Found {len(image_paths)} images")
    ensure_dir(output_dir)

    if use_cache:
        pending = [p for p in image_paths if not check_cache_exists(output_dir, p.stem)]
        cached_count = len(image_paths) - len(pending)
        if cached_count:
            print(f"✓ Skipping {cached_count} images with cached features")
    else:
        pending = image_paths
        cached_count = 0

    processed_count = 0
    failed_count = 0
    per_image = {}

    for img, img_path in tqdm(image_generator(pending), total=len(pending), desc="Extracting"):
        try:
            features = extract_features_for_image(img, extractor, window, stride)
        except (ValueError, RuntimeError) as e:
            print(f"Warning: Failed to extract features from {img_path}: {e}")
            failed_count += 1
            continue

        save_features(features, output_dir, img_path.stem)
        per_image[img_path.name] = {
            'shape': list(features.shape),
            **summarize_features(features)
        }
        processed_count += 1

        if visualize and features.size > 0:
            feat_vis.create_feature_extraction_report(
                features,
                extractor.strategy,
                output_dir / "visualization",
                name=img_path.stem,
                signed=extractor.gradients.signed
            )

    # Unreadable files are dropped by the generator
    failed_count += len(pending) - processed_count - failed_count

    stats = {
        'num_images': len(image_paths),
        'processed': processed_count,
        'failed': failed_count,
        'cached': cached_count,
        'feature_dim': extractor.get_feature_dim(),
        'window': list(window) if window is not None else None,
        'stride': stride if window is not None else None,
        'images': per_image
    }

    stats_path = output_dir / "extraction_stats.json"
    with open(stats_path, 'w') as f:
        json.dump(stats, f, indent=2, default=str)

    print("\n" + "=" * 60)
    print("Feature Extraction Complete!")
    print("=" * 60)
    print(f"  - Processed: {processed_count}")
    print(f"  - Failed: {failed_count}")
    print(f"  - Cached: {cached_count}")
    print(f"Statistics saved to: {stats_path}")
    print("=" * 60)

    return stats


def main(argv=None):
    """Main entry point for feature extraction."""
    parser = argparse.ArgumentParser(description='Extract flexible-cell HOG descriptors from images')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to config.yaml')
    parser.add_argument('--input', type=str, default=None,
                        help='Image directory (overrides data.input_dir)')
    parser.add_argument('--output', type=str, default=None,
                        help='Features directory (overrides data.features_dir)')
    parser.add_argument('--window', type=int, nargs=2, default=None, metavar=('W', 'H'),
                        help='Sliding window size in pixels (default: whole image)')
    parser.add_argument('--stride', type=int, default=8,
                        help='Sliding window stride in pixels')
    parser.add_argument('--no-cache', action='store_true',
                        help='Disable cache (re-extract all features)')
    parser.add_argument('--visualize', action='store_true',
                        help='Save descriptor visualizations')

    args = parser.parse_args(argv)

    config_path = Path(args.config)
    if not config_path.exists():
        print(f"Error: Config file not found: {config_path}")
        sys.exit(1)

    run_feature_extraction_pipeline(
        config_path,
        input_dir=Path(args.input) if args.input else None,
        output_dir=Path(args.output) if args.output else None,
        window=tuple(args.window) if args.window else None,
        stride=args.stride,
        use_cache=not args.no_cache,
        visualize=args.visualize
    )


if __name__ == "__main__":
    main()
