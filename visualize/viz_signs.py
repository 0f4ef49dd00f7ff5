"""
Visualize Sign Analysis

Standalone script to test and visualize the sign analysis stages.

Usage:
    python viz_signs.py <image_or_directory>
"""

import sys
from pathlib import Path
from typing import List

import cv2

sys.path.append(str(Path(__file__).parent.parent))

from pipeline import SignAnalysisPipeline
from sign_analysis import SignAnalysisError
from sign_loading import IMAGE_EXTENSIONS, load_image


def find_images(directory: Path, output_dir: Path) -> List[Path]:
    """Sign images below directory, skipping earlier results in output_dir."""
    return sorted(p for p in directory.rglob('*')
                  if p.suffix.lower() in IMAGE_EXTENSIONS and output_dir not in p.parents)


def main():
    if len(sys.argv) < 2:
        print("Usage: python viz_signs.py <image_or_directory>")
        sys.exit(1)

    target = Path(sys.argv[1])
    if not target.exists():
        print(f"Error: Path does not exist: {target}")
        sys.exit(1)

    # Find images
    if target.is_dir():
        output_dir = target / "viz_signs"
        image_paths = find_images(target, output_dir)
    else:
        image_paths = [target]
        output_dir = target.parent / "viz_signs"

    output_dir.mkdir(exist_ok=True)

    pipeline = SignAnalysisPipeline()

    print(f"Found {len(image_paths)} image(s) to process\n")

    for idx, image_path in enumerate(image_paths, 1):
        try:
            features = pipeline.process_image(load_image(image_path))
        except SignAnalysisError as e:
            print(f"[{idx}/{len(image_paths)}] Skipping {image_path.name}: {e}")
            continue

        grid_path = output_dir / f"{image_path.stem}_analysis.jpg"
        cv2.imwrite(str(grid_path), pipeline.visualize_results(features))

        vector = ", ".join(f"{v:.2f}" for v in features.feature_vector)
        print(f"[{idx}/{len(image_paths)}] {image_path.name}: {features.shape.name} "
              f"{features.color.scheme.name} [{vector}]. Saved {grid_path.name}")

    print(f"\nResults saved to: {output_dir}")


if __name__ == "__main__":
    main()
