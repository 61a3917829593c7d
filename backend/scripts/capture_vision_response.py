#!/usr/bin/env python3
"""
Capture Vision API responses for label images.

This script calls the real Vision API and saves the raw
``images:annotate`` response as JSON, allowing tests (and
VISION_FIXTURE replay) to run without making API calls.

Usage:
    python scripts/capture_vision_response.py ../test-images/label1.jpeg
    # Creates: tests/fixtures/vision_responses/label1_jpeg.json
"""

import argparse
import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from savemywines.services.field_extractor import extract
from savemywines.services.vision import VisionAnnotations, VisionService, VisionServiceError


def sanitize_filename(path: Path) -> str:
    """Convert image filename to safe fixture name."""
    # label1.jpeg -> label1_jpeg
    name = path.name
    name = name.replace(".", "_").replace("-", "_")
    return name


def capture_response(image_path: Path, output_dir: Path) -> Path:
    """Capture Vision API response for an image."""
    if not image_path.exists():
        raise FileNotFoundError(f"Image not found: {image_path}")

    with open(image_path, "rb") as f:
        image_bytes = f.read()

    print(f"Annotating {image_path.name}...")
    payload = VisionService().annotate_raw(image_bytes)

    output_dir.mkdir(parents=True, exist_ok=True)
    output_file = output_dir / f"{sanitize_filename(image_path)}.json"

    with open(output_file, "w") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)

    annotations = VisionAnnotations.from_response(payload)
    fields = extract(annotations.full_text, annotations.label_descriptions)
    print(f"Saved to {output_file}")
    print(f"  Text lines: {len(annotations.full_text.splitlines())}")
    print(f"  Labels: {', '.join(annotations.label_descriptions) or '-'}")
    print(f"  Extracted: name={fields.name!r} producer={fields.producer!r} "
          f"varietal={fields.varietal!r} vintage={fields.vintage}")

    return output_file


def main():
    parser = argparse.ArgumentParser(
        description="Capture Vision API responses for label images"
    )
    parser.add_argument(
        "image",
        type=Path,
        help="Path to image file"
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path(__file__).parent.parent / "tests" / "fixtures" / "vision_responses",
        help="Output directory for fixtures"
    )

    args = parser.parse_args()

    try:
        output_file = capture_response(args.image, args.output_dir)
        print(f"\nCapture complete: {output_file}")
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except VisionServiceError as e:
        print(f"Error capturing response: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
