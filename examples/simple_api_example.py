#!/usr/bin/env python3
"""
Example of the image_keeper API.

Reads a rendered template, substitutes its dynamic images and writes the result.
"""

import sys
from pathlib import Path

from image_keeper import ImagePostprocessor, ProcessingOptions, read_package, write_package


def main(argv):
    """Postprocess the images of one rendered document."""
    if len(argv) < 2:
        print("usage: simple_api_example.py RENDERED.docx [OUTPUT.docx]")
        return 1

    source = Path(argv[1])
    target = Path(argv[2]) if len(argv) > 2 else source.with_name(f"{source.stem}_images{source.suffix}")

    # 1. Read the package
    print("📄 Reading package...")
    package = read_package(source)
    print(f"   Parts: {len(package)}, embeddings: {len(package.embeddings)}")

    # 2. Substitute dynamic images, rendering QR codes and inlining local files
    print("⚙️  Substituting images...")
    options = ProcessingOptions(materialize_media=True)
    report = ImagePostprocessor(options).execute(package)
    for key, value in report.to_dict().items():
        print(f"   {key}: {value}")

    # 3. Write the result
    write_package(package, target)
    print(f"   ✅ Saved: {target}")

    for error in report.errors:
        print(f"   ❌ {error}")
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main(sys.argv))
