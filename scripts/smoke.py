# scripts/smoke.py
"""
Smoke test script for the ristream expand pipeline.

Usage
-----
1. Expand the built-in sample scene:
    $ python scripts/smoke.py

2. Expand a local RIB file:
    $ python scripts/smoke.py --file scenes/forest.rib
"""

import argparse
import logging
import sys
import traceback
from pathlib import Path

from dotenv import load_dotenv

from ristream.pipelines.expand import run_expand

# --------------------------------------------------------------------------- #
# Environment Setup
# --------------------------------------------------------------------------- #
env_path = Path(".env")
if env_path.exists():
    load_dotenv(env_path)
    print("Loaded .env file")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

# --------------------------------------------------------------------------- #
# Test Data
# --------------------------------------------------------------------------- #
DEFAULT_RIB = """\
##RenderMan RIB
ArchiveBegin "tree"
  AttributeBegin
    Cylinder 0.1 0 2 360
    ReadArchive "leaves"
  AttributeEnd
ArchiveEnd
ArchiveBegin "leaves"
  Sphere 0.5 -0.5 0.5 360
ArchiveEnd
ObjectBegin "rock"
  Sphere 0.3 -0.3 0.3 360
ObjectEnd
WorldBegin
  ReadArchive "tree"
  Translate 2 0 0
  ReadArchive "tree"
  ObjectInstance "rock"
  ReadArchive "ground.rib"
WorldEnd
"""


def main() -> None:
    """Execute the smoke test workflow."""
    parser = argparse.ArgumentParser(description="Run ristream smoke test")
    parser.add_argument("--file", "-f", type=str, help="Path to an input RIB file")
    args = parser.parse_args()

    if args.file:
        input_path = Path(args.file)
        if not input_path.exists():
            print(f"File not found: {input_path}")
            return
        print(f"\nUsing input file: {input_path}")
        text = input_path.read_text(encoding="utf-8")
    else:
        print("\nUsing built-in sample scene (no --file provided)")
        text = DEFAULT_RIB

    try:
        result = run_expand(text)
    except Exception as exc:
        print(f"\nPipeline crashed: {exc}")
        traceback.print_exc()
        return

    print("\n" + "=" * 60)
    print(f"Expanded {result['requests']} requests")
    print("=" * 60)
    print(result["rib"], end="")

    snap = result["snapshot"]
    print("\nCached streams:")
    for kind in ("archives", "objects"):
        for entry in snap[kind]:
            print(f"  - {kind[:-1]} {entry['name']!r}: {entry['commands']} commands")

    if result["errors"]:
        print("\nProblems:")
        for err in result["errors"]:
            print(f"  - [{err['code']}] {err['message']}")


if __name__ == "__main__":
    main()
