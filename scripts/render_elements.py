#!/usr/bin/env python3
"""
CLI entry point: render a JSON dump of document elements to PDF.

Usage:
    python -m scripts.render_elements elements.json -o out.pdf
    python -m scripts.render_elements elements.json --dry-run
    python -m scripts.render_elements a.json b.json --output-dir pdfs/
"""

import argparse
import json
import sys
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))


def main():
    parser = argparse.ArgumentParser(description="Pagesetter - Render document elements to PDF")
    parser.add_argument("inputs", nargs="+", help="JSON files with an element list")
    parser.add_argument("-o", "--output", help="Output PDF (single input only)")
    parser.add_argument("--output-dir", help="Directory for outputs (default: settings.output_dir)")
    parser.add_argument("--template", help="Layout template: professional | academic | minimal")
    parser.add_argument("--title", help="Running header title")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Lay out without writing and print the layout report",
    )
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    args = parser.parse_args()

    from config.logging_config import get_logger, setup_logging
    from config.settings import Settings
    from pagesetter.document import elements_from_json
    from pagesetter.exceptions import PagesetterError
    from pagesetter.pdf_engine import PdfGenerator, analyze_layout, render_batch

    overrides = {}
    if args.template:
        overrides["template"] = args.template
    if args.title:
        overrides["document_title"] = args.title
    settings = Settings(**overrides)
    setup_logging(args.log_level or settings.log_level, settings.log_file)
    logger = get_logger("pagesetter.cli")

    if args.output and len(args.inputs) > 1:
        parser.error("--output only works with a single input; use --output-dir")

    try:
        documents = [(Path(p), elements_from_json(Path(p))) for p in args.inputs]
    except PagesetterError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    if args.dry_run:
        generator = PdfGenerator(settings)
        for path, elements in documents:
            report = analyze_layout(elements, generator=generator)
            print(f"{path}:")
            print(json.dumps(report.to_dict(), indent=2))
        return

    output_dir = Path(args.output_dir) if args.output_dir else settings.output_dir
    jobs = []
    for path, elements in documents:
        output = Path(args.output) if args.output else output_dir / f"{path.stem}.pdf"
        jobs.append((elements, output))

    logger.info(f"Rendering {len(jobs)} document(s) with template {settings.template}")
    results = render_batch(jobs, settings)
    failed = [r for r in results if not r.success]

    for result in results:
        if result.success:
            print(f"{result.output_path}: {result.pages} page(s) in {result.elapsed:.2f}s")
        else:
            print(f"{result.output_path}: FAILED - {result.error}", file=sys.stderr)

    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
