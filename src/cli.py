"""Command-line interface for image-to-text extraction and CSV export.

Provides subcommands for extracting the text of one document (one or
more page images) and for batch processing a folder of images.
"""

import argparse
import csv
import sys
import time
from pathlib import Path

from src.ocr.document_processor import DocumentProcessor
from src.ocr.errors import OCRError
from src.utils.config import load_config
from src.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

_SUPPORTED_EXTENSIONS = ("*.png", "*.jpg", "*.jpeg", "*.tiff", "*.tif", "*.bmp", "*.gif")
_COLUMNS = [
    "filename",
    "status",
    "characters",
    "processing_time_s",
    "error",
    "text",
]


def _find_images(input_dir: Path) -> list[Path]:
    """Find all supported image files in a directory.

    Args:
        input_dir: Directory to scan for images.

    Returns:
        Sorted list of image file paths.
    """
    files: list[Path] = []
    for ext in _SUPPORTED_EXTENSIONS:
        files.extend(input_dir.glob(ext))
        files.extend(input_dir.glob(ext.upper()))
    return sorted(set(files))


def process_folder(
    input_dir: Path,
    output_csv: Path,
    lang: str | None = None,
    verbose: bool = False,
    config_path: Path | None = None,
) -> dict[str, int]:
    """OCR every image in a folder separately and export results to CSV.

    Args:
        input_dir: Directory containing image files.
        output_csv: Path for the output CSV file.
        lang: OCR language code. Defaults to the configured language.
        verbose: Whether to print per-file progress.
        config_path: Optional YAML configuration file.

    Returns:
        Summary dict with total, successful, and failed counts.
    """
    files = _find_images(input_dir)
    if not files:
        logger.warning("No images found in %s", input_dir)
        return {"total": 0, "successful": 0, "failed": 0}

    config = load_config(config_path)
    processor = DocumentProcessor(config)

    logger.info("Found %d images to process", len(files))

    results: list[dict[str, object]] = []
    successful = 0
    failed = 0

    for i, file_path in enumerate(files, 1):
        if verbose:
            print(f"Processing [{i}/{len(files)}]: {file_path.name}")

        start_time = time.time()
        try:
            doc_result = processor.process([file_path], lang=lang)
            results.append(
                {
                    "filename": file_path.name,
                    "status": "success",
                    "characters": len(doc_result.text),
                    "processing_time_s": round(time.time() - start_time, 2),
                    "error": None,
                    "text": doc_result.text.strip(),
                }
            )
            successful += 1
        except Exception as exc:
            logger.error("Failed to process %s: %s", file_path.name, exc)
            results.append(
                {
                    "filename": file_path.name,
                    "status": "failed",
                    "processing_time_s": round(time.time() - start_time, 2),
                    "error": str(exc),
                }
            )
            failed += 1

    _write_csv(results, output_csv)
    logger.info("Results written to %s", output_csv)

    summary = {"total": len(files), "successful": successful, "failed": failed}
    _print_summary(summary, output_csv)
    return summary


def _write_csv(results: list[dict[str, object]], output_path: Path) -> None:
    """Write extraction results to a CSV file.

    Args:
        results: List of result dictionaries.
        output_path: Path for the output CSV file.
    """
    if not results:
        return

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=_COLUMNS, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(results)


def _print_summary(summary: dict[str, int], output_csv: Path) -> None:
    """Print batch processing summary to stdout.

    Args:
        summary: Counts of total, successful, and failed images.
        output_csv: Path to the output CSV.
    """
    print(f"\n{'=' * 50}")
    print("Batch Processing Complete")
    print(f"{'=' * 50}")
    print(f"Total:      {summary['total']}")
    print(f"Successful: {summary['successful']}")
    print(f"Failed:     {summary['failed']}")
    print(f"Output:     {output_csv}")


def extract_document(
    files: list[Path],
    lang: str | None = None,
    config_path: Path | None = None,
) -> str:
    """OCR the given page images as one document and return its text.

    Args:
        files: Page images, in order.
        lang: OCR language code. Defaults to the configured language.
        config_path: Optional YAML configuration file.

    Returns:
        The extracted text.
    """
    config = load_config(config_path)
    processor = DocumentProcessor(config)
    return processor.process(files, lang=lang).text


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="Image to text via the Tesseract OCR engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-c", "--config", type=Path, default=None, help="YAML configuration file"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    single_parser = subparsers.add_parser(
        "extract", help="Extract the text of one document"
    )
    single_parser.add_argument(
        "files", type=Path, nargs="+", help="Page images of the document, in order"
    )
    single_parser.add_argument("-l", "--lang", help="OCR language (e.g. eng, por)")
    single_parser.add_argument("-o", "--output", type=Path, help="Output text file")

    batch_parser = subparsers.add_parser("batch", help="Process a folder of images")
    batch_parser.add_argument("input_dir", type=Path, help="Input directory with images")
    batch_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("results.csv"),
        help="Output CSV file (default: results.csv)",
    )
    batch_parser.add_argument("-l", "--lang", help="OCR language (e.g. eng, por)")
    batch_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )

    args = parser.parse_args(argv)

    setup_logging()

    if args.command == "batch":
        if not args.input_dir.is_dir():
            print(f"Error: {args.input_dir} is not a directory", file=sys.stderr)
            sys.exit(1)
        process_folder(
            args.input_dir,
            args.output,
            args.lang,
            args.verbose,
            args.config,
        )
    elif args.command == "extract":
        missing = [f for f in args.files if not f.is_file()]
        if missing:
            print(f"Error: {missing[0]} does not exist", file=sys.stderr)
            sys.exit(1)
        try:
            text = extract_document(args.files, args.lang, args.config)
        except OCRError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)
        if args.output:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(text, encoding="utf-8")
            print(f"Output written to {args.output}")
        else:
            print(text)
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":
    main()
