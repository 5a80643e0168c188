"""Document-level entry point for image-to-text extraction.

Opens image files (or takes in-memory images) and hands them to the
Tesseract engine as a single, ordered multi-page request.
"""

from collections.abc import Sequence
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path

from src.utils.config import AppConfig
from src.utils.logger import get_logger

from .tesseract_engine import TesseractEngine

logger = get_logger(__name__)


@dataclass
class DocumentResult:
    """Extraction result for one document made of one or more images."""

    source_files: list[str]
    page_count: int
    text: str


class DocumentProcessor:
    """End-to-end image-to-text processing.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self.ocr_engine = TesseractEngine.from_config(config.ocr)

    def process(
        self, paths: Sequence[Path], lang: str | None = None
    ) -> DocumentResult:
        """Extract the text of the given image files, in order.

        Args:
            paths: Image files making up the document, one per page.
            lang: OCR language code. Defaults to the configured language.

        Returns:
            The combined document text.

        Raises:
            FileNotFoundError: If any of the files does not exist.
        """
        paths = [Path(p) for p in paths]
        for path in paths:
            if not path.is_file():
                raise FileNotFoundError(f"Image file not found: {path}")

        logger.info("Processing document: %s", ", ".join(p.name for p in paths))
        with ExitStack() as stack:
            streams = [stack.enter_context(open(p, "rb")) for p in paths]
            text = self.ocr_engine.extract_text(streams, lang=lang)

        return DocumentResult(
            source_files=[p.name for p in paths],
            page_count=len(paths),
            text=text,
        )

    def process_bytes(
        self,
        images: Sequence[bytes],
        filename: str = "document",
        lang: str | None = None,
    ) -> DocumentResult:
        """Extract the text of in-memory images, in order.

        Args:
            images: Raw image bytes, one entry per page.
            filename: Display name for the source document.
            lang: OCR language code. Defaults to the configured language.

        Returns:
            The combined document text.
        """
        logger.info("Processing document: %s", filename)
        text = self.ocr_engine.extract_text(list(images), lang=lang)
        return DocumentResult(
            source_files=[filename],
            page_count=len(images),
            text=text,
        )
