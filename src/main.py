"""Demo entry point: print the text of the ``image.png`` next to this program."""

from pathlib import Path

from src.ocr.tesseract_engine import TesseractEngine
from src.utils.config import load_config
from src.utils.logger import setup_logging

BIN_PATH = Path(__file__).resolve().parent


def convert_image_to_text(path: Path, config_path: Path | None = None) -> str:
    """OCR a single image file using the configured Tesseract installation."""
    config = load_config(config_path)
    ocr = config.ocr
    if not ocr.scratch_dir:
        ocr = ocr.model_copy(update={"scratch_dir": str(BIN_PATH / "output")})
    engine = TesseractEngine.from_config(ocr)
    with open(path, "rb") as stream:
        return engine.extract_text([stream])


def main() -> None:
    """Print the extracted text and wait for the user before exiting."""
    config = load_config()
    setup_logging(config.log_level)
    text = convert_image_to_text(BIN_PATH / "image.png")
    print(text)

    print("\nEnter any key to exit.")
    input()


if __name__ == "__main__":
    main()
