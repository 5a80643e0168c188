"""Tesseract OCR engine wrapper driving the ``tesseract`` executable.

Images are staged into a per-call scratch directory, passed to the engine
either directly (one image) or through a manifest file listing one image
path per line (several images), and the text written by the engine to
``<output>.txt`` is read back.
"""

import os
import shutil
import subprocess
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import BinaryIO

from src.utils.config import OCRConfig
from src.utils.logger import get_logger

from .errors import MissingOutputError, OcrEngineError, ScratchCreationError
from .scratch import ScratchSession

logger = get_logger(__name__)

ImageSource = bytes | bytearray | BinaryIO

# Tesseract appends this to the output base name it is given.
_OUTPUT_EXTENSION = ".txt"


def _copy_image(image: ImageSource, target: Path) -> None:
    """Write one image's raw bytes to ``target``, rewinding seekable streams."""
    with open(target, "wb") as out:
        if isinstance(image, (bytes, bytearray)):
            out.write(image)
            return
        if image.seekable():
            image.seek(0)
        shutil.copyfileobj(image, out)


class TesseractEngine:
    """Runs the external Tesseract executable on one or more images.

    Args:
        tesseract_dir: Tesseract installation folder, used as the working
            directory of the engine process.
        executable: Name or path of the Tesseract executable.
        tessdata_dir: Trained-data folder passed to the engine as
            ``TESSDATA_PREFIX``. Defaults to ``<tesseract_dir>/tessdata``.
        default_lang: Default OCR language code (``eng``, ``por``, ...).
        scratch_dir: Root folder for per-call scratch directories.
    """

    def __init__(
        self,
        tesseract_dir: str | None = None,
        executable: str = "tesseract",
        tessdata_dir: str | None = None,
        default_lang: str = "eng",
        scratch_dir: str | None = None,
    ) -> None:
        self.tesseract_dir = tesseract_dir
        self.executable = executable
        self.default_lang = default_lang

        if not tessdata_dir and tesseract_dir:
            tessdata_dir = str(Path(tesseract_dir) / "tessdata")
        self.tessdata_dir = tessdata_dir

        if scratch_dir:
            self.scratch_dir = Path(scratch_dir)
        else:
            self.scratch_dir = Path(tempfile.gettempdir()) / "image-to-text"

    @classmethod
    def from_config(cls, config: OCRConfig) -> "TesseractEngine":
        """Build an engine from the ``ocr`` section of the app config."""
        return cls(
            tesseract_dir=config.tesseract_dir,
            executable=config.executable,
            tessdata_dir=config.tessdata_dir,
            default_lang=config.default_lang,
            scratch_dir=config.scratch_dir,
        )

    def extract_text(
        self, images: Sequence[ImageSource], lang: str | None = None
    ) -> str:
        """Extract text from the given images in a single engine run.

        Args:
            images: Raw image bytes or binary streams, in page order.
                Streams are rewound when seekable and are not closed.
            lang: OCR language code. Defaults to the engine default.

        Returns:
            The text written by the engine, or ``""`` when no images
            are given.

        Raises:
            ScratchCreationError: If the scratch files cannot be written.
            OcrEngineError: If the engine fails or cannot be started.
            MissingOutputError: If the engine succeeds without output.
        """
        if not images:
            return ""

        lang = lang or self.default_lang

        with ScratchSession(self.scratch_dir) as session:
            input_file = session.new_file()
            output_file = session.new_file()
            try:
                self._write_input(images, session, input_file)
            except OSError as exc:
                raise ScratchCreationError(
                    f"Cannot write OCR input in {session.path}: {exc}"
                ) from exc

            self._run(input_file, output_file, lang)
            text = self._read_output(output_file)

        logger.info(
            "OCR extracted %d characters from %d image(s)", len(text), len(images)
        )
        return text

    def _write_input(
        self, images: Sequence[ImageSource], session: ScratchSession, input_file: Path
    ) -> None:
        if len(images) == 1:
            _copy_image(images[0], input_file)
            return

        # Tesseract reads a text file of image paths as a multi-page job.
        listed: list[str] = []
        for image in images:
            image_file = session.new_file()
            _copy_image(image, image_file)
            listed.append(str(image_file.resolve()))
        input_file.write_text("\n".join(listed) + "\n", encoding="utf-8")

    def _resolve_executable(self) -> str:
        if self.tesseract_dir:
            candidate = Path(self.tesseract_dir) / self.executable
            if candidate.is_file():
                return str(candidate)
        return shutil.which(self.executable) or self.executable

    def _child_env(self) -> dict[str, str]:
        env = dict(os.environ)
        if self.tessdata_dir:
            env["TESSDATA_PREFIX"] = self.tessdata_dir
        return env

    def _run(self, input_file: Path, output_file: Path, lang: str) -> None:
        command = [
            self._resolve_executable(),
            str(input_file),
            str(output_file),
            "-l",
            lang,
        ]
        logger.debug("Running %s in %s", command, self.tesseract_dir or os.getcwd())

        try:
            completed = subprocess.run(
                command,
                cwd=self.tesseract_dir,
                env=self._child_env(),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as exc:
            logger.error("Could not start OCR engine %s: %s", command[0], exc)
            raise OcrEngineError(
                f"Could not start OCR engine {command[0]}: {exc}", stderr=str(exc)
            ) from exc

        if completed.returncode != 0:
            stderr = completed.stderr.decode("utf-8", errors="replace").strip()
            logger.error(
                "OCR engine exited with code %d: %s", completed.returncode, stderr
            )
            raise OcrEngineError(
                f"OCR engine exited with code {completed.returncode}: {stderr}",
                stderr=stderr,
                returncode=completed.returncode,
            )

    def _read_output(self, output_file: Path) -> str:
        result_file = output_file.with_name(output_file.name + _OUTPUT_EXTENSION)
        try:
            return result_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise MissingOutputError(str(result_file)) from exc
