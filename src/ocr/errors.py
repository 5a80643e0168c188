"""Exceptions raised while running the external OCR engine."""


class OCRError(Exception):
    """Base class for all OCR invocation failures."""


class ScratchCreationError(OCRError):
    """The scratch directory could not be created or written to."""


class OcrEngineError(OCRError):
    """The OCR engine exited with a non-zero code or could not be started.

    Args:
        message: Human readable description, including the engine's stderr.
        stderr: Captured standard error of the engine process.
        returncode: Exit code of the process, or ``None`` if it never ran.
    """

    def __init__(
        self, message: str, stderr: str = "", returncode: int | None = None
    ) -> None:
        super().__init__(message)
        self.stderr = stderr
        self.returncode = returncode


class MissingOutputError(OCRError):
    """The engine reported success but its output file is missing."""

    def __init__(self, output_path: str) -> None:
        super().__init__(f"OCR output file not found: {output_path}")
        self.output_path = output_path
