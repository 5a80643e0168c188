"""Per-invocation scratch directories for staging OCR input and output.

Each session lives in a randomly named directory under a scratch root and
is removed recursively when the ``with`` block exits.
"""

import shutil
import uuid
from pathlib import Path
from types import TracebackType

from src.utils.logger import get_logger

from .errors import ScratchCreationError

logger = get_logger(__name__)


def _unique_name() -> str:
    return uuid.uuid4().hex


class ScratchSession:
    """A uniquely named working directory owned by a single OCR call.

    Args:
        root: Directory under which the session directory is created.
            Missing parents are created as well.
    """

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)
        self.path = self.root / _unique_name()

    def __enter__(self) -> "ScratchSession":
        try:
            self.path.mkdir(parents=True)
        except OSError as exc:
            raise ScratchCreationError(
                f"Cannot create scratch directory {self.path}: {exc}"
            ) from exc
        logger.debug("Created scratch directory %s", self.path)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cleanup()

    def new_file(self) -> Path:
        """Return a fresh, not yet created file path inside the session."""
        return self.path / _unique_name()

    def cleanup(self) -> None:
        """Remove the session directory, logging instead of raising on failure."""
        try:
            shutil.rmtree(self.path)
        except FileNotFoundError:
            return
        except OSError as exc:
            logger.warning("Failed to remove scratch directory %s: %s", self.path, exc)
        else:
            logger.debug("Removed scratch directory %s", self.path)
