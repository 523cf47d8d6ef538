"""Whole-document read and write for storyboard edits."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

from scriptboard.config import get_logger
from scriptboard.exceptions import ScriptBoardError, ScriptBoardFileNotFoundError
from scriptboard.parser.segmenter import Block, segment, serialize

logger = get_logger(__name__)

BlockOperation = Callable[..., list[Block]]


class ScriptDocument:
    """A script file on disk, always read and written in full."""

    def __init__(self, path: Path | str) -> None:
        """Initialize the document.

        Args:
            path: Location of the script file.
        """
        self.path = Path(path)

    @property
    def name(self) -> str:
        """File name without extension, used as a fallback title."""
        return self.path.stem

    def read(self) -> str:
        """Read the full document text.

        Raises:
            ScriptBoardFileNotFoundError: If the file does not exist.
        """
        if not self.path.exists():
            raise ScriptBoardFileNotFoundError(
                message=f"Script not found: {self.path}",
                hint="Check the path, or create one with 'scriptboard new'",
                details={"path": str(self.path)},
            )
        # newline="" keeps CRLF line endings intact through a rewrite
        with self.path.open(encoding="utf-8", newline="") as f:
            return f.read()

    def write(self, text: str) -> None:
        """Replace the document contents with ``text``."""
        try:
            with self.path.open("w", encoding="utf-8", newline="") as f:
                f.write(text)
        except OSError as e:
            raise ScriptBoardError(
                message=f"Failed to write script: {self.path}",
                hint="Check that the file is writable",
                details={"path": str(self.path), "error": str(e)},
            ) from e
        logger.debug("Wrote script", path=str(self.path), chars=len(text))


class BoardDocument:
    """Apply block operations to a script file.

    Every call is a full read, segment, mutate, serialize and write. There is
    no locking; a concurrent writer's changes are overwritten.
    """

    def __init__(self, document: ScriptDocument | Path | str) -> None:
        """Initialize around a script document or a path to one."""
        if not isinstance(document, ScriptDocument):
            document = ScriptDocument(document)
        self.document = document

    def blocks(self) -> list[Block]:
        """Segment the current document contents."""
        return segment(self.document.read())

    def apply(
        self, operation: BlockOperation, *args: Any, **kwargs: Any
    ) -> list[Block]:
        """Run ``operation`` over the current blocks and persist the result.

        Args:
            operation: A function from ``scriptboard.board.operations``.
            *args: Positional arguments after the block list.
            **kwargs: Keyword arguments for the operation.

        Returns:
            The block list that was written.
        """
        blocks = operation(self.blocks(), *args, **kwargs)
        self.document.write(serialize(blocks))
        logger.info(
            "Applied block operation",
            operation=getattr(operation, "__name__", repr(operation)),
            path=str(self.document.path),
            blocks=len(blocks),
        )
        return blocks
