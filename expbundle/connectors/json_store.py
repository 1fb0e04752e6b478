"""JSON file storage for page documents."""

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path

from expbundle.core.exceptions import StorageError
from expbundle.core.schema import Document, is_page_document

log = logging.getLogger(__name__)

INDENT = 2


def dumps_document(document: Document) -> str:
    """Serialize ``document`` the way it is written to disk."""
    return json.dumps(document, indent=INDENT, ensure_ascii=False) + "\n"


class JsonDocumentStore:
    """Load and save ExperienceBundle page documents as UTF-8 JSON.

    Documents are written with 2-space indentation and a trailing newline so
    that diffs against the source-tracked file stay reviewable. Writes go to
    a temporary file in the same directory which then replaces the target,
    so a failed save never leaves a truncated document behind.

    Example:
        >>> store = JsonDocumentStore()
        >>> doc = store.load(Path("experiences/site1/views/home.json"))
        >>> store.save(Path("experiences/site1/views/home.json"), doc)
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def load(self, path: Path) -> Document:
        """Read and decode the page document at ``path``.

        Raises:
            StorageError: If the file cannot be read, is not valid JSON, or
                has no ``regions`` list
        """
        try:
            content = path.read_text(encoding=self.encoding)
        except OSError as e:
            raise StorageError(
                f"Cannot read document: {path}",
                file_path=str(path),
                operation="load",
                reason=e.strerror or str(e),
            ) from e

        try:
            document = json.loads(content)
        except json.JSONDecodeError as e:
            raise StorageError(
                f"Invalid JSON in {path}",
                file_path=str(path),
                operation="load",
                reason=str(e),
            ) from e

        if not is_page_document(document):
            raise StorageError(
                f"Not a page document (no regions list): {path}",
                file_path=str(path),
                operation="load",
            )

        log.debug("Loaded %s with %d regions", path, len(document["regions"]))
        return document

    def save(self, path: Path, document: Document) -> None:
        """Write ``document`` to ``path``, replacing the file atomically.

        Raises:
            StorageError: If the document cannot be serialized or written
        """
        try:
            content = dumps_document(document)
        except (TypeError, ValueError) as e:
            raise StorageError(
                "Document is not JSON serializable",
                file_path=str(path),
                operation="save",
                reason=str(e),
            ) from e

        tmp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding=self.encoding,
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(content)
            if path.exists():
                shutil.copymode(path, tmp_name)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(
                f"Cannot write document: {path}",
                file_path=str(path),
                operation="save",
                reason=e.strerror or str(e),
            ) from e

        log.debug("Saved %s", path)
