"""Load a document from JSON text or files on disk."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from tokensync.codec.w3c import is_w3c_payload, w3c_to_document
from tokensync.contracts.document import Document
from tokensync.contracts.exceptions import DocumentLoadError


class DocumentLoader:
    """Parses the document wire format, accepting W3C design tokens as well."""

    def load(self, path: Path) -> Document:
        """Read and parse the document at *path*.

        Raises:
            DocumentLoadError: If the file is missing, unreadable, not JSON, or
                does not match either accepted shape.
        """
        if not path.exists():
            raise DocumentLoadError(f"document not found: {path}")
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentLoadError(f"failed to read document: {exc}") from exc
        return self.parse(text)

    def parse(self, text: str) -> Document:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DocumentLoadError(f"invalid JSON input: {exc}") from exc
        return self.from_payload(payload)

    def from_payload(self, payload: Any) -> Document:
        if is_w3c_payload(payload):
            return w3c_to_document(payload)
        if isinstance(payload, dict):
            raise DocumentLoadError("document must be a JSON array of collection entries or a W3C token file")
        return Document.from_wire(payload)
