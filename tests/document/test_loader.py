"""Tests for the document loader."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from tokensync.contracts.exceptions import DocumentLoadError
from tokensync.document.loader import DocumentLoader


def test_load_document_file(document_file: Path) -> None:
    document = DocumentLoader().load(document_file)

    assert [entry.name for entry in document.collections] == ["Semantic", "Primitives"]
    assert document.styles is None


def test_load_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(DocumentLoadError, match="document not found"):
        DocumentLoader().load(tmp_path / "missing.json")


def test_load_non_utf8_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "tokens.json"
    path.write_bytes(b'[{"Primitives": {"modes": {}}}]\xff')

    with pytest.raises(DocumentLoadError, match="failed to read document"):
        DocumentLoader().load(path)


def test_parse_invalid_json_raises() -> None:
    with pytest.raises(DocumentLoadError, match="invalid JSON input"):
        DocumentLoader().parse("[{")


def test_parse_plain_object_is_rejected() -> None:
    with pytest.raises(DocumentLoadError, match="JSON array"):
        DocumentLoader().parse(json.dumps({"name": "not tokens"}))


def test_parse_reads_styles_entry(sample_payload: list[dict[str, Any]]) -> None:
    payload = [*sample_payload, {"_styles": {"colorStyles": [{"name": "Brand", "color": "#0066ff"}]}}]

    document = DocumentLoader().parse(json.dumps(payload))

    assert document.styles is not None
    assert document.styles.count() == 1


def test_parse_detects_w3c_tokens() -> None:
    payload = {
        "Primitives": {
            "blue": {"$type": "color", "$value": "#0066ff"},
            "gap": {"$type": "dimension", "$value": 8},
        }
    }

    document = DocumentLoader().parse(json.dumps(payload))

    entry = document.collections[0]
    assert entry.name == "Primitives"
    assert entry.mode_names == ["Default"]
    assert [path for path, _record in entry.iter_paths()] == ["blue", "gap"]
