"""Shared test fixtures for tokensync tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from tokensync.contracts.document import Document
from tokensync.hosts.memory import MemoryHost


def _color(hex_value: str) -> dict[str, Any]:
    return {"$type": "color", "$value": hex_value, "$scopes": ["ALL_SCOPES"]}


@pytest.fixture
def host() -> MemoryHost:
    return MemoryHost()


@pytest.fixture
def sample_payload() -> list[dict[str, Any]]:
    """Two collections; the first aliases into the second, which is listed later."""
    return [
        {
            "Semantic": {
                "modes": {
                    "Light": {
                        "text": {
                            "primary": {"$type": "color", "$value": "{colors.blue}", "$collectionName": "Primitives"},
                        }
                    },
                    "Dark": {
                        "text": {
                            "primary": {"$type": "color", "$value": "{colors.white}", "$collectionName": "Primitives"},
                        }
                    },
                }
            }
        },
        {
            "Primitives": {
                "modes": {
                    "Default": {
                        "colors": {"blue": _color("#0066ff"), "white": _color("#ffffff")},
                        "spacing": {"sm": {"$type": "float", "$value": 4, "$description": "Small gap"}},
                    }
                }
            }
        },
    ]


@pytest.fixture
def sample_document(sample_payload: list[dict[str, Any]]) -> Document:
    return Document.from_wire(sample_payload)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "tokensync.json"
    path.write_text(json.dumps({"host": "memory", "store_path": "store.json"}), encoding="utf-8")
    return path


@pytest.fixture
def document_file(tmp_path: Path, sample_payload: list[dict[str, Any]]) -> Path:
    path = tmp_path / "tokens.json"
    path.write_text(json.dumps(sample_payload), encoding="utf-8")
    return path
