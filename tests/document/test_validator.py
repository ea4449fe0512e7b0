"""Tests for plan tier validation and dependency checks."""

from __future__ import annotations

from typing import Any

import pytest

from tokensync.contracts.document import Document
from tokensync.contracts.plan import FontRef, PlanTier, StoreShape
from tokensync.contracts.values import VariableType
from tokensync.document.validator import (
    PlanValidator,
    check_fonts,
    check_libraries,
    detect_tier,
    font_dependencies,
    library_dependencies,
    limits_for,
    measure_store,
)
from tokensync.hosts.memory import MemoryHost


def _flat_collection(name: str, variables: int, modes: int = 1) -> dict[str, Any]:
    tree = {f"v{index}": {"$type": "float", "$value": index} for index in range(variables)}
    return {name: {"modes": {f"Mode {index + 1}": tree for index in range(modes)}}}


def test_tier_limits() -> None:
    assert limits_for(PlanTier.STARTER).max_modes_per_collection == 1
    assert limits_for(PlanTier.PROFESSIONAL).max_modes_per_collection == 10
    assert limits_for(PlanTier.ORGANIZATION).max_modes_per_collection == 20
    assert limits_for(PlanTier.ENTERPRISE).mode_limit_label == "unlimited"


def test_valid_document_has_no_findings(sample_document: Document) -> None:
    validation = PlanValidator().validate(sample_document, limits_for(PlanTier.PROFESSIONAL))

    assert validation.can_import
    assert validation.warnings == []
    assert validation.importing.collections == 2
    assert validation.importing.total_variables == 4
    assert validation.importing.max_modes_in_any_collection == 2
    assert validation.library_dependencies is None
    assert validation.font_dependencies is None


def test_mode_limit_is_a_warning(sample_document: Document) -> None:
    validation = PlanValidator().validate(sample_document, limits_for(PlanTier.STARTER), StoreShape(collections=3))

    assert validation.can_import
    assert validation.existing.collections == 3
    exceeding = validation.importing.collections_exceeding_mode_limit
    assert [item.collection for item in exceeding] == ["Semantic"]
    assert exceeding[0].modes == ["Light", "Dark"]
    assert validation.warnings == [
        '"Semantic" (2 modes, limit: 1) exceeds the starter plan mode limit; select a subset of modes to import'
    ]


def test_oversized_collection_is_an_error() -> None:
    document = Document.from_wire([_flat_collection("Huge", 5001)])

    validation = PlanValidator().validate(document, limits_for(PlanTier.ENTERPRISE))

    assert not validation.can_import
    assert validation.errors == ['Collection "Huge" has 5001 variables; the maximum per collection is 5000']
    assert any(warning.startswith("Large import: 5001 variables") for warning in validation.warnings)


def test_many_collections_warn() -> None:
    document = Document.from_wire([_flat_collection(f"C{index}", 1) for index in range(11)])

    validation = PlanValidator().validate(document, limits_for(PlanTier.PROFESSIONAL))

    assert validation.warnings == ["Large import: 11 collections"]


def test_dependencies_are_collected() -> None:
    document = Document.from_wire(
        [
            {
                "Semantic": {
                    "modes": {
                        "Default": {
                            "accent": {
                                "$type": "color",
                                "$value": "{brand.blue}",
                                "$libraryRef": "Brand Library",
                            },
                            "danger": {"$type": "color", "$value": "{brand.red}", "$libraryRef": "Brand Library"},
                        }
                    }
                }
            },
            {
                "_styles": {
                    "textStyles": [
                        {"name": "Body", "fontFamily": "Inter", "fontStyle": "Regular"},
                        {"name": "Caption", "fontFamily": "Inter", "fontStyle": "Regular"},
                        {"name": "Title", "fontFamily": "Inter", "fontStyle": "Bold"},
                    ]
                }
            },
        ]
    )

    libraries = library_dependencies(document)
    fonts = font_dependencies(document)

    assert libraries is not None
    assert (libraries.variable_count, libraries.collections) == (2, ["Brand Library"])
    assert fonts is not None
    assert fonts.style_count == 3
    assert [str(font) for font in fonts.fonts] == ["Inter Regular", "Inter Bold"]


@pytest.mark.asyncio
async def test_measure_store_and_detect_tier(host: MemoryHost) -> None:
    collection = await host.create_collection("Theme")
    await host.create_variable("bg", collection, VariableType.COLOR)
    assert await detect_tier(host) is PlanTier.PROFESSIONAL

    for index in range(11):
        await collection.add_mode(f"Extra {index}")
    assert await detect_tier(host) is PlanTier.ORGANIZATION

    for index in range(11, 20):
        await collection.add_mode(f"Extra {index}")
    assert await detect_tier(host) is PlanTier.ENTERPRISE

    shape = await measure_store(host)
    assert (shape.collections, shape.max_modes_in_any_collection, shape.total_variables) == (1, 21, 1)


@pytest.mark.asyncio
async def test_check_fonts_reports_missing() -> None:
    host = MemoryHost(fonts=[("Inter", "Regular")])
    fonts = [FontRef(family="Inter", style="Regular"), FontRef(family="Inter", style="Bold")]

    result = await check_fonts(host, fonts)

    assert result.available == [fonts[0]]
    assert result.missing == [fonts[1]]
    assert not result.all_available


@pytest.mark.asyncio
async def test_check_libraries_reports_missing(host: MemoryHost) -> None:
    host.add_library_collection("Brand Library")

    result = await check_libraries(host, ["Brand Library", "Icons"])

    assert result.available == ["Brand Library"]
    assert result.missing == ["Icons"]
