"""Plan tier and capacity validation for an incoming document."""

from __future__ import annotations

from tokensync.contracts.document import Document, count_tree_variables, flatten_tree
from tokensync.contracts.exceptions import HostError
from tokensync.contracts.host import Host
from tokensync.contracts.plan import (
    TIER_LIMITS,
    FontCheckResult,
    FontDependencies,
    FontRef,
    ImportShape,
    LibraryCheckResult,
    LibraryDependencies,
    ModeLimitExceedance,
    PlanTier,
    PlanValidation,
    StoreShape,
    TierLimits,
)

PLAN_LIMITS = TIER_LIMITS
MAX_VARIABLES_PER_COLLECTION = 5000
LARGE_IMPORT_VARIABLES = 1000
LARGE_IMPORT_COLLECTIONS = 10


class PlanValidator:
    """Checks a document's shape against tier limits without touching the host."""

    def validate(
        self,
        document: Document,
        limits: TierLimits,
        existing: StoreShape | None = None,
    ) -> PlanValidation:
        errors: list[str] = []
        warnings: list[str] = []
        exceeding: list[ModeLimitExceedance] = []
        total_variables = 0
        max_modes = 0

        for entry in document.collections:
            count = count_tree_variables(entry.template)
            total_variables += count
            max_modes = max(max_modes, len(entry.modes))
            if count > MAX_VARIABLES_PER_COLLECTION:
                errors.append(
                    f'Collection "{entry.name}" has {count} variables; '
                    f"the maximum per collection is {MAX_VARIABLES_PER_COLLECTION}"
                )
            if not limits.allows_modes(len(entry.modes)):
                exceeding.append(
                    ModeLimitExceedance(
                        collection=entry.name,
                        modes=entry.mode_names,
                        limit=limits.max_modes_per_collection,
                    )
                )

        for item in exceeding:
            warnings.append(
                f"{item.describe()} exceeds the {limits.tier.value} plan mode limit; "
                "select a subset of modes to import"
            )
        if total_variables > LARGE_IMPORT_VARIABLES:
            warnings.append(f"Large import: {total_variables} variables may take a while to apply")
        if len(document.collections) > LARGE_IMPORT_COLLECTIONS:
            warnings.append(f"Large import: {len(document.collections)} collections")

        return PlanValidation(
            limits=limits,
            existing=existing or StoreShape(),
            importing=ImportShape(
                collections=len(document.collections),
                max_modes_in_any_collection=max_modes,
                total_variables=total_variables,
                collections_exceeding_mode_limit=exceeding,
            ),
            warnings=warnings,
            errors=errors,
            library_dependencies=library_dependencies(document),
            font_dependencies=font_dependencies(document),
        )


def library_dependencies(document: Document) -> LibraryDependencies | None:
    """Library collections referenced by ``$libraryRef`` aliases, if any."""
    collections: list[str] = []
    count = 0
    for entry in document.collections:
        for tree in entry.modes.values():
            for _path, record in flatten_tree(tree):
                if record.is_alias and record.library_ref:
                    count += 1
                    if record.library_ref not in collections:
                        collections.append(record.library_ref)
    if not count:
        return None
    return LibraryDependencies(variable_count=count, collections=collections)


def font_dependencies(document: Document) -> FontDependencies | None:
    """Distinct font family/style pairs required by the document's text styles."""
    text_styles = document.styles.text_styles if document.styles is not None else None
    if not text_styles:
        return None
    fonts: list[FontRef] = []
    for record in text_styles:
        font = FontRef(family=record.font_family, style=record.font_style)
        if font not in fonts:
            fonts.append(font)
    return FontDependencies(style_count=len(text_styles), fonts=fonts)


def limits_for(tier: PlanTier) -> TierLimits:
    return PLAN_LIMITS[tier]


async def measure_store(host: Host) -> StoreShape:
    collections = await host.list_collections()
    return StoreShape(
        collections=len(collections),
        max_modes_in_any_collection=max((len(collection.modes) for collection in collections), default=0),
        total_variables=sum(len(collection.variable_ids) for collection in collections),
    )


async def detect_tier(host: Host) -> PlanTier:
    """Infer the tier from the highest mode count in the live store.

    A single mode cannot tell Starter from Professional, so anything up to ten
    modes is reported as Professional.
    """
    shape = await measure_store(host)
    if shape.max_modes_in_any_collection > 20:
        return PlanTier.ENTERPRISE
    if shape.max_modes_in_any_collection > 10:
        return PlanTier.ORGANIZATION
    return PlanTier.PROFESSIONAL


async def check_fonts(host: Host, fonts: list[FontRef]) -> FontCheckResult:
    result = FontCheckResult(required=list(fonts))
    for font in fonts:
        try:
            await host.load_font(font.family, font.style)
        except HostError:
            result.missing.append(font)
        else:
            result.available.append(font)
    return result


async def check_libraries(host: Host, collections: list[str]) -> LibraryCheckResult:
    connected = {collection.name for collection in await host.list_library_collections()}
    return LibraryCheckResult(
        required=list(collections),
        available=[name for name in collections if name in connected],
        missing=[name for name in collections if name not in connected],
    )
