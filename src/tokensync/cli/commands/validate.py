"""Validate command formatting."""

from __future__ import annotations

import argparse

from tokensync import CapacityExceededError, PlanTier, PlanValidation
from tokensync.cli.common import format_comma_or_none
from tokensync.cli.persistence.store_file import open_store


def format_validation_summary(validation: PlanValidation) -> str:
    status = "ok" if validation.can_import else "failed"
    limits = validation.limits
    lines = [
        "",
        f"tokensync - validation {status} ({limits.tier.value} plan)",
        "",
        f"  Mode limit:  {limits.mode_limit_label} per collection",
        "  Existing:    {} collections, {} variables".format(
            validation.existing.collections, validation.existing.total_variables
        ),
        "  Importing:   {} collections, {} variables, up to {} modes".format(
            validation.importing.collections,
            validation.importing.total_variables,
            validation.importing.max_modes_in_any_collection,
        ),
    ]

    if validation.library_dependencies is not None:
        deps = validation.library_dependencies
        lines.append(
            f"  Libraries:   {deps.variable_count} aliases into {format_comma_or_none(deps.collections)}"
        )
    if validation.font_dependencies is not None:
        fonts = [str(font) for font in validation.font_dependencies.fonts]
        lines.append(f"  Fonts:       {format_comma_or_none(fonts)}")

    if validation.warnings:
        lines.append("")
        lines.extend(f"  warning: {warning}" for warning in validation.warnings)
    if validation.errors:
        lines.append("")
        lines.extend(f"  error: {error}" for error in validation.errors)

    lines.append("")
    return "\n".join(lines)


async def run_validate(args: argparse.Namespace) -> PlanValidation:
    import tokensync.cli as cli

    config = cli.load_config(args.config)
    document = cli.load_document(args.document)

    sdk = await cli.TokenSync.from_config(config)
    await open_store(sdk, config.store_path)
    validation = await sdk.validate_plan(document, PlanTier(args.tier) if args.tier else None)

    print(cli._format_validation_summary(validation))
    if validation.errors:
        raise CapacityExceededError(
            f"document exceeds {validation.limits.tier.value} plan limits", errors=validation.errors
        )
    return validation


__all__ = ["format_validation_summary", "run_validate"]
