"""Import command: validate, optionally prompt for modes, then reconcile."""

from __future__ import annotations

import argparse
import sys

from tokensync import (
    CapacityExceededError,
    CollectionBehavior,
    CustomMerge,
    Document,
    ImportOptions,
    ImportResult,
    ImportStatus,
    PlanTier,
    PlanValidation,
    SyncError,
    TokenSync,
    TokenSyncConfig,
)
from tokensync.cli.persistence.store_file import open_store, persist_snapshot, save_store
from tokensync.cli.progress.rich import RichSyncProgress
from tokensync.engine.progress import SyncProgress


def build_import_options(args: argparse.Namespace) -> ImportOptions:
    custom_merge = None
    if args.clear_variables or args.clear_styles:
        custom_merge = CustomMerge(clear_variables=args.clear_variables, clear_styles=args.clear_styles)
    return ImportOptions(
        merge=not args.no_merge,
        overwrite=not args.no_overwrite,
        clear_first=args.clear_first,
        custom_merge=custom_merge,
        collection_behaviors={name: CollectionBehavior.REPLACE for name in args.replace},
        import_styles=not args.no_styles,
        selected_modes=dict(args.modes),
    )


def prompt_mode_selection(validation: PlanValidation, options: ImportOptions) -> ImportOptions:
    """Ask which modes to keep for every collection over the plan's mode limit."""
    import tokensync.cli as cli

    exceeding = [
        item
        for item in validation.importing.collections_exceeding_mode_limit
        if options.modes_for(item.collection) is None
    ]
    if not exceeding:
        return options

    if not sys.stdin.isatty():
        raise cli.ConfigError("Collections exceed the plan mode limit; rerun with --modes in non-interactive mode")

    try:
        import questionary
    except ImportError as exc:  # pragma: no cover
        raise cli.ConfigError(
            "questionary is required for interactive mode selection (install questionary or pass --modes)"
        ) from exc

    selected = dict(options.selected_modes)
    for item in exceeding:
        limit = item.limit or len(item.modes)
        answer = questionary.checkbox(
            f'Select up to {limit} modes to import for "{item.collection}":',
            choices=item.modes,
            validate=lambda picked, limit=limit: 0 < len(picked) <= limit or f"Select between 1 and {limit} modes",
        ).ask()
        if answer is None:
            raise cli.ConfigError("Aborted mode selection")
        selected[item.collection] = [str(mode) for mode in answer]
    return options.model_copy(update={"selected_modes": selected})


def format_import_summary(result: ImportResult, config: TokenSyncConfig, *, dry_run: bool) -> str:
    mode = "dry-run" if dry_run else "apply"
    status = "rolled back" if result.status is ImportStatus.ROLLED_BACK else "complete"
    lines = ["", f"tokensync - import {status} ({mode})", ""]

    stats = result.stats
    if stats is None:
        lines.append(f"  Error:       {result.error}")
        lines.append("  Status:      store restored to its pre-import state")
    else:
        lines.extend(
            [
                "  Collections: {} created, {} skipped, {} failed".format(
                    stats.collections_created, stats.collections_skipped, stats.collections_failed
                ),
                "  Variables:   {} created, {} updated, {} skipped, {} failed".format(
                    stats.variables_created, stats.variables_updated, stats.variables_skipped, stats.variables_failed
                ),
                f"  Aliases:     {stats.aliases_resolved} resolved, {stats.aliases_unresolved} unresolved",
                "  Styles:      {} created, {} updated, {} failed".format(
                    stats.styles_created, stats.styles_updated, stats.styles_failed
                ),
            ]
        )
        if stats.modes_failed:
            lines.append(f"  Modes:       {stats.modes_failed} failed")
        lines.append("")
        lines.append(f"  Store:       {config.store_path}")
        if not dry_run:
            lines.append(f"  Undo:        {config.resolved_undo_path}")

    if dry_run:
        lines.append("")
        lines.append("  [dry-run] No changes were made")

    lines.append("")
    return "\n".join(lines)


async def _reconcile(
    sdk: TokenSync,
    config: TokenSyncConfig,
    document: Document,
    options: ImportOptions,
    progress: SyncProgress | None = None,
) -> tuple[TokenSync, ImportResult]:
    import tokensync.cli as cli

    runner = cli.TokenSync(sdk.host, config=config, progress=progress)
    result = await runner.import_document(document, options, enforce_limits=False, keep_snapshot=True)
    return runner, result


async def run_import(args: argparse.Namespace) -> ImportResult:
    import tokensync.cli as cli

    config = cli.load_config(args.config)
    document = cli.load_document(args.document)
    options = build_import_options(args)

    sdk = await cli.TokenSync.from_config(config)
    await open_store(sdk, config.store_path)

    validation = await sdk.validate_plan(document, PlanTier(args.tier) if args.tier else None)
    if validation.errors:
        print(cli._format_validation_summary(validation))
        raise CapacityExceededError(
            f"document exceeds {validation.limits.tier.value} plan limits", errors=validation.errors
        )
    if args.interactive:
        options = cli._prompt_mode_selection(validation, options)

    if not args.verbose:
        with RichSyncProgress() as progress:
            runner, result = await _reconcile(sdk, config, document, options, progress)
    else:
        runner, result = await _reconcile(sdk, config, document, options)

    print(cli._format_import_summary(result, config, dry_run=args.dry_run))
    if result.status is ImportStatus.ROLLED_BACK:
        raise SyncError(f"import rolled back: {result.error}")

    if not args.dry_run:
        if runner.last_snapshot is not None:
            persist_snapshot(runner.last_snapshot, config.resolved_undo_path)
        await save_store(runner, config.store_path)
    return result


__all__ = ["build_import_options", "format_import_summary", "prompt_mode_selection", "run_import"]
