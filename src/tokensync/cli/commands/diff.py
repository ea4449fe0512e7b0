"""Diff command formatting."""

from __future__ import annotations

import argparse

from tokensync import DiffResult
from tokensync.cli.persistence.store_file import open_store


def format_diff_summary(diff: DiffResult) -> str:
    summary = diff.summary
    lines = [
        "",
        "tokensync - diff",
        "",
        "  Collections: {} new, {} modified, {} unchanged".format(
            summary.collections_new, summary.collections_modified, summary.collections_unchanged
        ),
        "  Variables:   {} new, {} modified, {} unchanged".format(
            summary.variables_new, summary.variables_modified, summary.variables_unchanged
        ),
        f"  Styles:      {summary.styles_new} new, {summary.styles_modified} modified",
    ]

    details: list[str] = []
    details.extend(f"  + {ref.collection}/{ref.path}" for ref in diff.new_variables)
    for change in diff.modified_variables:
        details.append(f"  ~ {change.collection}/{change.path}")
        details.extend(f"      {mode.mode}: {mode.old_value} -> {mode.new_value}" for mode in change.modes)
    details.extend(f"  + {style.kind.value} style {style.name}" for style in diff.new_styles)
    details.extend(f"  ~ {style.kind.value} style {style.name}" for style in diff.modified_styles)

    if details:
        lines.append("")
        lines.extend(details)
    else:
        lines.append("")
        lines.append("  Status:      store already matches the document")

    lines.append("")
    return "\n".join(lines)


async def run_diff(args: argparse.Namespace) -> DiffResult:
    import tokensync.cli as cli

    config = cli.load_config(args.config)
    document = cli.load_document(args.document)

    sdk = await cli.TokenSync.from_config(config)
    await open_store(sdk, config.store_path)
    diff = await sdk.diff(document)

    print(cli._format_diff_summary(diff))
    return diff


__all__ = ["format_diff_summary", "run_diff"]
