"""Info command formatting."""

from __future__ import annotations

import argparse

from tokensync import StoreInventory
from tokensync.cli.common import format_comma_or_none, plural
from tokensync.cli.persistence.store_file import open_store


def format_info_summary(inventory: StoreInventory) -> str:
    lines = [
        "",
        "tokensync - store info",
        "",
        f"  Collections: {len(inventory.collections)}",
    ]
    for collection in inventory.collections:
        types = ", ".join(f"{count} {name}" for name, count in sorted(collection.types.items()))
        lines.append(
            "    {}: {}, modes {}{}".format(
                collection.name,
                plural(collection.variable_count, "variable"),
                format_comma_or_none(collection.modes),
                f" ({types})" if types else "",
            )
        )
    lines.extend(
        [
            f"  Variables:   {inventory.total_variables}",
            "  Aliases:     {} ({} local, {} library)".format(
                inventory.total_aliases, inventory.local_aliases, inventory.library_aliases
            ),
            f"  Libraries:   {format_comma_or_none(inventory.library_dependencies)}",
        ]
    )
    styles = ", ".join(f"{count} {kind.value}" for kind, count in inventory.styles.items() if count)
    lines.append(f"  Styles:      {styles or 'none'} ({plural(inventory.style_bindings, 'binding')})")
    fonts = [f"{font.family} ({', '.join(font.styles)})" for font in inventory.fonts_used]
    lines.append(f"  Fonts:       {format_comma_or_none(fonts)}")
    lines.append("")
    return "\n".join(lines)


async def run_info(args: argparse.Namespace) -> StoreInventory:
    import tokensync.cli as cli

    config = cli.load_config(args.config)
    sdk = await cli.TokenSync.from_config(config)
    await open_store(sdk, config.store_path)
    inventory = await sdk.inventory()

    print(cli._format_info_summary(inventory))
    return inventory


__all__ = ["format_info_summary", "run_info"]
