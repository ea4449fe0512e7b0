"""Summary of what the live store contains."""

from __future__ import annotations

from tokensync.contracts.host import Host
from tokensync.contracts.styles import StyleKind, TextStyle, style_bindings
from tokensync.contracts.sync import CollectionInfo, FontUsage, StoreInventory
from tokensync.contracts.values import VariableAlias


async def build_inventory(host: Host) -> StoreInventory:
    inventory = StoreInventory()
    libraries: set[str] = set()
    for collection in await host.list_collections():
        types: dict[str, int] = {}
        count = 0
        for variable_id in collection.variable_ids:
            variable = await host.get_variable(variable_id)
            if variable is None:
                continue
            count += 1
            types[variable.resolved_type.value] = types.get(variable.resolved_type.value, 0) + 1
            for value in variable.values_by_mode.values():
                if not isinstance(value, VariableAlias):
                    continue
                inventory.total_aliases += 1
                target = await host.get_variable(value.id)
                target_collection = await host.get_collection(target.collection_id) if target is not None else None
                if target_collection is not None and target_collection.remote:
                    inventory.library_aliases += 1
                    libraries.add(target_collection.name)
                else:
                    inventory.local_aliases += 1
        inventory.collections.append(
            CollectionInfo(
                id=collection.id,
                name=collection.name,
                modes=[mode.name for mode in collection.modes],
                variable_count=count,
                types=types,
            )
        )
        inventory.total_variables += count

    fonts: dict[str, list[str]] = {}
    for kind in StyleKind:
        styles = await host.list_styles(kind)
        inventory.styles[kind] = len(styles)
        for style in styles:
            inventory.style_bindings += len(style_bindings(style))
            if isinstance(style, TextStyle):
                font_styles = fonts.setdefault(style.font_family, [])
                if style.font_style not in font_styles:
                    font_styles.append(style.font_style)
    inventory.fonts_used = [FontUsage(family=family, styles=styles) for family, styles in sorted(fonts.items())]
    inventory.library_dependencies = sorted(libraries)
    return inventory
