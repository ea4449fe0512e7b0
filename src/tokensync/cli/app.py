"""CLI app entrypoint and error mapping."""

from __future__ import annotations

import sys

from tokensync import (
    CapacityExceededError,
    ConfigError,
    DocumentLoadError,
    HostError,
    SyncError,
)


def main(argv: list[str] | None = None) -> int:
    import tokensync.cli as cli

    parser = cli.build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        cli.logging.basicConfig(level=cli.logging.DEBUG, format="%(name)s %(message)s", stream=sys.stderr)

    commands = {
        "export": cli._run_export,
        "validate": cli._run_validate,
        "diff": cli._run_diff,
        "import": cli._run_import,
        "undo": cli._run_undo,
        "clear": cli._run_clear,
        "info": cli._run_info,
    }

    try:
        cli.asyncio.run(commands[args.command](args))
        return 0
    except (ConfigError, DocumentLoadError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 3
    except (CapacityExceededError, HostError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 4
    except SyncError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 5
    except Exception as exc:  # pragma: no cover - defensive fallback
        print(f"error: {exc}", file=sys.stderr)
        return 1


__all__ = ["main"]
