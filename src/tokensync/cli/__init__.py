"""Command-line interface for tokensync."""

from __future__ import annotations

import asyncio
import logging as logging

from tokensync import ConfigError as ConfigError
from tokensync import TokenSync as TokenSync
from tokensync import load_config as load_config
from tokensync import load_document as load_document
from tokensync.cli.app import main as main
from tokensync.cli.commands import clear as clear_command
from tokensync.cli.commands import diff as diff_command
from tokensync.cli.commands import export as export_command
from tokensync.cli.commands import import_document as import_command
from tokensync.cli.commands import info as info_command
from tokensync.cli.commands import undo as undo_command
from tokensync.cli.commands import validate as validate_command
from tokensync.cli.parser import _package_version as _parser_package_version
from tokensync.cli.parser import build_parser as build_parser

_format_export_summary = export_command.format_export_summary
_format_validation_summary = validate_command.format_validation_summary
_format_diff_summary = diff_command.format_diff_summary
_format_import_summary = import_command.format_import_summary
_format_undo_summary = undo_command.format_undo_summary
_format_clear_summary = clear_command.format_clear_summary
_format_info_summary = info_command.format_info_summary

_prompt_mode_selection = import_command.prompt_mode_selection

_run_export = export_command.run_export
_run_validate = validate_command.run_validate
_run_diff = diff_command.run_diff
_run_import = import_command.run_import
_run_undo = undo_command.run_undo
_run_clear = clear_command.run_clear
_run_info = info_command.run_info

_package_version = _parser_package_version
