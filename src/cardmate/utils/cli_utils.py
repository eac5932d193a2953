"""
Utility functions and decorators for CLI argument handling.
"""

import argparse
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from cardmate.config.types import AppConfig

@dataclass
class CLIContext:
    """Context object for CLI command execution."""
    args: argparse.Namespace
    logger: logging.Logger
    config: AppConfig
    parser: argparse.ArgumentParser
    services: Any = None

class CommandCategory(Enum):
    """Categories for organizing commands."""
    PLAYERS = auto()
    COURSES = auto()
    ROUND = auto()
    HISTORY = auto()
    SETTINGS = auto()

Handler = Callable[[CLIContext], int]

@dataclass
class CommandMetadata:
    """Metadata for command registration."""
    name: str
    help_text: str
    category: CommandCategory
    handler: Handler
    options: list[dict[str, Any]]
    parent_command: str | None = None

    @property
    def key(self) -> str:
        """Registry key; subcommand names repeat across parents."""
        return f"{self.parent_command} {self.name}" if self.parent_command else self.name

class CLIOptionFactory:
    """Factory for creating common CLI options with consistent validation."""

    @staticmethod
    def create_format_option() -> dict[str, Any]:
        return {
            'name': '--format',
            'choices': ['text', 'json'],
            'default': 'text',
            'help': 'Output format: human-readable text or machine-readable JSON (default: text)'
        }

    @staticmethod
    def create_id_argument(what: str) -> dict[str, Any]:
        return {
            'name': f'{what}_id',
            'help': f'Id of the {what} (a unique prefix is enough)'
        }

    @staticmethod
    def create_name_argument(what: str) -> dict[str, Any]:
        return {
            'name': 'name',
            'help': f'{what.capitalize()} name',
            'validator': lambda x: bool(x.strip())
        }

    @staticmethod
    def create_layout_option(positional: bool = False) -> dict[str, Any]:
        return {
            'name': 'layout' if positional else '--layout',
            'type': int,
            'choices': [9, 18],
            **({} if positional else {'default': 18}),
            'help': 'Number of holes in the layout (9 or 18)'
        }

class CommandRegistry:
    """Registry for CLI commands with metadata."""

    _commands: dict[str, CommandMetadata] = {}

    @classmethod
    def register(cls,
                 name: str,
                 help_text: str,
                 category: CommandCategory,
                 options: list[dict[str, Any]] | None = None,
                 parent_command: str | None = None) -> Callable[[Handler], Handler]:
        """Register a command handler."""
        def decorator(handler: Handler) -> Handler:
            metadata = CommandMetadata(
                name=name,
                help_text=help_text,
                category=category,
                handler=handler,
                options=options or [],
                parent_command=parent_command
            )
            cls._commands[metadata.key] = metadata
            return handler
        return decorator

    @classmethod
    def commands(cls) -> list[CommandMetadata]:
        return list(cls._commands.values())

class ArgumentValidator:
    """Validator for CLI arguments."""

    @staticmethod
    def validate_option(option: dict[str, Any], value: Any) -> bool:
        """Validate a single option value."""
        if 'validator' not in option:
            return True

        try:
            result = option['validator'](value)
            return bool(result)
        except (TypeError, ValueError, AttributeError):
            return False

    @staticmethod
    def validate_args(args: argparse.Namespace, command: CommandMetadata) -> list[str]:
        """Validate all arguments for a command."""
        errors = []

        for option in command.options:
            value = getattr(args, option['name'].lstrip('-').replace('-', '_'), None)
            if value is not None and not ArgumentValidator.validate_option(option, value):
                errors.append(f"Invalid value for {option['name']}: {value}")

        return errors

def add_common_options(parser: argparse.ArgumentParser) -> None:
    """Add common global options to a parser."""
    parser.add_argument(
        '-u', '--user',
        help='User id to act as (default: user_id from configuration)'
    )
    parser.add_argument(
        '--config-dir',
        help='Configuration directory (default: $CARDMATE_CONFIG_DIR or ~/.cardmate)'
    )
    parser.add_argument(
        '--dev',
        action='store_true',
        help='Run in development mode with debug output'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging output'
    )
    parser.add_argument(
        '--log-file',
        help='Path to write log output (default: logs to stderr)'
    )

class CLIBuilder:
    """Builder for constructing CLI parsers with consistent formatting."""

    # Custom option fields that should not be passed to argparse
    _CUSTOM_FIELDS = {'validator'}

    def __init__(self, description: str):
        """Initialize CLI builder."""
        self.parser = argparse.ArgumentParser(prog='cardmate', description=description)
        self.subparsers = self.parser.add_subparsers(dest='command', required=True)
        self._parent_parsers: dict[str, argparse._SubParsersAction[Any]] = {}

        add_common_options(self.parser)

    def _parent_subparsers(self, parent_command: str, category: CommandCategory) -> "argparse._SubParsersAction[Any]":
        if parent_command not in self._parent_parsers:
            parent_parser = self.subparsers.add_parser(
                parent_command,
                help=f"{category.name.capitalize()} commands"
            )
            self._parent_parsers[parent_command] = parent_parser.add_subparsers(
                dest='subcommand',
                required=True
            )
        return self._parent_parsers[parent_command]

    def add_command(self, command: CommandMetadata) -> None:
        """Add a command to the parser."""
        if command.parent_command:
            subparsers = self._parent_subparsers(command.parent_command, command.category)
            parser = subparsers.add_parser(command.name, help=command.help_text)
        else:
            parser = self.subparsers.add_parser(command.name, help=command.help_text)

        for option in command.options:
            option_dict = {k: v for k, v in option.items() if k not in self._CUSTOM_FIELDS}
            name = option_dict.pop('name')
            if not name.startswith('-'):
                # Positional names double as the destination
                name = name.lower().replace('-', '_')
            parser.add_argument(name, **option_dict)

        parser.set_defaults(command_key=command.key)

    def build(self) -> argparse.ArgumentParser:
        """Build and return the parser."""
        return self.parser
