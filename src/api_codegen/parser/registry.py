"""Input parser interface and the name-keyed parser registry."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from api_codegen.errors import SourceNotFoundError, UnknownFormatError
from api_codegen.parser.base import SchemaIR


class InputParser(ABC):
    """Converts one input format into a :class:`SchemaIR`."""

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Name of the input format, e.g. 'openapi'."""

    @property
    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """File extensions (without the dot) this parser claims."""

    @abstractmethod
    def parse(self, source: Path, options: dict[str, Any] | None = None) -> SchemaIR:
        """Parse the whole document at ``source`` into an IR."""

    def validate(self, source: Path) -> None:
        if not source.exists():
            raise SourceNotFoundError(source)


class ParserRegistry:
    """Maps format names to parser instances.

    Registering a second parser under an existing name replaces the first.
    """

    def __init__(self):
        self._parsers: dict[str, InputParser] = {}

    def register(self, parser: InputParser) -> None:
        self._parsers[parser.format_name] = parser

    def get(self, format_name: str) -> InputParser | None:
        return self._parsers.get(format_name)

    def require(self, format_name: str) -> InputParser:
        parser = self.get(format_name)
        if parser is None:
            raise UnknownFormatError(format_name, self.formats())
        return parser

    def formats(self) -> list[str]:
        return list(self._parsers)

    def detect_format(self, path: Path) -> str | None:
        """Return the first registered format claiming the file extension.

        Parsers are checked in registration order. Callers that need a
        specific parser for an extension claimed twice should pass the
        format explicitly.
        """
        ext = Path(path).suffix.lstrip(".").lower()
        if not ext:
            return None
        for parser in self._parsers.values():
            if ext in parser.supported_extensions:
                return parser.format_name
        return None


def default_parser_registry() -> ParserRegistry:
    """Return a registry with the built-in parsers registered."""
    from api_codegen.parser.openapi import OpenApiParser

    registry = ParserRegistry()
    registry.register(OpenApiParser())
    return registry
