"""Exception hierarchy for api-codegen.

Every error raised on purpose by the package derives from
:class:`ApiCodegenError`. The CLI converts these into a
``click.ClickException`` so they print as ``Error: <message>`` and exit
with status 1. Anything else is a bug and is left to propagate.

Subclass hierarchy::

    ApiCodegenError
    +-- SourceNotFoundError     (input document does not exist)
    +-- MalformedInputError     (input document cannot be deserialized)
    +-- UnknownFormatError      (no parser registered for a format name)
    +-- UnknownGeneratorError   (no generator registered for a name)
    +-- ConfigError             (configuration file problems)
    +-- GenerationError         (template lookup or rendering failed)
    +-- HookError               (a before/after shell hook failed)

Broken ``$ref`` pointers inside a document are *not* errors. The extractor
degrades them to an ``"Unknown"`` reference and records a warning on the IR.
"""

from pathlib import Path


class ApiCodegenError(Exception):
    """Base exception for all api-codegen errors."""


class SourceNotFoundError(ApiCodegenError):
    """Raised when the input document path does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Input file not found: {path}")


class MalformedInputError(ApiCodegenError):
    """Raised when the input document cannot be deserialized.

    Args:
        path: The document that failed to load.
        cause: Human-readable reason, usually the underlying parser message.
    """

    def __init__(self, path: Path, cause: str):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to parse {path}: {cause}")


class UnknownFormatError(ApiCodegenError):
    """Raised when no registered parser claims a format name."""

    def __init__(self, format_name: str, available: list[str] | None = None):
        self.format_name = format_name
        message = f"Unknown input format: {format_name}"
        if available:
            message += f" (available: {', '.join(available)})"
        super().__init__(message)


class UnknownGeneratorError(ApiCodegenError):
    """Raised when no registered generator matches a requested name."""

    def __init__(self, generator_name: str, available: list[str] | None = None):
        self.generator_name = generator_name
        message = f"Unknown generator: {generator_name}"
        if available:
            message += f" (available: {', '.join(available)})"
        super().__init__(message)


class ConfigError(ApiCodegenError):
    """Raised for missing, unreadable or invalid configuration."""


class GenerationError(ApiCodegenError):
    """Raised when a generator cannot render its output."""

    def __init__(self, generator_name: str, message: str):
        self.generator_name = generator_name
        super().__init__(f"Generator '{generator_name}' failed: {message}")


class HookError(ApiCodegenError):
    """Raised when a shell hook exits with a non-zero status."""

    def __init__(self, command: str, stderr: str = ""):
        self.command = command
        self.stderr = stderr
        message = f"Hook failed: {command}"
        if stderr.strip():
            message += f"\nStderr: {stderr.strip()}"
        super().__init__(message)
