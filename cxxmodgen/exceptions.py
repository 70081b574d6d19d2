"""Custom exceptions for cxxmodgen.

This module defines the hierarchy of exceptions raised while building module
wrappers, so callers can tell configuration problems apart from bad record
streams and failed artifact writes.
"""


class CxxModGenError(Exception):
    """Base exception for all cxxmodgen errors.

    All exceptions raised by cxxmodgen inherit from this class, making it easy
    to catch every generator failure with a single except clause.

    Example:
        try:
            codegen.generate()
        except CxxModGenError as e:
            print(f"cxxmodgen error: {e}")
    """

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class ConfigurationError(CxxModGenError):
    """Error in configuration.

    Raised when the configuration is invalid or cannot be loaded, and when a
    unit cannot be set up (missing source file, unusable output directory or
    module name). Always raised before any artifact is written.

    Attributes:
        config_path: The path to the configuration file, if applicable.
        field: The specific configuration field that is invalid.
    """

    def __init__(
        self, message: str, config_path: str | None = None, field: str | None = None
    ):
        self.config_path = config_path
        self.field = field
        full_message = message
        if config_path:
            full_message = f"{message} in '{config_path}'"
        if field:
            full_message += f' (field: {field})'
        super().__init__(full_message)


class RecordError(CxxModGenError):
    """A declaration record is malformed or unusable.

    Attributes:
        source: The record stream the record came from, if known.
        line: The 1-based line number within the stream, if known.
    """

    def __init__(
        self, message: str, source: str | None = None, line: int | None = None
    ):
        self.source = source
        self.line = line
        full_message = message
        if source:
            location = f'{source}:{line}' if line is not None else source
            full_message = f'{message} ({location})'
        super().__init__(full_message)


class RecordLoadError(RecordError):
    """Failed to load a declaration record stream.

    Attributes:
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self, source: str, cause: Exception | None = None, line: int | None = None
    ):
        self.cause = cause
        message = 'Failed to load declaration records'
        if cause:
            message += f': {cause}'
        super().__init__(message, source=source, line=line)


class OutputError(CxxModGenError):
    """Error writing a generated artifact.

    Fatal for the translation unit being processed; the artifact is not left
    behind half-written.

    Attributes:
        output_path: The path where output was being written.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, output_path: str, cause: Exception | None = None):
        self.output_path = output_path
        self.cause = cause
        message = f"Failed to write output to '{output_path}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)
