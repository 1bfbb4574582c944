"""
Exception classes for the photo curator.

Centralized location for all custom exceptions to avoid circular imports.
"""


class ArchiveParseError(Exception):
    """Base exception for all archive parsing errors."""
    pass


class NoDirectoryError(ArchiveParseError):
    """The end-of-central-directory record could not be found. Fatal."""
    pass


class ArchiveEntryError(ArchiveParseError):
    """A single archive entry could not be decoded. The entry is skipped."""
    pass


class BadLocalHeaderError(ArchiveEntryError):
    """Local file header signature mismatch or truncated header."""
    pass


class UnsupportedCompressionError(ArchiveEntryError):
    """Compression method other than stored or deflate."""
    pass


class DecompressionError(ArchiveEntryError):
    """Deflate stream is corrupt or truncated."""
    pass


class ExtractionCancelledError(ArchiveEntryError):
    """Extraction was cancelled while this entry was being decoded."""
    pass


class JudgeError(Exception):
    """Base exception for all judge-related errors."""
    pass


class JudgingStopped(JudgeError):
    """The judge asked to stop comparing; the run finalizes with what it has."""
    pass


class ValidationError(Exception):
    """Base exception for validation-related errors."""
    pass


class InvalidJudgment(ValidationError):
    """A judgment that violates ranking preconditions."""
    pass


class ConfigurationError(Exception):
    """Base exception for configuration-related errors."""
    pass
