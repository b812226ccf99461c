class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class RootDirectoryError(ProcessorError):
    """Raised when the root or its assets directory is missing or not a directory."""


class NoMatchingOriginalError(ProcessorError):
    """Raised when a plain file has no fingerprinted original with the same content."""


class IndexBuildError(ProcessorError):
    """Raised when the original files cannot be read to build the content index."""
