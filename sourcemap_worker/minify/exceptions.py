class MinificationError(Exception):
    """Raised when a script cannot be minified."""
