class TemplatesError(Exception):
    """An error during template substitution."""
