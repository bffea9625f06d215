class InvalidOverrideError(ValueError):
    """A manual status override is missing who or why, or targets an unknown status."""
