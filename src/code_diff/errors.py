"""Exceptions raised by the code diff tool."""


class CodeDiffError(Exception):
    """Base exception for code diff errors."""
    pass


class PreconditionError(CodeDiffError):
    """An action was requested in a state that does not allow it.

    The message is meant to be shown to the user as-is. No state was
    changed when this is raised.
    """
    pass


class ProfileFormatError(CodeDiffError):
    """A recorded profile file could not be read."""
    pass
