"""Exceptions raised by the forms toolkit."""


class FormsError(Exception):
    """Base class for all toolkit errors."""


class ConstructionError(FormsError, TypeError):
    """A dialog or row was built from something that is not a recognised item.

    Raised before any drawing happens, so a caller never receives a
    partially built dialog.
    """


class NotInvokableError(FormsError, RuntimeError):
    """The dialog has no focusable row to run an input loop on."""
