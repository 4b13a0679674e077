class CashbookError(Exception):
    """Base class for failures surfaced by cashbook operations."""


class BackendError(CashbookError):
    """A backend command failed; the caller's previous state stays valid."""

    def __init__(self, command: str, message: str):
        super().__init__(f"{command}: {message}")
        self.command = command
        self.message = message


class ExportError(CashbookError):
    """An archive export could not produce a document."""


class RendererAssetError(ExportError):
    """Fonts or images needed by the PDF renderer failed to load."""
