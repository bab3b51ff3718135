"""Exception types shared across the clipboard monitor and probes."""


class VirtualClipboardError(Exception):
    """Base class for errors raised by virtualclipboard."""


class ClipboardUnavailableError(VirtualClipboardError):
    """The system clipboard could not be read right now (busy, no tool, closed)."""


class InvalidPayloadError(VirtualClipboardError, ValueError):
    """A caller handed an item constructor a payload it can never accept."""
