"""Exceptions raised at the document and rich-text boundaries"""


class DocumentLoadError(ValueError):
    """Raised when a persisted document cannot be turned into a Document.

    Covers invalid JSON, a missing or malformed ``blocks`` array, an
    unrecognized ``version`` tag, and blocks that fail validation.
    """


class RichTextError(ValueError):
    """Raised by a rich-text codec for a payload it cannot convert."""
