"""Custom exceptions for the forum markup pipeline."""

from __future__ import annotations


class ForumMarkupError(Exception):
    """Base exception for all forum markup errors.

    Attributes:
        is_fatal: If True, processing of the message was aborted and the
                  caller has to surface the problem to the author.
    """

    def __init__(
        self,
        message: str,
        is_fatal: bool = False,
        *args: object,
    ) -> None:
        super().__init__(message, *args)
        self.is_fatal = is_fatal


class EmptyBodyError(ForumMarkupError):
    """Raised when a message body is empty after trimming."""

    def __init__(self, message: str = "Message body cannot be empty.") -> None:
        super().__init__(message, is_fatal=True)


class RemoteFetchError(ForumMarkupError):
    """Raised when a linked page cannot be loaded or decoded.

    Never escapes the link enrichment stage: the fetcher converts it into a
    fallback title without a card.
    """


class OrphanReferenceError(ForumMarkupError):
    """Raised when a reply points at a message whose parent no longer exists."""

    def __init__(self, message_id: int, parent_id: int) -> None:
        super().__init__(
            f"Orphan message found with ID {message_id}. "
            f"Unable to load parent with ID {parent_id}.",
            is_fatal=True,
        )
        self.message_id = message_id
        self.parent_id = parent_id
