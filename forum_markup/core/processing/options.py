"""Processing options."""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 6.3; WOW64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/41.0.2228.0 Safari/537.36"
)


class ProcessingOptions(BaseModel):
    """Tunables for a :class:`~forum_markup.core.processing.pipeline.MessageProcessor`.

    The defaults are the limits the forum runs with; tests and the CLI
    override individual values.
    """

    model_config = {"frozen": True}

    # Whether generic links are fetched at all
    fetch_remote: bool = True
    # Ceiling for one remote fetch, including redirects (seconds)
    fetch_timeout: float = Field(default=3.0, gt=0)
    # Per-request httpx timeout (seconds)
    request_timeout: float = Field(default=5.0, gt=0)
    max_redirects: int = Field(default=3, ge=0)
    user_agent: str = DEFAULT_USER_AGENT
    # DoS bounds: links enriched / mentions resolved per message
    max_enrichments: int = Field(default=10, ge=0)
    max_mentions: int = Field(default=10, ge=0)
    short_preview_length: int = Field(default=100, gt=0)
    long_preview_length: int = Field(default=500, gt=0)
