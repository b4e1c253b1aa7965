"""Card fragments rendered below a message for enriched links."""

from __future__ import annotations

from pathlib import Path

import jinja2

_TEMPLATE_DIR = str(Path(__file__).resolve().parent.parent.parent / "templates" / "cards")

_env = jinja2.Environment(
    loader=jinja2.FileSystemLoader(_TEMPLATE_DIR),
    autoescape=True,
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_link_card(
    url: str,
    title: str,
    description: str,
    image: str | None = None,
    site_name: str | None = None,
) -> str:
    return _env.get_template("link.html").render(
        url=url,
        title=title,
        description=description,
        image=image,
        site_name=site_name,
    )


def render_youtube_card(video_id: str) -> str:
    return _env.get_template("youtube.html").render(video_id=video_id)


def render_video_card(base_url: str) -> str:
    """Looping player that offers the webm and mp4 renditions of *base_url*."""
    return _env.get_template("video.html").render(base_url=base_url)
