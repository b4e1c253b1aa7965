"""CLI application - render forum posts from the command line."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import IO, TypeVar

import click
import pydantic
from rich.console import Console
from rich.logging import RichHandler

from forum_markup.core.exceptions import ForumMarkupError
from forum_markup.core.models.smiley import Smiley
from forum_markup.core.models.user import User

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)

console = Console()


def _print(text: str) -> None:
    # Post bodies contain square brackets, which rich would read as markup
    console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_models(stream: IO[str] | None, model: type[ModelT]) -> list[ModelT]:
    if stream is None:
        return []
    try:
        data = json.load(stream)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"{stream.name}: {e}") from e
    if not isinstance(data, list):
        raise click.BadParameter(f"{stream.name}: expected a JSON list")
    try:
        return [model.model_validate(item) for item in data]
    except pydantic.ValidationError as e:
        raise click.BadParameter(f"{stream.name}: {e}") from e


@click.group()
@click.version_option(package_name="forum-markup")
@click.option("-v", "--verbose", is_flag=True, envvar="FORUM_MARKUP_VERBOSE", help="Log every stage.")
def cli(verbose: bool) -> None:
    """Forum Markup - render BBCode forum posts to HTML."""
    if verbose:
        _configure_logging()


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option(
    "--smileys",
    "smileys_file",
    type=click.File("r", encoding="utf-8"),
    envvar="FORUM_MARKUP_SMILEYS",
    default=None,
    help='JSON list of {"code": ..., "path": ...} objects.',
)
@click.option(
    "--users",
    "users_file",
    type=click.File("r", encoding="utf-8"),
    envvar="FORUM_MARKUP_USERS",
    default=None,
    help='JSON list of {"id": ..., "user_name": ..., "display_name": ...} objects.',
)
@click.option("--author", "author_id", default=None, help="Id of the posting user.")
@click.option(
    "--fetch/--no-fetch",
    "fetch_remote",
    envvar="FORUM_MARKUP_FETCH",
    default=True,
    help="Fetch linked pages for cards.",
)
@click.option(
    "--timeout",
    "fetch_timeout",
    type=click.FloatRange(min=0, min_open=True),
    envvar="FORUM_MARKUP_FETCH_TIMEOUT",
    default=3.0,
    show_default=True,
    help="Seconds allowed for one linked page.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON.")
def render(
    source: IO[str],
    smileys_file: IO[str] | None,
    users_file: IO[str] | None,
    author_id: str | None,
    fetch_remote: bool,
    fetch_timeout: float,
    as_json: bool,
) -> None:
    """Run the full processing pipeline over a post."""
    from forum_markup.core.processing.options import ProcessingOptions
    from forum_markup.core.processing.pipeline import MessageProcessor
    from forum_markup.core.processing.ports import (
        InMemorySmileyRepository,
        InMemoryUserDirectory,
    )

    smileys = _load_models(smileys_file, Smiley)
    users = _load_models(users_file, User)
    options = ProcessingOptions(fetch_remote=fetch_remote, fetch_timeout=fetch_timeout)
    body = source.read()

    async def _run():
        async with MessageProcessor(
            InMemorySmileyRepository(smileys),
            InMemoryUserDirectory(users),
            options=options,
        ) as processor:
            return await processor.process(body, author_id)

    try:
        message = asyncio.run(_run())
    except ForumMarkupError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        _print(message.model_dump_json(indent=2))
        return

    _print(message.display_body)
    for card in message.cards:
        _print(card)


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option(
    "-f",
    "--format",
    "target",
    type=click.Choice(["html", "markup", "text"], case_sensitive=False),
    default="html",
    show_default=True,
    help="Representation to print.",
)
def parse(source: IO[str], target: str) -> None:
    """Parse a post and print one rendering of its syntax tree."""
    from forum_markup.core.bbcode import RenderTarget
    from forum_markup.core.bbcode import parse as parse_markup

    tree = parse_markup(source.read())
    _print(tree.render(RenderTarget(target.lower())))
