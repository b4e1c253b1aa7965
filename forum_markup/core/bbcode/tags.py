"""Tag grammar: the static table of recognised BBCode tags."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Mapping, Sequence

CONTENT_ATTRIBUTE = "content"

_SAFE_SCHEMES = frozenset({"http", "https"})
_SCHEME = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")
# Browsers ignore control characters and spaces inside a scheme
_IGNORED_URL_CHARACTERS = re.compile(r"[\x00-\x20\x7f]")


def is_safe_url(value: str) -> bool:
    """Return True for http(s) and relative URLs; False for any other scheme."""
    m = _SCHEME.match(_IGNORED_URL_CHARACTERS.sub("", value))
    return m is None or m.group(1).lower() in _SAFE_SCHEMES


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AttributeDefinition:
    """A value a tag instance can carry.

    ``own_value`` attributes bind ``[tag=value]``; the others bind
    ``[tag name=value]``.  Both forms may share a name, in which case they
    feed the same template placeholder.
    """

    name: str
    default: str = ""
    own_value: bool = False
    # Returns False for values the tag must not be rendered with
    validator: Callable[[str], bool] | None = None


@dataclass(frozen=True)
class TagDefinition:
    name: str
    opening_template: str
    closing_template: str
    attributes: Sequence[AttributeDefinition] = field(default_factory=tuple)
    # False => content is rendered verbatim (escaped), no nested tags
    allows_nested_tags: bool = True
    # True => inner text becomes the implicit ``content`` attribute
    content_as_attribute: bool = False
    content_validator: Callable[[str], bool] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", tuple(self.attributes))
        own_values = [a for a in self.attributes if a.own_value]
        if len(own_values) > 1:
            raise ValueError(f"Tag '{self.name}' declares more than one own-value attribute")

    @property
    def own_value_attribute(self) -> AttributeDefinition | None:
        for attribute in self.attributes:
            if attribute.own_value:
                return attribute
        return None

    def find_named_attribute(self, name: str) -> AttributeDefinition | None:
        for attribute in self.attributes:
            if not attribute.own_value and attribute.name == name:
                return attribute
        return None

    def accepts(self, values: Mapping[str, str]) -> bool:
        """Check bound attribute values (and content) against their validators."""
        for attribute in self.attributes:
            if attribute.validator is None:
                continue
            if not attribute.validator(values.get(attribute.name, attribute.default)):
                return False
        if self.content_validator is not None:
            return self.content_validator(values.get(CONTENT_ATTRIBUTE, ""))
        return True

    def default_attributes(self) -> dict[str, str]:
        """Return every declared attribute mapped to its default value."""
        defaults: dict[str, str] = {}
        for attribute in self.attributes:
            defaults.setdefault(attribute.name, attribute.default)
        return defaults


# ---------------------------------------------------------------------------
# The grammar
# ---------------------------------------------------------------------------

TAGS: tuple[TagDefinition, ...] = (
    TagDefinition("b", '<span class="bbc-bold">', "</span>"),
    TagDefinition("s", '<span class="bbc-strike">', "</span>"),
    TagDefinition("i", '<span class="bbc-italic">', "</span>"),
    TagDefinition("u", '<span class="bbc-underline">', "</span>"),
    TagDefinition("code", '<div class="bbc-code">', "</div>", allows_nested_tags=False),
    TagDefinition(
        "img",
        '<img class="bbc-image" src="${content}" />',
        "",
        allows_nested_tags=False,
        content_as_attribute=True,
        content_validator=is_safe_url,
    ),
    TagDefinition("quote", '<blockquote class="bbc-quote">', "</blockquote>"),
    TagDefinition("ul", '<ul class="bbc-list">', "</ul>"),
    TagDefinition("ol", '<ol class="bbc-list">', "</ol>"),
    TagDefinition("li", '<li class="bbc-list-item">', "</li>"),
    TagDefinition(
        "url",
        '<a class="bbc-anchor" href="${href}" target="_blank">',
        "</a>",
        attributes=(
            AttributeDefinition("href", own_value=True, validator=is_safe_url),
            AttributeDefinition("href", validator=is_safe_url),
        ),
    ),
    TagDefinition(
        "color",
        '<span style="color: ${color};">',
        "</span>",
        attributes=(
            AttributeDefinition("color", own_value=True),
            AttributeDefinition("color"),
        ),
    ),
)

# Inserted by smiley resolution only; authors cannot write it.
SMILEY_TAG = TagDefinition(
    "smiley",
    '<img class="bbc-smiley" src="${content}" />',
    "",
    allows_nested_tags=False,
    content_as_attribute=True,
)

_TAGS_BY_NAME: dict[str, TagDefinition] = {tag.name: tag for tag in TAGS}


def get_tag(name: str) -> TagDefinition | None:
    """Return the definition registered under *name* (case-sensitive), or None."""
    return _TAGS_BY_NAME.get(name)
