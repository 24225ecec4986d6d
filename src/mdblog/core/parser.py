"""Post parser: frontmatter header, markdown body, slug and summary."""

import html
import logging
import re
from datetime import date
from pathlib import PurePosixPath
from xml.etree.ElementTree import Element

from markdown import Markdown
from markdown.extensions import Extension
from markdown.inlinepatterns import SimpleTagInlineProcessor
from markdown.treeprocessors import Treeprocessor

from mdblog.core.errors import MalformedStructureError, RenderError
from mdblog.core.models import NO_DATE, Post

logger = logging.getLogger(__name__)

FRONTMATTER_DELIMITER = "---"
TITLE_PREFIX = "Title: "
DATE_PREFIX = "Date: "

SUMMARY_LENGTH = 150
SUMMARY_MARKER = "..."

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")

# Pattern for strikethrough: ~~text~~
# Group 2 must contain the text (SimpleTagInlineProcessor expectation)
STRIKETHROUGH_PATTERN = r"(~~)(.*?)~~"

# URL schemes that never survive into rendered links or images.
UNSAFE_URL_PATTERN = re.compile(
    r"^(javascript|vbscript|file|data(?!:image/(png|gif|jpeg|webp);)):",
    re.IGNORECASE,
)

# Browsers drop these characters before reading a URL scheme.
URL_IGNORED_CHARS = re.compile(r"[\x00-\x20\x7f]")


def is_unsafe_url(url: str) -> bool:
    """Return True if *url* resolves to a script-capable scheme.

    The serializer keeps character references in attributes and browsers
    decode them, so they are decoded here before the scheme is checked.
    """
    decoded = URL_IGNORED_CHARS.sub("", html.unescape(url))
    return UNSAFE_URL_PATTERN.match(decoded) is not None


class StrikethroughExtension(Extension):
    """Markdown extension for ~~strikethrough~~ text."""

    def extendMarkdown(self, md: Markdown) -> None:
        """Add strikethrough pattern to markdown parser."""
        md.inlinePatterns.register(
            SimpleTagInlineProcessor(STRIKETHROUGH_PATTERN, "del"),
            "strikethrough",
            50,
        )


class UnsafeUrlTreeprocessor(Treeprocessor):
    """Blank out href/src attributes that point at script-capable URLs."""

    ATTRIBUTES = {"a": "href", "img": "src"}

    def run(self, root: Element) -> None:
        for el in root.iter():
            attr = self.ATTRIBUTES.get(el.tag)
            if attr is None:
                continue
            if is_unsafe_url(el.get(attr, "")):
                el.set(attr, "")


class SafeHtmlExtension(Extension):
    """Make rendered output safe to embed without further escaping.

    Raw HTML in the source is escaped as text instead of being passed
    through, and links or images with unsafe URL schemes lose their target.
    """

    def extendMarkdown(self, md: Markdown) -> None:
        """Drop raw HTML handling and register the URL filter."""
        md.preprocessors.deregister("html_block", strict=False)
        md.inlinePatterns.deregister("html", strict=False)
        md.treeprocessors.register(UnsafeUrlTreeprocessor(md), "unsafe_url", 5)


def create_parser() -> Markdown:
    """Create a Markdown parser for post bodies.

    Returns:
        Configured Markdown parser instance. Parsers keep state between
        conversions, so callers should not share one across threads.
    """
    return Markdown(
        extensions=[
            "fenced_code",
            "tables",
            "sane_lists",
            "pymdownx.tasklist",  # Task lists with checkboxes
            StrikethroughExtension(),  # ~~strikethrough~~
            SafeHtmlExtension(),  # must come last to strip raw HTML handling
        ]
    )


def render_markdown(content: str, source_name: str = "<string>") -> str:
    """Convert a markdown body to HTML.

    Args:
        content: Raw markdown text.
        source_name: Name used in the error if conversion fails.

    Returns:
        HTML string.

    Raises:
        RenderError: The converter raised.
    """
    try:
        return create_parser().convert(content)
    except Exception as e:
        raise RenderError(source_name, f"markdown conversion failed: {e}") from e


def derive_slug(source_name: str) -> str:
    """Return the base name of *source_name* without its extension.

    The extension starts at the last dot, so ".hidden" gives "" and
    "post." gives "post".
    """
    name = PurePosixPath(source_name).name
    stem, dot, _ = name.rpartition(".")
    return stem if dot else name


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD header value, returning NO_DATE if it is invalid."""
    value = value.strip()
    if DATE_PATTERN.fullmatch(value):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
    return NO_DATE


def make_summary(body: str) -> str:
    """Return a listing preview of the raw body.

    Length is counted in characters, not bytes.
    """
    if len(body) > SUMMARY_LENGTH:
        return body[:SUMMARY_LENGTH] + SUMMARY_MARKER
    return body


def split_frontmatter(source_name: str, text: str) -> tuple[str, str]:
    """Split a post into its header block and body.

    Returns:
        Tuple of (header, body). The line break ending the closing
        delimiter line is not part of the body.

    Raises:
        MalformedStructureError: Fewer than two delimiters, or nothing at
            all after the second one.
    """
    parts = text.split(FRONTMATTER_DELIMITER, 2)
    if len(parts) < 3:
        raise MalformedStructureError(
            source_name, "expected '---' header block followed by a body"
        )
    _, header, body = parts
    if not body:
        raise MalformedStructureError(source_name, "no body after header block")
    if body.startswith("\r\n"):
        body = body[2:]
    elif body.startswith("\n"):
        body = body[1:]
    return header, body


def parse_post(source_name: str, raw: bytes | str) -> Post:
    """Parse one source document into a Post.

    Args:
        source_name: Entry name, e.g. "hello-world.md". Used for the slug.
        raw: Document content, UTF-8 bytes or already decoded text.

    Returns:
        The parsed Post.

    Raises:
        MalformedStructureError: Not UTF-8, or the header layout is missing.
        RenderError: Markdown conversion failed.
    """
    if isinstance(raw, bytes):
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedStructureError(source_name, f"not valid UTF-8: {e}") from e
    else:
        text = raw

    header, body = split_frontmatter(source_name, text)

    title = ""
    published_at = NO_DATE
    for line in header.splitlines():
        if line.startswith(TITLE_PREFIX):
            title = line.removeprefix(TITLE_PREFIX)
        elif line.startswith(DATE_PREFIX):
            value = line.removeprefix(DATE_PREFIX)
            published_at = parse_date(value)
            if published_at == NO_DATE:
                logger.debug("Ignoring invalid date %r in %s", value, source_name)

    return Post(
        slug=derive_slug(source_name),
        title=title,
        published_at=published_at,
        content_html=render_markdown(body, source_name),
        summary=make_summary(body),
        source_name=source_name,
    )
