"""In-memory post index, built once at startup."""

import logging
from collections.abc import Iterator

from mdblog.core.errors import ParseError, SourceReadError
from mdblog.core.models import Post
from mdblog.core.parser import parse_post
from mdblog.core.sources import ContentSource

logger = logging.getLogger(__name__)


class PostIndex:
    """Immutable collection of parsed posts, newest first.

    Build it with :meth:`build`; the instance is read-only afterwards and
    safe to share between concurrent requests.
    """

    def __init__(self, posts: tuple[Post, ...] = ()):
        self._posts = tuple(posts)

    @classmethod
    def build(cls, source: ContentSource) -> "PostIndex":
        """Load, parse and sort every post from *source*.

        Entries that cannot be read or parsed are logged and skipped.

        Raises:
            SourceEnumerationError: The source could not be listed.
        """
        posts: list[Post] = []
        for name in source.list_names():
            try:
                raw = source.read(name)
            except SourceReadError as e:
                logger.warning("Skipping unreadable post: %s", e)
                continue
            try:
                posts.append(parse_post(name, raw))
            except ParseError as e:
                logger.warning("Skipping post that failed to parse: %s", e)

        posts.sort(key=lambda p: p.published_at, reverse=True)
        _warn_duplicate_slugs(posts)

        logger.info("Loaded %d posts", len(posts))
        return cls(tuple(posts))

    def list(self) -> tuple[Post, ...]:
        """Return all posts, most recent first."""
        return self._posts

    def find_by_slug(self, slug: str) -> Post | None:
        """Return the first post with *slug*, or None if there is none."""
        for post in self._posts:
            if post.slug == slug:
                return post
        return None

    def __len__(self) -> int:
        return len(self._posts)

    def __iter__(self) -> Iterator[Post]:
        return iter(self._posts)


def _warn_duplicate_slugs(posts: list[Post]) -> None:
    """Log slugs shared by more than one post; lookups return the first."""
    seen: dict[str, Post] = {}
    for post in posts:
        first = seen.setdefault(post.slug, post)
        if first is not post:
            logger.warning(
                "Duplicate slug %r: %s is shadowed by %s",
                post.slug,
                post.source_name,
                first.source_name,
            )
