"""mdblog FastAPI application."""

import logging
from contextlib import asynccontextmanager
from datetime import date
from pathlib import Path

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from mdblog.config import Settings, settings as default_settings
from mdblog.core.index import PostIndex
from mdblog.core.models import NO_DATE
from mdblog.core.sources import DirectorySource

logger = logging.getLogger(__name__)

# Setup templates and static files
templates_path = Path(__file__).parent / "templates"
static_path = Path(__file__).parent / "static"

templates = Jinja2Templates(directory=str(templates_path))


def pubdate_filter(value: date | None) -> str:
    """Format a publication date for display; empty when unknown."""
    if value is None or value == NO_DATE:
        return ""
    return value.strftime("%B %d, %Y").replace(" 0", " ")


templates.env.filters["pubdate"] = pubdate_filter


def get_index(request: Request) -> PostIndex:
    """Return the post index installed on the application."""
    return request.app.state.index


def create_app(
    settings: Settings | None = None,
    index: PostIndex | None = None,
) -> FastAPI:
    """Create the blog application.

    Args:
        settings: Settings to use; defaults to the environment-derived ones.
        index: Prebuilt index. When omitted, the index is built from
            ``settings.content_dir`` during application startup, and a
            content directory that cannot be listed aborts startup.

    Returns:
        The FastAPI application.
    """
    if settings is None:
        settings = default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan: load posts before serving."""
        if getattr(app.state, "index", None) is None:
            source = DirectorySource(settings.content_dir, settings.content_pattern)
            app.state.index = PostIndex.build(source)
        yield

    app = FastAPI(
        title=settings.app_title,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.index = index
    app.mount("/static", StaticFiles(directory=str(static_path)), name="static")

    # Template context helper
    def get_context(**kwargs) -> dict:
        """Create base context for templates."""
        return {"app_title": settings.app_title, **kwargs}

    @app.get("/", response_class=HTMLResponse)
    async def list_posts(request: Request, index: PostIndex = Depends(get_index)):
        """Home page - list all posts, newest first."""
        return templates.TemplateResponse(
            request,
            "index.html",
            get_context(title=settings.app_title, posts=index.list()),
        )

    @app.get("/post/{slug}", response_class=HTMLResponse)
    async def view_post(
        request: Request, slug: str, index: PostIndex = Depends(get_index)
    ):
        """View a single post."""
        post = index.find_by_slug(slug)
        if post is None:
            raise HTTPException(status_code=404, detail="Post not found")
        return templates.TemplateResponse(
            request,
            "post.html",
            get_context(title=post.title or post.slug, post=post),
        )

    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=default_settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        "Listening on %s:%d", default_settings.host, default_settings.port
    )
    uvicorn.run(app, host=default_settings.host, port=default_settings.port)
