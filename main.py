"""
Main API module for Paste Platform.

Responsibilities:
    - Expose HTTP endpoints to create, view, fetch and update pastes
    - Map entry service failures to status codes (API clients) or an
      error-page redirect (browsers)
    - Reveal a generated edit code exactly once via a short-lived cookie
    - Initialize the storage backend on startup and close it on shutdown

Architecture:
    - App Factory pattern (create_app) for test isolation and DI.
    - Storage is chosen once by the factory (fs / pg / memory) and injected
      into the EntryManager; routes only talk to the manager.
    - Static front-end assets (PASTE_PUBLIC_DIR) are mounted last so API
      routes take precedence.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field, ValidationError

from paste_platform.config import settings
from paste_platform.manager.entry_manager import EntryManager
from paste_platform.manager.errors import EntryError
from paste_platform.manager.identifiers import IdentifierGenerator
from paste_platform.storage.base import BaseStorage
from paste_platform.storage.sanitize import is_canonical_id
from paste_platform.storage.storage_factory import get_storage

log = logging.getLogger("paste")

_STATUS_BY_REASON = {
    "empty_content": 400,
    "unauthorized": 403,
    "not_found": 404,
    "url_taken": 409,
    "save_failed": 500,
}


class CreateRequest(BaseModel):
    """Request payload for creating a new paste."""
    content: Optional[str] = None
    custom_url: Optional[str] = Field(None, alias="customUrl")
    edit_code: Optional[str] = Field(None, alias="editCode")


class UpdateRequest(BaseModel):
    """Request payload for updating a paste."""
    content: Optional[str] = None
    edit_code: Optional[str] = Field(None, alias="editCode")
    new_edit_code: Optional[str] = Field(None, alias="newEditCode")
    new_url: Optional[str] = Field(None, alias="newUrl")


_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def _body_parser(model):
    """
    Build a dependency that reads `model` from either a JSON body or an
    HTML form post (the browser front end submits forms).

    Malformed bodies surface as the usual 422 request validation error.
    """
    async def parse(request: Request):
        content_type = request.headers.get("content-type", "").lower()
        try:
            if content_type.startswith(_FORM_TYPES):
                data = dict(await request.form())
            else:
                data = await request.json()
            return model.model_validate(data)
        except ValidationError as exc:
            raise RequestValidationError(exc.errors()) from exc
        except ValueError as exc:
            raise RequestValidationError(
                [{"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error", "input": {}}]
            ) from exc

    return parse


parse_create_request = _body_parser(CreateRequest)
parse_update_request = _body_parser(UpdateRequest)


def create_app(storage: Optional[BaseStorage] = None, public_dir: Optional[str] = None) -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Args:
        storage (Optional[BaseStorage]): Backend to use; defaults to the one
            selected by PASTE_STORAGE_BACKEND.
        public_dir (Optional[str]): Static assets directory; defaults to
            PASTE_PUBLIC_DIR.

    Returns:
        FastAPI: A configured application. The backend is initialized in the
        lifespan startup (a failure aborts startup) and closed on shutdown.
    """
    if not logging.getLogger().handlers:
        logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL, logging.INFO))

    # ----------------------------------------------------------------
    # Per-app instances (isolated for tests, swappable for production)
    # ----------------------------------------------------------------
    storage = storage if storage is not None else get_storage()
    public = Path(public_dir or settings.PUBLIC_DIR)

    # Single-segment paths served by the app itself; filled once routes exist.
    route_segments = set()

    def _shadowed(entry_id: str) -> bool:
        """True when GET /<entry_id> would never reach the entry."""
        return entry_id in route_segments or (public / entry_id).is_file()

    entry_manager = EntryManager(storage=storage, identifiers=IdentifierGenerator(), reserved=_shadowed)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        storage.initialize()
        log.info("Paste storage backend: %s", storage.name)
        try:
            yield
        finally:
            log.info("Shutting down, closing storage backend")
            storage.close()

    app = FastAPI(
        title="Paste Platform",
        description="Minimal pastebin with editable entries and pluggable storage",
        docs_url="/docs",
        lifespan=lifespan,
    )
    app.state.storage = storage
    app.state.entry_manager = entry_manager

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept"],
    )

    @app.middleware("http")
    async def allow_framing(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Frame-Options"] = "ALLOWALL"
        return response

    # ----------------------------------------------------------------
    # Utilities
    # ----------------------------------------------------------------
    def _wants_html(request: Request) -> bool:
        """Browsers get redirects/pages; API clients get JSON."""
        return "text/html" in request.headers.get("accept", "").lower()

    def _error_response(request: Request, exc: EntryError) -> Response:
        if exc.reason == "not_found":
            return _not_found(request)
        if _wants_html(request):
            return RedirectResponse(url=f"/error.html?message={quote(exc.message)}", status_code=303)
        return JSONResponse(
            {"detail": exc.message, "reason": exc.reason},
            status_code=_STATUS_BY_REASON.get(exc.reason, 500),
        )

    def _not_found(request: Request) -> Response:
        if _wants_html(request):
            page = public / "404.html"
            if page.is_file():
                return FileResponse(page, status_code=404, media_type="text/html")
            return HTMLResponse("<h1>404</h1><p>Entry not found</p>", status_code=404)
        return JSONResponse({"detail": "Entry not found", "reason": "not_found"}, status_code=404)

    def _links(entry_id: str) -> dict:
        return {
            "id": entry_id,
            "view_url": app.url_path_for("view_entry", entry_id=entry_id),
            "edit_url": app.url_path_for("edit_entry", entry_id=entry_id),
        }

    def _saved_response(request: Request, message: str, entry_id: str) -> Response:
        """Browsers continue to the edit page; API clients get the links as JSON."""
        links = _links(entry_id)
        if _wants_html(request):
            return RedirectResponse(url=links["edit_url"], status_code=303)
        return JSONResponse({"message": message, **links})

    @app.exception_handler(EntryError)
    async def entry_error_handler(request: Request, exc: EntryError):
        return _error_response(request, exc)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        if _wants_html(request):
            return RedirectResponse(url=f"/error.html?message={quote('Internal server error')}", status_code=303)
        return JSONResponse({"detail": "Internal server error"}, status_code=500)

    # ----------------------------------------------------------------
    # Routes
    # ----------------------------------------------------------------
    @app.get("/health")
    def health():
        return {"status": "ok", "backend": storage.name}

    @app.get("/")
    def index():
        page = public / "index.html"
        if page.is_file():
            return FileResponse(page, media_type="text/html")
        return HTMLResponse("<h1>Paste Platform</h1><p>POST /create to add a paste.</p>")

    @app.get("/create")
    def create_redirect():
        return RedirectResponse(url="/", status_code=302)

    @app.post("/create")
    def create_entry(request: Request, req: CreateRequest = Depends(parse_create_request)):
        """
        Create a paste from a JSON body or a form post.

        Returns:
            JSON with message, final id and the view/edit paths; browsers are
            redirected (303) to the edit page instead.

        Notes:
            - When the edit code was generated, it is handed to the client
              once through the `showEditCode` cookie (see edit_entry).
        """
        result = entry_manager.create(req.content, req.custom_url, req.edit_code)
        response = _saved_response(request, "Entry created", result.id)
        if result.reveal_edit_code:
            response.set_cookie(
                settings.REVEAL_COOKIE_NAME,
                result.edit_code,
                max_age=settings.REVEAL_COOKIE_MAX_AGE,
                httponly=False,
                samesite="strict",
            )
        return response

    @app.get("/api/entry/{entry_id}")
    def api_entry(entry_id: str):
        """Public JSON projection of an entry (no edit code)."""
        if not is_canonical_id(entry_id):
            return JSONResponse({"error": "Entry not found"}, status_code=404)
        try:
            return entry_manager.fetch_for_edit(entry_id)
        except EntryError:
            return JSONResponse({"error": "Entry not found"}, status_code=404)

    @app.get("/{entry_id}")
    def view_entry(entry_id: str, request: Request):
        """Serve the stored content as raw HTML. Top-level static files win over entries."""
        if not is_canonical_id(entry_id):
            return _not_found(request)
        asset = public / entry_id
        if asset.is_file():
            return FileResponse(asset)
        return HTMLResponse(entry_manager.view(entry_id))

    @app.get("/{entry_id}/edit")
    def edit_entry(entry_id: str, request: Request):
        """
        Edit view data: the public entry plus, once, a freshly generated edit code.

        The reveal cookie is consumed here: its value is returned and the
        cookie is cleared, so the code is shown a single time. Browsers get
        the static edit page when one is shipped; it reads the entry from
        /api/entry/{id} and the cookie on its own.
        """
        if not is_canonical_id(entry_id):
            return _not_found(request)
        entry = entry_manager.fetch_for_edit(entry_id)
        page = public / "edit.html"
        if _wants_html(request) and page.is_file():
            return FileResponse(page, media_type="text/html")
        revealed = request.cookies.get(settings.REVEAL_COOKIE_NAME)
        response = JSONResponse({"entry": entry, "editCode": revealed})
        if revealed is not None:
            response.delete_cookie(settings.REVEAL_COOKIE_NAME, samesite="strict")
        return response

    @app.post("/{entry_id}/update")
    def update_entry(entry_id: str, request: Request, req: UpdateRequest = Depends(parse_update_request)):
        """Apply an authorized update from JSON or a form; the id changes after a rename."""
        if not is_canonical_id(entry_id):
            return _not_found(request)
        final_id = entry_manager.update(
            entry_id,
            req.edit_code,
            req.content,
            new_edit_code=req.new_edit_code,
            new_url=req.new_url,
        )
        return _saved_response(request, "Entry updated", final_id)

    route_segments.update(
        route.path.strip("/")
        for route in app.routes
        if "{" not in route.path and route.path.count("/") == 1
    )

    # Mounted AFTER the routes so API paths take precedence
    if public.is_dir():
        app.mount("/", StaticFiles(directory=str(public), html=True), name="static")

    return app


# `uvicorn main:app` and `from main import app` continue to work.
app = create_app()
