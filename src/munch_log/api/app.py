"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import date
from pathlib import Path

from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from munch_log.app_logging import configure_logging
from munch_log.containers import AppContainer
from munch_log.domain.drafts import PendingPhoto
from munch_log.domain.listing import RATING_CHOICES, SortMode
from munch_log.services.controller import VisitLogController
from munch_log.services.view_state import AuthMode, ModalMode

_TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)
    cookie_name = container.settings.session_cookie_name
    templates = Jinja2Templates(directory=str(_TEMPLATES_DIR))
    templates.env.filters["visit_date"] = _format_visit_date

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.middleware("http")
    async def attach_browser_session(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Bind the request to its browser's controller, creating one if needed."""
        if request.url.path == "/health":
            return await call_next(request)
        state_container: AppContainer = request.app.state.container
        store = state_container.session_store
        session_id = request.cookies.get(cookie_name)
        controller = store.get(session_id)
        created = controller is None
        if controller is None:
            session_id, controller = store.create()
            logger.info("Started browser session")
        request.state.controller = controller
        request.state.session_id = session_id
        await controller.start()
        response = await call_next(request)
        if created:
            response.set_cookie(
                cookie_name,
                session_id,
                max_age=state_container.settings.session_ttl_seconds,
                httponly=True,
                samesite="lax",
            )
        return response

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    async def index(
        request: Request,
        controller: VisitLogController = Depends(_controller),
        search: str | None = None,
        rating: str | None = None,
        sort: str | None = None,
    ) -> HTMLResponse:
        """Render whichever screen the browser's state calls for."""
        if search is not None or rating is not None or sort is not None:
            controller.set_filters(
                search_term=search or "",
                filter_rating=_parse_int(rating),
                sort_by=SortMode.parse(sort),
            )
        state = controller.state
        if state.identity is None:
            return templates.TemplateResponse(
                request,
                "auth.html",
                {
                    "state": state,
                    "notice": controller.consume_notice(),
                    "AuthMode": AuthMode,
                },
            )
        return templates.TemplateResponse(
            request,
            "visits.html",
            {
                "state": state,
                "visits": state.displayed_visits,
                "rating_choices": RATING_CHOICES,
                "sort_modes": list(SortMode),
                "places_enabled": container.places_service.enabled,
                "ModalMode": ModalMode,
            },
        )

    @app.post("/auth/mode")
    async def auth_mode(
        mode: str = Form(default="login"),
        controller: VisitLogController = Depends(_controller),
    ) -> RedirectResponse:
        selected = AuthMode.SIGNUP if mode == AuthMode.SIGNUP.value else AuthMode.LOGIN
        controller.select_auth_mode(selected)
        return _home()

    @app.post("/auth/submit")
    async def auth_submit(
        email: str = Form(default=""),
        password: str = Form(default=""),
        controller: VisitLogController = Depends(_controller),
    ) -> RedirectResponse:
        """Sign in or sign up with the posted credentials."""
        await controller.submit_auth(email, password)
        return _home()

    @app.get("/auth/oauth")
    async def auth_oauth(
        request: Request, controller: VisitLogController = Depends(_controller)
    ) -> RedirectResponse:
        """Send the browser to the OAuth provider."""
        redirect_to = str(request.url_for("auth_callback"))
        url = controller.oauth_redirect(redirect_to)
        if url is None:
            return _home()
        return RedirectResponse(url, status_code=303)

    @app.get("/auth/callback")
    async def auth_callback(
        code: str | None = None,
        error_description: str | None = None,
        controller: VisitLogController = Depends(_controller),
    ) -> RedirectResponse:
        """Land here after the provider redirects back."""
        await controller.complete_oauth(code, error_description)
        return _home()

    @app.post("/auth/logout")
    async def auth_logout(
        request: Request, controller: VisitLogController = Depends(_controller)
    ) -> RedirectResponse:
        """Sign out and drop this browser's session, Supabase client included."""
        controller.sign_out()
        container.session_store.discard(request.state.session_id)
        response = _home()
        response.delete_cookie(cookie_name)
        return response

    @app.post("/visits/new")
    async def open_add(
        controller: VisitLogController = Depends(_controller),
    ) -> RedirectResponse:
        controller.open_add()
        return _home()

    @app.post("/visits/form")
    async def submit_form(  # noqa: PLR0913
        restaurant_name: str = Form(default=""),
        address: str = Form(default=""),
        date_visited: str = Form(default=""),
        dishes_ordered: str = Form(default=""),
        rating: str = Form(default=""),
        notes: str = Form(default=""),
        action: str = Form(default="save"),
        photo: UploadFile | None = File(default=None),
        controller: VisitLogController = Depends(_controller),
    ) -> RedirectResponse:
        """Store posted fields in the draft, then search places or save."""
        controller.edit_draft(
            restaurant_name=restaurant_name,
            address=address,
            date_visited=_parse_date(date_visited),
            dishes_ordered=dishes_ordered,
            rating=_parse_int(rating),
            notes=notes,
            photo=await _read_photo(photo),
        )
        if action == "lookup":
            await controller.lookup_places(restaurant_name)
        else:
            await controller.submit_visit()
        return _home()

    @app.post("/visits/form/place")
    async def select_place(
        place_id: str = Form(default=""),
        controller: VisitLogController = Depends(_controller),
    ) -> RedirectResponse:
        await controller.select_place(place_id)
        return _home()

    @app.post("/visits/form/cancel")
    async def cancel_form(
        controller: VisitLogController = Depends(_controller),
    ) -> RedirectResponse:
        controller.cancel()
        return _home()

    @app.post("/visits/{visit_id}/edit")
    async def open_edit(
        visit_id: str, controller: VisitLogController = Depends(_controller)
    ) -> RedirectResponse:
        controller.open_edit(visit_id)
        return _home()

    @app.post("/visits/{visit_id}/delete")
    async def delete_visit(
        visit_id: str,
        confirmed: str = Form(default=""),
        controller: VisitLogController = Depends(_controller),
    ) -> RedirectResponse:
        """Delete a visit; the page posts confirmed=yes only after the prompt."""
        await controller.delete_visit(visit_id, confirmed=confirmed == "yes")
        return _home()

    return app


def _controller(request: Request) -> VisitLogController:
    return request.state.controller


def _home() -> RedirectResponse:
    return RedirectResponse("/", status_code=303)


async def _read_photo(upload: UploadFile | None) -> PendingPhoto | None:
    """Return the uploaded photo, or None when the file input was left empty."""
    if upload is None or not upload.filename:
        return None
    content = await upload.read()
    if not content:
        return None
    return PendingPhoto(
        filename=upload.filename,
        content_type=upload.content_type or "application/octet-stream",
        content=content,
    )


def _parse_date(raw: str) -> date | None:
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        return None


def _parse_int(raw: str | None) -> int | None:
    if raw is None:
        return None
    cleaned = raw.strip()
    if not cleaned.lstrip("-").isdigit():
        return None
    return int(cleaned)


def _format_visit_date(value: date) -> str:
    return f"{value.month}/{value.day}/{value.year}"
