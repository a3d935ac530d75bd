"""Per-browser controller driving the backend services."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from munch_log.domain.drafts import (
    PendingPhoto,
    draft_payload,
    missing_required,
    preview_data_url,
)
from munch_log.domain.errors import AuthFailure, PhotoUploadError, RecordStoreError
from munch_log.domain.listing import SortMode
from munch_log.services.photos import PhotoService
from munch_log.services.places import PlacesService
from munch_log.services.sessions import SessionService
from munch_log.services.view_state import (
    AddOpened,
    AppState,
    AuthFailed,
    AuthMode,
    AuthModeSelected,
    AuthSubmitted,
    DraftEdited,
    EditOpened,
    Event,
    FiltersChanged,
    ModalClosed,
    ModalMode,
    NoticeShown,
    PlaceSelected,
    PlacesSuggested,
    SessionResolved,
    SignedIn,
    SignedOut,
    SignedUp,
    VisitsLoaded,
    apply_event,
)
from munch_log.services.visits import VisitService

_logger = logging.getLogger(__name__)


@dataclass
class VisitLogController:
    """Owns one browser's state and turns user actions into backend calls.

    Auth failures are shown to the user. Record and upload failures only
    skip the state update, leaving the screen as it was.
    """

    session_service: SessionService
    visit_service: VisitService
    photo_service: PhotoService
    places_service: PlacesService
    state: AppState = field(default_factory=AppState)
    today: Callable[[], date] = field(default=date.today)

    def dispatch(self, event: Event) -> AppState:
        """Apply one event to the owned state."""
        self.state = apply_event(self.state, event)
        return self.state

    async def start(self) -> None:
        """Resolve the stored session once, then load visits."""
        if not self.state.loading:
            return
        identity = self.session_service.get_current_identity()
        self.dispatch(SessionResolved(identity))
        await self.refresh()

    async def refresh(self) -> None:
        """Re-read the visit list from the backend."""
        identity = self.state.identity
        if identity is None:
            return
        try:
            visits = self.visit_service.list_visits(identity)
        except RecordStoreError:
            _logger.warning("Listing visits failed", exc_info=True)
            return
        self.dispatch(VisitsLoaded(visits))

    def select_auth_mode(self, mode: AuthMode) -> None:
        self.dispatch(AuthModeSelected(mode))

    def consume_notice(self) -> str:
        """Return the pending one-shot notice and clear it."""
        notice = self.state.notice
        if notice:
            self.dispatch(NoticeShown())
        return notice

    async def submit_auth(self, email: str, password: str) -> None:
        """Sign in or sign up depending on the active auth tab."""
        self.dispatch(AuthSubmitted(email=email))
        try:
            if self.state.auth_mode is AuthMode.LOGIN:
                identity = self.session_service.sign_in(email, password)
            else:
                self.session_service.sign_up(email, password)
                self.dispatch(SignedUp())
                return
        except AuthFailure as exc:
            self.dispatch(AuthFailed(exc.message))
            return
        self.dispatch(SignedIn(identity))
        await self.refresh()

    def oauth_redirect(self, redirect_to: str) -> str | None:
        """Return the provider URL to redirect to, or None after an error."""
        try:
            return self.session_service.sign_in_with_oauth(redirect_to)
        except AuthFailure as exc:
            self.dispatch(AuthFailed(exc.message))
            return None

    async def complete_oauth(
        self, code: str | None, error: str | None = None
    ) -> None:
        """Finish the provider round trip."""
        try:
            identity = self.session_service.complete_oauth(code, error)
        except AuthFailure as exc:
            self.dispatch(SessionResolved(None))
            self.dispatch(AuthFailed(exc.message))
            return
        self.dispatch(SignedIn(identity))
        await self.refresh()

    def sign_out(self) -> None:
        self.session_service.sign_out()
        self.dispatch(SignedOut())

    def set_filters(
        self, search_term: str, filter_rating: int | None, sort_by: SortMode
    ) -> None:
        self.dispatch(FiltersChanged(search_term, filter_rating, sort_by))

    def open_add(self) -> None:
        self.dispatch(AddOpened(self.today()))

    def open_edit(self, visit_id: str) -> None:
        for visit in self.state.visits:
            if visit.id == visit_id:
                self.dispatch(EditOpened(visit))
                return

    def cancel(self) -> None:
        """Close the modal and throw the draft away."""
        self.dispatch(ModalClosed(self.today()))

    def edit_draft(  # noqa: PLR0913
        self,
        *,
        restaurant_name: str,
        address: str,
        date_visited: date | None,
        dishes_ordered: str,
        rating: int | None,
        notes: str,
        photo: PendingPhoto | None = None,
    ) -> None:
        """Copy posted form fields into the draft."""
        if self.state.modal is ModalMode.CLOSED:
            return
        self.dispatch(
            DraftEdited(
                restaurant_name=restaurant_name,
                address=address,
                date_visited=date_visited,
                dishes_ordered=dishes_ordered,
                rating=rating,
                notes=notes,
                photo=photo,
                photo_preview=preview_data_url(photo) if photo else "",
            )
        )

    async def lookup_places(self, text: str) -> None:
        self.dispatch(PlacesSuggested(await self.places_service.search(text)))

    async def select_place(self, place_id: str) -> None:
        """Enrich the draft with a chosen suggestion."""
        place = await self.places_service.get_details(place_id)
        if place is None:
            return
        self.dispatch(PlaceSelected(place))

    async def submit_visit(self) -> bool:
        """Upload the pending photo, save the draft and reload the list."""
        identity = self.state.identity
        if identity is None or self.state.modal is ModalMode.CLOSED:
            return False
        draft = self.state.draft
        missing = missing_required(draft)
        if missing:
            _logger.info("Visit form incomplete: %s", ", ".join(missing))
            return False

        photo_url = draft.photo_url or None
        if draft.photo is not None:
            try:
                photo_url = self.photo_service.upload(identity, draft.photo)
            except PhotoUploadError:
                _logger.warning("Photo upload failed", exc_info=True)

        payload = draft_payload(draft, photo_url)
        editing = self.state.editing
        try:
            if editing is not None:
                self.visit_service.update_visit(editing.id, payload)
            else:
                self.visit_service.create_visit(identity, payload)
        except RecordStoreError:
            _logger.warning("Saving visit failed", exc_info=True)
            return False
        await self.refresh()
        self.dispatch(ModalClosed(self.today()))
        return True

    async def delete_visit(self, visit_id: str, confirmed: bool) -> bool:
        """Delete a visit once the user has confirmed."""
        if not confirmed or self.state.identity is None:
            return False
        try:
            self.visit_service.delete_visit(visit_id)
        except RecordStoreError:
            _logger.warning("Deleting visit failed", exc_info=True)
            return False
        await self.refresh()
        return True
