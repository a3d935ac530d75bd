"""UI state and the events that move it.

Every user action and backend result is a small event object. `apply_event`
turns the current state plus one event into the next state without side
effects, so each transition can be tested without rendering anything.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum

from munch_log.domain.drafts import (
    PendingPhoto,
    VisitDraft,
    apply_place,
    draft_from_visit,
    new_draft,
)
from munch_log.domain.listing import SortMode, visible_visits
from munch_log.domain.models import Identity, VisitRecord
from munch_log.domain.places import PlaceDetails, PlaceSuggestion

SIGN_UP_NOTICE = "Check your email to confirm your account!"


class AuthMode(Enum):
    """Which auth form tab is active."""

    LOGIN = "login"
    SIGNUP = "signup"


class ModalMode(Enum):
    """Add/edit modal visibility."""

    CLOSED = "closed"
    ADD = "add"
    EDIT = "edit"


@dataclass(frozen=True)
class AppState:
    """Everything one browser session shows."""

    loading: bool = True
    identity: Identity | None = None
    visits: list[VisitRecord] = field(default_factory=list)
    auth_mode: AuthMode = AuthMode.LOGIN
    auth_email: str = ""
    auth_error: str = ""
    notice: str = ""
    search_term: str = ""
    filter_rating: int | None = None
    sort_by: SortMode = SortMode.DATE
    modal: ModalMode = ModalMode.CLOSED
    editing: VisitRecord | None = None
    draft: VisitDraft = field(default_factory=VisitDraft)
    place_suggestions: list[PlaceSuggestion] = field(default_factory=list)

    @property
    def displayed_visits(self) -> list[VisitRecord]:
        """The list after search, rating filter and sort."""
        return visible_visits(
            self.visits, self.search_term, self.filter_rating, self.sort_by
        )


@dataclass(frozen=True)
class SessionResolved:
    identity: Identity | None


@dataclass(frozen=True)
class AuthModeSelected:
    mode: AuthMode


@dataclass(frozen=True)
class AuthSubmitted:
    email: str


@dataclass(frozen=True)
class SignedIn:
    identity: Identity


@dataclass(frozen=True)
class SignedUp:
    pass


@dataclass(frozen=True)
class AuthFailed:
    message: str


@dataclass(frozen=True)
class NoticeShown:
    pass


@dataclass(frozen=True)
class SignedOut:
    pass


@dataclass(frozen=True)
class VisitsLoaded:
    visits: list[VisitRecord]


@dataclass(frozen=True)
class FiltersChanged:
    search_term: str
    filter_rating: int | None
    sort_by: SortMode


@dataclass(frozen=True)
class AddOpened:
    today: date


@dataclass(frozen=True)
class EditOpened:
    visit: VisitRecord


@dataclass(frozen=True)
class DraftEdited:
    """Field values posted from the modal form."""

    restaurant_name: str
    address: str
    date_visited: date | None
    dishes_ordered: str
    rating: int | None
    notes: str
    photo: PendingPhoto | None = None
    photo_preview: str = ""


@dataclass(frozen=True)
class PlacesSuggested:
    suggestions: list[PlaceSuggestion]


@dataclass(frozen=True)
class PlaceSelected:
    place: PlaceDetails


@dataclass(frozen=True)
class ModalClosed:
    """Cancel or successful submit; the draft goes back to defaults."""

    today: date


Event = (
    SessionResolved
    | AuthModeSelected
    | AuthSubmitted
    | SignedIn
    | SignedUp
    | AuthFailed
    | NoticeShown
    | SignedOut
    | VisitsLoaded
    | FiltersChanged
    | AddOpened
    | EditOpened
    | DraftEdited
    | PlacesSuggested
    | PlaceSelected
    | ModalClosed
)


def apply_event(state: AppState, event: Event) -> AppState:  # noqa: PLR0911, PLR0912
    """Return the state that follows an event."""
    if isinstance(event, SessionResolved):
        return replace(state, loading=False, identity=event.identity)
    if isinstance(event, AuthModeSelected):
        return replace(state, auth_mode=event.mode, auth_error="")
    if isinstance(event, AuthSubmitted):
        return replace(
            state,
            auth_email=event.email,
            auth_error="",
            notice="",
        )
    if isinstance(event, SignedIn):
        return replace(
            state,
            loading=False,
            identity=event.identity,
            auth_email="",
            auth_error="",
        )
    if isinstance(event, SignedUp):
        return replace(state, notice=SIGN_UP_NOTICE, auth_mode=AuthMode.LOGIN)
    if isinstance(event, AuthFailed):
        return replace(state, auth_error=event.message)
    if isinstance(event, NoticeShown):
        return replace(state, notice="")
    if isinstance(event, SignedOut):
        # The next account on this browser starts from defaults.
        return AppState(loading=False)
    if isinstance(event, VisitsLoaded):
        return replace(state, visits=list(event.visits))
    if isinstance(event, FiltersChanged):
        return replace(
            state,
            search_term=event.search_term,
            filter_rating=event.filter_rating,
            sort_by=event.sort_by,
        )
    if isinstance(event, AddOpened):
        return replace(
            state,
            modal=ModalMode.ADD,
            editing=None,
            draft=new_draft(event.today),
            place_suggestions=[],
        )
    if isinstance(event, EditOpened):
        return replace(
            state,
            modal=ModalMode.EDIT,
            editing=event.visit,
            draft=draft_from_visit(event.visit),
            place_suggestions=[],
        )
    if isinstance(event, DraftEdited):
        return replace(state, draft=_edit_draft(state.draft, event))
    if isinstance(event, PlacesSuggested):
        return replace(state, place_suggestions=list(event.suggestions))
    if isinstance(event, PlaceSelected):
        return replace(
            state, draft=apply_place(state.draft, event.place), place_suggestions=[]
        )
    if isinstance(event, ModalClosed):
        return replace(
            state,
            modal=ModalMode.CLOSED,
            editing=None,
            draft=new_draft(event.today),
            place_suggestions=[],
        )
    raise TypeError(f"Unknown event: {event!r}")


def _edit_draft(draft: VisitDraft, event: DraftEdited) -> VisitDraft:
    edited = replace(
        draft,
        restaurant_name=event.restaurant_name,
        address=event.address,
        date_visited=event.date_visited,
        dishes_ordered=event.dishes_ordered,
        rating=event.rating,
        notes=event.notes,
    )
    if event.photo is None:
        return edited
    return replace(edited, photo=event.photo, photo_preview=event.photo_preview)
