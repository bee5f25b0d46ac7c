"""Read-only queries over the assignment table.

Every search is assembled from small predicate functions so each filter can be
inspected and tested on its own. Nothing here writes to the session.
"""
import logging
import math
from dataclasses import dataclass, field
from datetime import date, timedelta

from sqlalchemy import String, and_, func, or_

from asset_manager.app import db
from asset_manager.app.errors import InvalidArgument
from asset_manager.app.models import (
    Asset, Assignment, AssignmentState, User, OPEN_ASSIGNMENT_STATES, TERMINAL_ASSIGNMENT_STATE)
from asset_manager.app.models.states import match_state

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    size: int = 20

    def __post_init__(self):
        if not isinstance(self.page, int) or self.page < 1:
            raise InvalidArgument(f'Page must be a positive integer, got {self.page!r}')
        if not isinstance(self.size, int) or not 1 <= self.size <= MAX_PAGE_SIZE:
            raise InvalidArgument(f'Page size must be between 1 and {MAX_PAGE_SIZE}, got {self.size!r}')


@dataclass
class Page:
    items: list = field(default_factory=list)
    page: int = 1
    size: int = 20
    total: int = 0

    @property
    def pages(self):
        return math.ceil(self.total / self.size)

    @classmethod
    def from_pagination(cls, pagination):
        return cls(items=list(pagination.items), page=pagination.page,
                   size=pagination.per_page, total=pagination.total)

    def to_dict(self, serialize=lambda item: item.to_dict()):
        return {
            'items': [serialize(item) for item in self.items],
            'page': self.page,
            'size': self.size,
            'total': self.total,
            'pages': self.pages,
        }


def normalize_states(states):
    """Map requested state names onto AssignmentState values, dropping the terminal state."""
    if not states:
        raise InvalidArgument('At least one assignment state is required')
    if isinstance(states, str):
        states = [states]
    try:
        matched = {match_state(AssignmentState, s) for s in states}
    except ValueError as e:
        raise InvalidArgument(str(e))
    matched.discard(TERMINAL_ASSIGNMENT_STATE)
    return sorted(s.value for s in matched)


def contains_text(column, term):
    """Case-insensitive substring test; LIKE wildcards in ``term`` match literally.

    Both sides are folded with Python's ``str.lower``: on SQLite ``lower()`` is
    replaced at connect time so the column side matches the term side.
    """
    return func.lower(column, type_=String).contains(term.lower(), autoescape=True)


def text_matches(text):
    # Blank text matches everything; otherwise the term is used as given, spaces included.
    if not text or not text.strip():
        return None
    return or_(
        contains_text(Asset.code, text),
        contains_text(Asset.name, text),
        contains_text(User.user_name, text),
    )


def state_in(state_values):
    # The terminal state is excluded here as well as in normalize_states, so
    # the predicate holds even when built from a hand-made state list.
    return and_(Assignment.state.in_(state_values),
                Assignment.state != TERMINAL_ASSIGNMENT_STATE.value)


def assigned_on(assigned_date):
    return Assignment.assigned_date == assigned_date


def assigned_before(day):
    return Assignment.assigned_date < day


def assigned_to(staff_code):
    return Assignment.assigned_to == staff_code


def _assignment_query():
    return (Assignment.query
            .join(Asset, Assignment.asset_code == Asset.code)
            .join(User, Assignment.assigned_to == User.staff_code))


def _paginate(predicates, page_request):
    query = _assignment_query().filter(*[p for p in predicates if p is not None])
    query = query.order_by(Assignment.assigned_date.desc(),
                           Assignment.asset_code.asc(),
                           Assignment.assigned_to.asc())
    pagination = query.paginate(page=page_request.page, per_page=page_request.size, error_out=False)
    return Page.from_pagination(pagination)


def search_assignments(text, states, page_request=None):
    """Search active assignments by text and state, with no date restriction."""
    page_request = page_request or PageRequest()
    state_values = normalize_states(states)
    logger.debug('Searching assignments text=%r states=%s', text, state_values)
    return _paginate([text_matches(text), state_in(state_values)], page_request)


def search_assignments_on_date(text, states, assigned_date, page_request=None):
    """Search active assignments by text and state, assigned exactly on ``assigned_date``."""
    if not isinstance(assigned_date, date):
        raise InvalidArgument('An assigned date is required for a dated search')
    page_request = page_request or PageRequest()
    state_values = normalize_states(states)
    logger.debug('Searching assignments text=%r states=%s date=%s', text, state_values, assigned_date)
    return _paginate([text_matches(text), state_in(state_values), assigned_on(assigned_date)], page_request)


def list_mine(staff_code, page_request=None, today=None):
    """Open assignments of one user that start today or earlier."""
    page_request = page_request or PageRequest()
    today = today or date.today()
    tomorrow = today + timedelta(days=1)
    return _paginate([
        assigned_to(staff_code),
        assigned_before(tomorrow),
        Assignment.state.in_([s.value for s in OPEN_ASSIGNMENT_STATES]),
    ], page_request)


def exists_active_assignment(assigned_to_code, assigned_by_code):
    """True if any assignment was made to ``assigned_to_code`` or by ``assigned_by_code``."""
    query = Assignment.query.filter(or_(Assignment.assigned_to == assigned_to_code,
                                        Assignment.assigned_by == assigned_by_code))
    return db.session.query(query.exists()).scalar()


def exists_by_composite_key(asset_code, assigned_date, assigned_to_code):
    """Advisory duplicate check; the primary key constraint is the real guard."""
    query = Assignment.query.filter_by(asset_code=asset_code, assigned_date=assigned_date,
                                      assigned_to=assigned_to_code)
    return db.session.query(query.exists()).scalar()


def find_by_asset(asset_code):
    return Assignment.query.filter_by(asset_code=asset_code).all()
