"""Turns appointment listing arguments into a filter, sort and paging plan.

Arguments are coerced once, at the boundary, into an ``AppointmentQuery``.
Malformed values never reject a request: unparsable numbers and dates are
dropped, malformed ids turn their filter into one that matches nothing, and
out-of-range paging values are clamped.
"""
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from flask import current_app, has_app_context
from sqlalchemy import or_

from ..models import Appointment
from ..utils.util import parse_id, parse_int, parse_float, parse_bool, coerce_datetime

DEFAULT_LIMIT = 20
MAX_LIMIT = 100
# Keeps ``skip`` bindable as a 64-bit integer for any clamped limit
MAX_PAGE = 2 ** 31 - 1

# Accepted ``sort`` values; anything else falls back to the default order
SORTABLE_FIELDS = {
    'dateTime': Appointment.date_time,
    'date_time': Appointment.date_time,
    'createdAt': Appointment.created_at,
    'created_at': Appointment.created_at,
    'updatedAt': Appointment.updated_at,
    'updated_at': Appointment.updated_at,
    'price': Appointment.price,
    'status': Appointment.status,
    'duration': Appointment.duration,
}

TEXT_SEARCH_FIELDS = (Appointment.reason, Appointment.location, Appointment.notes)


@dataclass(frozen=True)
class Range:
    lower: object = None
    upper: object = None


@dataclass(frozen=True)
class AppointmentQuery:
    # None means "no filter"; an empty tuple means "matches nothing"
    provider_ids: Optional[Tuple[int, ...]] = None
    pet_ids: Optional[Tuple[int, ...]] = None
    statuses: Optional[Tuple[str, ...]] = None
    text: Optional[str] = None
    dates: Range = field(default_factory=Range)
    prices: Range = field(default_factory=Range)
    page: Optional[int] = None
    limit: Optional[int] = None
    sort: Optional[str] = None
    asc: bool = False

    @classmethod
    def from_args(cls, args):
        """Build a query from request-style arguments.

        Each value may be a scalar, a list (as produced by
        ``MultiDict.to_dict(flat=False)``) or a comma-joined string.
        """
        args = args or {}
        text = _first(args.get('q'))
        text = str(text).strip() if text is not None else ''
        sort = _first(args.get('sort'))
        sort = str(sort).strip() if sort is not None else ''
        statuses = _values(args.get('status'))
        return cls(
            provider_ids=_ids(args.get('provider')),
            pet_ids=_ids(args.get('pet')),
            statuses=tuple(statuses) if statuses else None,
            text=text or None,
            dates=Range(coerce_datetime(_first(args.get('from'))),
                        coerce_datetime(_first(args.get('to')))),
            prices=Range(parse_float(_first(args.get('minPrice'))),
                         parse_float(_first(args.get('maxPrice')))),
            page=parse_int(_first(args.get('page'))),
            limit=parse_int(_first(args.get('limit'))),
            sort=sort if sort in SORTABLE_FIELDS else None,
            asc=parse_bool(_first(args.get('asc'))),
        )

    def scoped(self, **changes):
        return replace(self, **changes)


@dataclass
class QueryPlan:
    criteria: list
    order_by: list
    page: int
    limit: int
    skip: int


def _first(raw):
    if isinstance(raw, (list, tuple)):
        return raw[0] if raw else None
    return raw


def _values(raw):
    """Flatten scalar, list or comma-joined input into non-empty strings."""
    if raw is None:
        return []
    items = raw if isinstance(raw, (list, tuple, set)) else [raw]
    values = []
    for item in items:
        if item is None:
            continue
        for part in str(item).split(','):
            part = part.strip()
            if part:
                values.append(part)
    return values


def _ids(raw):
    values = _values(raw)
    if not values:
        return None
    return tuple(i for i in (parse_id(v) for v in values) if i is not None)


def _setting(name, default):
    if has_app_context():
        return current_app.config.get(name, default)
    return default


def paging(query):
    default_limit = _setting('APPOINTMENTS_DEFAULT_LIMIT', DEFAULT_LIMIT)
    max_limit = _setting('APPOINTMENTS_MAX_LIMIT', MAX_LIMIT)
    page = min(max(query.page if query.page is not None else 1, 1), MAX_PAGE)
    limit = min(max(query.limit if query.limit is not None else default_limit, 1), max_limit)
    return page, limit, (page - 1) * limit


def build_criteria(query):
    criteria = []
    if query.provider_ids is not None:
        criteria.append(Appointment.provider_id.in_(query.provider_ids))
    if query.pet_ids is not None:
        criteria.append(Appointment.pet_id.in_(query.pet_ids))
    if query.statuses is not None:
        criteria.append(Appointment.status.in_(query.statuses))
    if query.text:
        criteria.append(or_(*[column.icontains(query.text, autoescape=True) for column in TEXT_SEARCH_FIELDS]))
    if query.dates.lower is not None:
        criteria.append(Appointment.date_time >= query.dates.lower)
    if query.dates.upper is not None:
        criteria.append(Appointment.date_time <= query.dates.upper)
    if query.prices.lower is not None:
        criteria.append(Appointment.price >= query.prices.lower)
    if query.prices.upper is not None:
        criteria.append(Appointment.price <= query.prices.upper)
    return criteria


def build_order(query):
    if query.sort:
        return [SORTABLE_FIELDS[query.sort].asc(), Appointment.id.asc()]
    if query.asc:
        return [Appointment.date_time.asc(), Appointment.id.asc()]
    return [Appointment.date_time.desc(), Appointment.created_at.desc(), Appointment.id.desc()]


def build_query_plan(query=None):
    query = query or AppointmentQuery()
    page, limit, skip = paging(query)
    return QueryPlan(
        criteria=build_criteria(query),
        order_by=build_order(query),
        page=page,
        limit=limit,
        skip=skip
    )
