# Appointment reads: paged listings joined with pet, tutor, provider and service data
import logging
import math
from datetime import datetime, time, timedelta

from sqlalchemy.orm import joinedload

from ..errors import NotFoundError
from ..models import Appointment, AppointmentStatus, Pet, TERMINAL_STATUSES
from . import pet_service, provider_service, review_service
from .appointment_query import AppointmentQuery, build_query_plan, paging
from ..utils.concurrency import run_parallel
from ..utils.util import parse_id, isoformat, str_id

logger = logging.getLogger(__name__)

PET_POPULATION = joinedload(Appointment.pet).joinedload(Pet.tutor)
PROVIDER_POPULATION = joinedload(Appointment.provider)
SERVICE_POPULATION = joinedload(Appointment.service)


def format_appointment(appointment):
    return {
        'id': str_id(appointment.id),
        'pet': str_id(appointment.pet_id),
        'provider': str_id(appointment.provider_id),
        'service': str_id(appointment.service_id),
        'date_time': isoformat(appointment.date_time),
        'duration': appointment.duration,
        'reason': appointment.reason,
        'notes': appointment.notes,
        'location': appointment.location,
        'price': float(appointment.price) if appointment.price is not None else None,
        'status': appointment.status,
        'email': appointment.email,
        'phone': appointment.phone,
        'is_rated': bool(appointment.is_rated),
        'created_at': isoformat(appointment.created_at),
        'updated_at': isoformat(appointment.updated_at)
    }


def _format_pet(pet):
    if pet is None:
        return None
    tutor = pet.tutor
    return {
        'id': str_id(pet.id),
        'name': pet.name,
        'species': pet.species,
        'tutor': {'id': str_id(tutor.id), 'name': tutor.name} if tutor else None
    }


def _format_provider(provider):
    if provider is None:
        return None
    return {
        'id': str_id(provider.id),
        'name': provider.name,
        'email': provider.email,
        'city': provider.city,
        'state': provider.state,
        'whatsapp': provider.whatsapp
    }


def _format_service(service):
    if service is None:
        return None
    return {
        'id': str_id(service.id),
        'name': service.name,
        'price': float(service.price) if service.price is not None else None,
        'duration': service.duration
    }


def format_populated_appointment(appointment, include_service=False):
    result = format_appointment(appointment)
    result['pet'] = _format_pet(appointment.pet)
    result['provider'] = _format_provider(appointment.provider)
    if include_service:
        result['service'] = _format_service(appointment.service)
    return result


def page_envelope(items, total, page, limit, pages=None):
    return {
        'items': items,
        'total': total,
        'page': page,
        'limit': limit,
        'pages': math.ceil(total / limit) if pages is None else pages
    }


def find_all(query=None):
    """Return one page of appointments matching ``query`` with pet and provider joined."""
    plan = build_query_plan(query)

    def fetch_page():
        appointments = (Appointment.query
                        .options(PET_POPULATION, PROVIDER_POPULATION)
                        .filter(*plan.criteria)
                        .order_by(*plan.order_by)
                        .offset(plan.skip)
                        .limit(plan.limit)
                        .all())
        return [format_populated_appointment(a) for a in appointments]

    def count_total():
        return Appointment.query.filter(*plan.criteria).count()

    items, total = run_parallel(fetch_page, count_total)
    logger.debug(f"Listed {len(items)} of {total} appointments (page {plan.page})")
    return page_envelope(items, total, plan.page, plan.limit)


def get_provider_by_user(user_id):
    provider = provider_service.find_one_by_user_id(user_id)
    if not provider:
        raise NotFoundError('Provider profile not found for the current user.')
    return provider


def find_all_by_provider_user(user_id, query=None):
    query = query or AppointmentQuery()
    provider = provider_service.find_one_by_user_id(user_id)
    if not provider:
        _, limit, _ = paging(query)
        return page_envelope([], 0, 1, limit, pages=1)
    return find_all(query.scoped(provider_ids=(provider.id,)))


def find_all_by_tutor_id(tutor_id, query=None):
    """List the appointments of every pet the tutor owns, flagged with ``is_reviewed``.

    The review join only annotates the returned page; ``total`` and ``pages``
    come from the unjoined filter.
    """
    query = query or AppointmentQuery()
    pets = pet_service.find_all_by_tutor(tutor_id)
    if not pets:
        logger.info(f"No pets found for tutor {tutor_id}")
        page, limit, _ = paging(query)
        return page_envelope([], 0, page, limit, pages=0)

    result = find_all(query.scoped(pet_ids=tuple(pet.id for pet in pets)))
    appointment_ids = [item['id'] for item in result['items']]
    reviewed = set(review_service.find_reviewed_appointments(tutor_id, appointment_ids))
    result['items'] = [dict(item, is_reviewed=item['id'] in reviewed) for item in result['items']]
    return result


def find_one(appointment_id):
    appointment_id = parse_id(appointment_id)
    appointment = None
    if appointment_id is not None:
        appointment = (Appointment.query
                       .options(PET_POPULATION, PROVIDER_POPULATION, SERVICE_POPULATION)
                       .filter(Appointment.id == appointment_id)
                       .first())
    if not appointment:
        raise NotFoundError('Appointment not found.')
    return format_populated_appointment(appointment, include_service=True)


def today_window(now=None):
    """Half-open ``[start, end)`` local-day window containing ``now``."""
    now = now or datetime.now()
    start = datetime.combine(now.date(), time.min)
    return start, start + timedelta(days=1)


def count_appointments_for_today(provider_id, now=None):
    provider_id = parse_id(provider_id)
    if provider_id is None:
        return {'total': 0, 'confirmed': 0}
    start, end = today_window(now)
    base = [
        Appointment.provider_id == provider_id,
        Appointment.date_time >= start,
        Appointment.date_time < end,
    ]

    def count_active():
        return Appointment.query.filter(*base, Appointment.status.notin_(TERMINAL_STATUSES)).count()

    def count_confirmed():
        return Appointment.query.filter(*base, Appointment.status == AppointmentStatus.CONFIRMED.value).count()

    total, confirmed = run_parallel(count_active, count_confirmed)
    return {'total': total, 'confirmed': confirmed}
