# Appointment writes: create, update, status changes and deletes
import logging

from .. import db
from ..errors import NotFoundError
from ..models import Appointment, Pet, Provider, Service
from . import chat_service, tutor_service
from .appointment_service import format_appointment, find_one
from .guard_service import assert_exists
from ..utils.reporting import default_reporter
from ..utils.util import parse_id, parse_bool, coerce_datetime

logger = logging.getLogger(__name__)

PET_NOT_FOUND = 'Pet not found.'
PROVIDER_NOT_FOUND = 'Provider not found.'
SERVICE_NOT_FOUND = 'Service not found.'
INVALID_DATE_TIME = 'Invalid date_time'
APPOINTMENT_NOT_FOUND = 'Appointment not found.'

# Plain columns copied as-is when present in a create payload or a patch
PLAIN_FIELDS = ('duration', 'reason', 'location', 'price', 'status', 'notes', 'email', 'phone')
STATUS_FIELDS = ('status', 'is_rated')


def _commit():
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


def provision_chat_room(appointment_id, chat=chat_service):
    """Open (or reuse) the chat room between the pet's tutor and the provider.

    Returns the room, or None when either side has no linked user account.
    """
    appointment = db.session.get(Appointment, appointment_id)
    pet = db.session.get(Pet, appointment.pet_id)
    provider = db.session.get(Provider, appointment.provider_id)

    tutor_user_id = None
    if pet is not None and pet.tutor_id is not None:
        tutor = tutor_service.find_by_id(pet.tutor_id)
        tutor_user_id = tutor.user_id if tutor else None

    if provider is None or provider.user_id is None or tutor_user_id is None:
        logger.info(f"Appointment {appointment_id}: no linked tutor/provider users, chat room skipped")
        return None

    pet_name = pet.name if pet.name else 'Pet'
    room = chat.get_or_create_room_for_participants([provider.user_id, tutor_user_id], f"Atendimento - {pet_name}")
    logger.info(f"Appointment {appointment_id} linked to chat room {room['id']}")
    return room


def create_appointment(data, reporter=None, chat=chat_service):
    """Persist a new appointment, then try to open the tutor/provider chat room.

    The appointment is committed before the room is attempted; a failure while
    provisioning the room is reported and never reaches the caller.
    """
    reporter = reporter or default_reporter
    date_time = coerce_datetime(data.get('date_time'))
    if date_time is None:
        raise ValueError(INVALID_DATE_TIME)
    pet_id = assert_exists(Pet, data.get('pet'), PET_NOT_FOUND)
    provider_id = assert_exists(Provider, data.get('provider'), PROVIDER_NOT_FOUND)
    service_id = None
    if data.get('service') is not None:
        service_id = assert_exists(Service, data['service'], SERVICE_NOT_FOUND)

    appointment = Appointment(
        pet_id=pet_id,
        provider_id=provider_id,
        service_id=service_id,
        date_time=date_time
    )
    for name in PLAIN_FIELDS:
        if data.get(name) is not None:
            setattr(appointment, name, data[name])
    db.session.add(appointment)
    _commit()
    created = format_appointment(appointment)
    logger.info(f"Appointment {appointment.id} created for pet {pet_id} with provider {provider_id}")

    reporter.attempt('appointment.chat_room', provision_chat_room, appointment.id, chat,
                     appointment_id=appointment.id)
    return created


def create_for_pet(pet_id, payload, reporter=None):
    return create_appointment(dict(payload, pet=pet_id), reporter=reporter)


def create_for_provider(provider_id, payload, reporter=None):
    return create_appointment(dict(payload, provider=provider_id), reporter=reporter)


def update_appointment(appointment_id, data):
    """Apply only the fields present in ``data`` and return the re-joined record.

    ``service: None`` clears the service; ``None`` for pet, provider,
    date_time or status is ignored since those are required. A date_time
    that does not parse raises ValueError.
    """
    changes = {}
    if data.get('pet') is not None:
        changes['pet_id'] = assert_exists(Pet, data['pet'], PET_NOT_FOUND)
    if data.get('provider') is not None:
        changes['provider_id'] = assert_exists(Provider, data['provider'], PROVIDER_NOT_FOUND)
    if data.get('date_time') is not None:
        date_time = coerce_datetime(data['date_time'])
        if date_time is None:
            raise ValueError(INVALID_DATE_TIME)
        changes['date_time'] = date_time
    if 'service' in data:
        changes['service_id'] = None
        if data['service'] is not None:
            changes['service_id'] = assert_exists(Service, data['service'], SERVICE_NOT_FOUND)
    for name in PLAIN_FIELDS:
        if name in data and (data[name] is not None or name != 'status'):
            changes[name] = data[name]

    appointment_id = parse_id(appointment_id)
    appointment = db.session.get(Appointment, appointment_id) if appointment_id is not None else None
    if not appointment:
        raise NotFoundError(APPOINTMENT_NOT_FOUND)

    for name, value in changes.items():
        setattr(appointment, name, value)
    _commit()
    logger.info(f"Appointment {appointment_id} updated: {sorted(changes)}")
    return find_one(appointment_id)


def update_appointment_status(appointment_id, data):
    """Set exactly one of ``status`` or ``is_rated``."""
    present = [name for name in STATUS_FIELDS if name in data]
    if len(present) != 1:
        raise ValueError('Provide exactly one of status or is_rated')
    field = present[0]
    value = parse_bool(data[field]) if field == 'is_rated' else data[field]

    appointment_id = parse_id(appointment_id)
    appointment = db.session.get(Appointment, appointment_id) if appointment_id is not None else None
    if not appointment:
        raise NotFoundError('Appointment not found for status update.')
    setattr(appointment, field, value)
    _commit()


def remove_appointment(appointment_id):
    appointment_id = parse_id(appointment_id)
    appointment = db.session.get(Appointment, appointment_id) if appointment_id is not None else None
    if not appointment:
        raise NotFoundError(APPOINTMENT_NOT_FOUND)
    db.session.delete(appointment)
    _commit()
    return {'success': True}


def _remove_where(column, raw_id):
    entity_id = parse_id(raw_id)
    if entity_id is None:
        return 0
    deleted = Appointment.query.filter(column == entity_id).delete(synchronize_session=False)
    _commit()
    return deleted


def remove_by_pet(pet_id):
    return _remove_where(Appointment.pet_id, pet_id)


def remove_by_provider(provider_id):
    return _remove_where(Appointment.provider_id, provider_id)
