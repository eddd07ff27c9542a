# Chat service module: rooms keyed by participant set and their messages
import logging
from datetime import datetime

from flask import current_app

from .. import db
from ..errors import NotFoundError
from ..models import ChatRoom, Message, User
from . import provider_service
from ..utils.reporting import default_reporter
from ..utils.util import parse_id, isoformat, str_id

logger = logging.getLogger(__name__)

PROVIDER_ROOM_NAME = 'Atendimento com prestador'


def participants_key(user_ids):
    return ','.join(str(i) for i in sorted(set(user_ids)))


def format_room(room, with_participants=False):
    result = {
        'id': str_id(room.id),
        'name': room.name,
        'participants': [str_id(user.id) for user in room.participants],
        'is_active': room.is_active,
        'created_at': isoformat(room.created_at),
        'updated_at': isoformat(room.updated_at)
    }
    if with_participants:
        result['participants'] = [
            {'id': str_id(user.id), 'name': user.name, 'role': user.role.value}
            for user in room.participants
        ]
    return result


def format_message(message):
    return {
        'id': str_id(message.id),
        'room_id': str_id(message.room_id),
        'sender_id': str_id(message.sender_id),
        'content': message.content,
        'created_at': isoformat(message.created_at)
    }


def _resolve_participants(participants):
    ids = [parse_id(p) for p in participants]
    if not ids or any(i is None for i in ids):
        raise NotFoundError('Participant not found')
    ids = sorted(set(ids))
    users = User.query.filter(User.id.in_(ids)).order_by(User.id).all()
    if len(users) != len(ids):
        raise NotFoundError('Participant not found')
    return users


def create_room(participants, name=None):
    """Create a room for ``participants`` without looking for an existing one."""
    users = _resolve_participants(participants)
    room = ChatRoom(
        name=name or current_app.config.get('DEFAULT_ROOM_NAME', 'Atendimento'),
        participants=users,
        participants_key=participants_key(user.id for user in users)
    )
    try:
        db.session.add(room)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info(f"Chat room {room.id} created for participants {room.participants_key}")
    return format_room(room)


def get_or_create_room_for_participants(user_ids, name=None):
    """Return the active room whose participant set equals ``user_ids``, creating it if needed.

    The lookup and the insert are not atomic, so concurrent callers may both
    create a room for the same set. Lookups then resolve to the oldest one.
    """
    users = _resolve_participants(user_ids)
    key = participants_key(user.id for user in users)
    room = (ChatRoom.query
            .filter_by(participants_key=key, is_active=True)
            .order_by(ChatRoom.id)
            .first())
    if room:
        return format_room(room)
    return create_room([user.id for user in users], name)


def get_or_create_room_for_tutor_and_provider_user(tutor_user_id, provider_id):
    if parse_id(provider_id) is None:
        raise NotFoundError('Invalid provider')
    provider = provider_service.find_one(provider_id)
    if not provider:
        raise NotFoundError('Provider not found')
    if provider.user_id is None:
        raise NotFoundError('Provider user account is not linked.')
    return get_or_create_room_for_participants([tutor_user_id, provider.user_id], PROVIDER_ROOM_NAME)


def get_rooms_by_user(user_id):
    user_id = parse_id(user_id)
    if user_id is None:
        return []
    rooms = (ChatRoom.query
             .filter(ChatRoom.participants.any(User.id == user_id), ChatRoom.is_active.is_(True))
             .order_by(ChatRoom.updated_at.desc(), ChatRoom.id.desc())
             .all())
    return [format_room(room, with_participants=True) for room in rooms]


def _get_room(room_id):
    room_id = parse_id(room_id)
    room = db.session.get(ChatRoom, room_id) if room_id is not None else None
    if not room:
        raise NotFoundError('Room not found')
    return room


def get_room_by_id(room_id):
    return format_room(_get_room(room_id))


def get_room_details(room_id):
    return format_room(_get_room(room_id), with_participants=True)


def _touch_room(room_id):
    room = db.session.get(ChatRoom, room_id)
    room.updated_at = datetime.utcnow()
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


def send_message(sender_id, data, reporter=None):
    """Store a message, then bump the room's ``updated_at``.

    The two writes are committed separately; a failed bump is reported and
    leaves the message in place.
    """
    reporter = reporter or default_reporter
    room = _get_room(data.get('room_id'))
    sender = parse_id(sender_id)
    if sender is None:
        raise NotFoundError('Sender not found')
    message = Message(room_id=room.id, sender_id=sender, content=data['content'])
    try:
        db.session.add(message)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    result = format_message(message)
    reporter.attempt('chat.touch_room', _touch_room, room.id, room_id=room.id, message_id=message.id)
    return result


def get_messages(room_id):
    room_id = parse_id(room_id)
    if room_id is None:
        return []
    messages = (Message.query
                .filter_by(room_id=room_id)
                .order_by(Message.created_at.asc(), Message.id.asc())
                .all())
    return [format_message(m) for m in messages]
