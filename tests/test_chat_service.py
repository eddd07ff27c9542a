from datetime import datetime, timedelta

import pytest

from petcare import db
from petcare.errors import NotFoundError
from petcare.models import ChatRoom, Message
from petcare.services import chat_service


def test_get_or_create_room_is_idempotent_and_order_insensitive(data) -> None:
    first = chat_service.get_or_create_room_for_participants([data.tutor_user.id, data.provider_user.id])
    second = chat_service.get_or_create_room_for_participants([str(data.provider_user.id), str(data.tutor_user.id)])

    assert first['id'] == second['id']
    assert first['name'] == 'Atendimento'
    assert ChatRoom.query.count() == 1


def test_get_or_create_room_matches_exact_participant_set(data) -> None:
    group = chat_service.create_room([data.tutor_user.id, data.provider_user.id, data.other_user.id], 'Group')

    pair = chat_service.get_or_create_room_for_participants([data.tutor_user.id, data.provider_user.id], 'Pair')

    assert pair['id'] != group['id']
    assert pair['name'] == 'Pair'


def test_get_or_create_room_skips_inactive_rooms(data) -> None:
    old = chat_service.create_room([data.tutor_user.id, data.provider_user.id])
    room = db.session.get(ChatRoom, int(old['id']))
    room.is_active = False
    db.session.commit()

    fresh = chat_service.get_or_create_room_for_participants([data.tutor_user.id, data.provider_user.id])

    assert fresh['id'] != old['id']


def test_create_room_never_deduplicates(data) -> None:
    ids = [data.tutor_user.id, data.provider_user.id]

    assert chat_service.create_room(ids)['id'] != chat_service.create_room(ids)['id']
    assert ChatRoom.query.count() == 2


@pytest.mark.parametrize('participants', [[], ['abc'], [1, 9999]])
def test_create_room_with_unknown_participants_raises(data, participants) -> None:
    with pytest.raises(NotFoundError):
        chat_service.create_room(participants)


def test_room_for_tutor_and_provider_user(data) -> None:
    room = chat_service.get_or_create_room_for_tutor_and_provider_user(str(data.tutor_user.id), str(data.provider.id))

    assert room['name'] == 'Atendimento com prestador'
    assert sorted(room['participants']) == sorted([str(data.tutor_user.id), str(data.provider_user.id)])


@pytest.mark.parametrize(
    ('provider_id', 'message'),
    [
        ('not-an-id', 'Invalid provider'),
        ('9999', 'Provider not found'),
    ],
)
def test_room_for_tutor_and_provider_user_rejects_bad_provider(data, provider_id, message) -> None:
    with pytest.raises(NotFoundError) as exception_info:
        chat_service.get_or_create_room_for_tutor_and_provider_user(str(data.tutor_user.id), provider_id)

    assert exception_info.value.message == message


def test_room_for_tutor_and_unlinked_provider_raises(data) -> None:
    with pytest.raises(NotFoundError) as exception_info:
        chat_service.get_or_create_room_for_tutor_and_provider_user(
            str(data.tutor_user.id), str(data.unlinked_provider.id))

    assert exception_info.value.message == 'Provider user account is not linked.'


def test_send_message_stores_message_and_bumps_room(data) -> None:
    room = chat_service.create_room([data.tutor_user.id, data.provider_user.id])
    room_row = db.session.get(ChatRoom, int(room['id']))
    room_row.updated_at = datetime.utcnow() - timedelta(days=1)
    db.session.commit()
    stale = room_row.updated_at

    message = chat_service.send_message(str(data.tutor_user.id), {'room_id': room['id'], 'content': 'Hello'})

    assert message['content'] == 'Hello'
    assert message['sender_id'] == str(data.tutor_user.id)
    assert message['room_id'] == room['id']
    db.session.refresh(room_row)
    assert room_row.updated_at > stale


@pytest.mark.parametrize('room_id', ['424242', 'not-an-id'])
def test_send_message_to_missing_room_raises(data, room_id) -> None:
    with pytest.raises(NotFoundError) as exception_info:
        chat_service.send_message(str(data.tutor_user.id), {'room_id': room_id, 'content': 'Hi'})

    assert exception_info.value.message == 'Room not found'
    assert Message.query.count() == 0


def test_send_message_keeps_message_when_room_bump_fails(data, reporter, monkeypatch) -> None:
    room = chat_service.create_room([data.tutor_user.id, data.provider_user.id])

    def broken_touch(room_id):
        raise RuntimeError('lost connection')

    monkeypatch.setattr(chat_service, '_touch_room', broken_touch)

    message = chat_service.send_message(str(data.tutor_user.id), {'room_id': room['id'], 'content': 'Hi'},
                                        reporter=reporter)

    assert db.session.get(Message, int(message['id'])) is not None
    assert [r['event'] for r in reporter.reports] == ['chat.touch_room']


def test_get_messages_returns_oldest_first(data) -> None:
    room = chat_service.create_room([data.tutor_user.id, data.provider_user.id])
    for content in ('one', 'two', 'three'):
        chat_service.send_message(data.tutor_user.id, {'room_id': room['id'], 'content': content})

    assert [m['content'] for m in chat_service.get_messages(room['id'])] == ['one', 'two', 'three']


def test_get_messages_with_malformed_or_unknown_room_is_empty(data) -> None:
    assert chat_service.get_messages('not-an-id') == []
    assert chat_service.get_messages('98765') == []


def test_get_rooms_by_user_lists_active_rooms_most_recent_first(data) -> None:
    older = chat_service.create_room([data.tutor_user.id, data.provider_user.id], 'Older')
    newer = chat_service.create_room([data.tutor_user.id, data.other_user.id], 'Newer')
    hidden = chat_service.create_room([data.tutor_user.id, data.other_user.id, data.provider_user.id], 'Hidden')
    db.session.get(ChatRoom, int(hidden['id'])).is_active = False
    db.session.commit()
    chat_service.send_message(data.other_user.id, {'room_id': newer['id'], 'content': 'ping'})

    rooms = chat_service.get_rooms_by_user(str(data.tutor_user.id))

    assert [r['id'] for r in rooms] == [newer['id'], older['id']]
    assert {'id': str(data.other_user.id), 'name': 'Carla', 'role': 'TUTOR'} in rooms[0]['participants']


def test_get_rooms_by_user_with_malformed_id_is_empty(data) -> None:
    assert chat_service.get_rooms_by_user('me') == []


def test_get_room_details(data) -> None:
    room = chat_service.create_room([data.tutor_user.id, data.provider_user.id], 'Consult')

    details = chat_service.get_room_details(room['id'])

    assert details['name'] == 'Consult'
    assert {p['name'] for p in details['participants']} == {'Ana Tutor', 'Bruno Vet'}
    assert chat_service.get_room_by_id(room['id'])['participants'] == room['participants']
    with pytest.raises(NotFoundError):
        chat_service.get_room_details('bogus')


def test_get_messages_and_rooms_with_out_of_range_ids(data) -> None:
    huge = '99999999999999999999'

    assert chat_service.get_messages(huge) == []
    assert chat_service.get_rooms_by_user(huge) == []
    with pytest.raises(NotFoundError):
        chat_service.get_room_details(huge)


def test_duplicate_rooms_for_one_set_resolve_to_the_oldest(data) -> None:
    ids = [data.tutor_user.id, data.provider_user.id]
    first = chat_service.create_room(ids)
    chat_service.create_room(ids)

    assert chat_service.get_or_create_room_for_participants(ids)['id'] == first['id']
    assert ChatRoom.query.count() == 2
