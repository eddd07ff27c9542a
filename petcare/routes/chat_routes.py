from flask_restx import Namespace, Resource, fields
from flask import request
from flask_jwt_extended import jwt_required, get_jwt_identity
import logging

from petcare.services import chat_service

logger = logging.getLogger(__name__)

chat_ns = Namespace('chat', description='Chat rooms between tutors and providers', path='/chat')

room_model = chat_ns.model('CreateRoom', {
    'participants': fields.List(fields.String, required=True, description='User IDs in the room'),
    'name': fields.String(description='Room name'),
})

message_model = chat_ns.model('SendMessage', {
    'content': fields.String(required=True, description='Message text'),
})

start_model = chat_ns.model('StartWithProvider', {
    'provider_id': fields.String(required=True, description='ID of the provider'),
})


@chat_ns.route('/rooms')
class RoomList(Resource):
    @jwt_required()
    def get(self):
        """List active rooms of the current user"""
        return chat_service.get_rooms_by_user(get_jwt_identity()), 200

    @jwt_required()
    @chat_ns.expect(room_model)
    def post(self):
        """Create a room"""
        data = request.get_json(silent=True) or {}
        participants = data.get('participants')
        if not isinstance(participants, list) or not participants:
            return {'message': 'participants must be a non-empty list'}, 400
        return chat_service.create_room(participants, data.get('name')), 201


@chat_ns.route('/rooms/start-with-provider')
class StartRoomWithProvider(Resource):
    @jwt_required()
    @chat_ns.expect(start_model)
    def post(self):
        """Find or open the room between the current user and a provider"""
        data = request.get_json(silent=True) or {}
        room = chat_service.get_or_create_room_for_tutor_and_provider_user(get_jwt_identity(), data.get('provider_id'))
        return room, 201


@chat_ns.route('/rooms/<room_id>')
class RoomResource(Resource):
    @jwt_required()
    def get(self, room_id):
        """Room details with participants"""
        return chat_service.get_room_details(room_id), 200


@chat_ns.route('/rooms/<room_id>/messages')
class RoomMessages(Resource):
    @jwt_required()
    def get(self, room_id):
        """Messages of a room, oldest first"""
        return chat_service.get_messages(room_id), 200

    @jwt_required()
    @chat_ns.expect(message_model)
    def post(self, room_id):
        """Send a message to a room"""
        data = request.get_json(silent=True) or {}
        content = (data.get('content') or '').strip()
        if not content:
            return {'message': 'content is required'}, 400
        message = chat_service.send_message(get_jwt_identity(), {'room_id': room_id, 'content': content})
        logger.debug(f"Message {message['id']} sent to room {room_id}")
        return message, 201
