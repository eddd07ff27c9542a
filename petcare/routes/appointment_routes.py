from flask_restx import Namespace, Resource, fields, reqparse, inputs
from flask import request
from flask_jwt_extended import jwt_required, get_jwt_identity
import logging

from petcare.models import AppointmentStatus
from petcare.services import appointment_service, appointment_lifecycle
from petcare.services.appointment_query import AppointmentQuery

logger = logging.getLogger(__name__)

appointment_ns = Namespace('appointments', description='Appointments between tutors and providers', path='/appointments')

appointment_model = appointment_ns.model('Appointment', {
    'pet': fields.String(required=True, description='ID of the pet'),
    'provider': fields.String(required=True, description='ID of the provider'),
    'service': fields.String(description='ID of the service'),
    'date_time': fields.String(required=True, description='Date in ISO format'),
    'duration': fields.Integer(description='Duration in minutes'),
    'reason': fields.String(),
    'notes': fields.String(),
    'location': fields.String(),
    'price': fields.Float(),
    'status': fields.String(enum=[s.value for s in AppointmentStatus]),
    'email': fields.String(),
    'phone': fields.String(),
})

status_parser = reqparse.RequestParser()
status_parser.add_argument('status', type=str, location='json', store_missing=False,
                           choices=[s.value for s in AppointmentStatus], help='Appointment status')
status_parser.add_argument('is_rated', type=inputs.boolean, location='json', store_missing=False,
                           help='Whether the tutor rated the appointment')


def current_query():
    return AppointmentQuery.from_args(request.args.to_dict(flat=False))


def request_payload():
    return request.get_json(silent=True) or {}


@appointment_ns.route('')
class AppointmentList(Resource):
    @jwt_required()
    @appointment_ns.doc('list_appointments', params={
        'provider': 'Provider id', 'pet': 'Pet id (repeatable)', 'status': 'Status, comma-joined or repeated',
        'q': 'Search reason, location and notes', 'from': 'ISO date lower bound', 'to': 'ISO date upper bound',
        'minPrice': 'Minimum price', 'maxPrice': 'Maximum price', 'page': 'Page (>= 1)',
        'limit': 'Page size (1-100)', 'sort': 'Ascending sort field', 'asc': 'true for ascending date order'})
    def get(self):
        """List appointments"""
        return appointment_service.find_all(current_query()), 200

    @jwt_required()
    @appointment_ns.expect(appointment_model)
    def post(self):
        """Create an appointment"""
        data = request_payload()
        if not data.get('date_time'):
            return {'message': 'date_time is required'}, 400
        try:
            created = appointment_lifecycle.create_appointment(data)
        except ValueError as ve:
            return {'message': str(ve)}, 400
        return created, 201


@appointment_ns.route('/provider/me')
class ProviderAppointments(Resource):
    @jwt_required()
    def get(self):
        """List appointments of the provider profile owned by the current user"""
        return appointment_service.find_all_by_provider_user(get_jwt_identity(), current_query()), 200


@appointment_ns.route('/provider/me/today')
class ProviderTodayCounters(Resource):
    @jwt_required()
    def get(self):
        """Count today's active and confirmed appointments of the current provider"""
        provider = appointment_service.get_provider_by_user(get_jwt_identity())
        return appointment_service.count_appointments_for_today(provider.id), 200


@appointment_ns.route('/tutor/<tutor_id>')
class TutorAppointments(Resource):
    @jwt_required()
    def get(self, tutor_id):
        """List appointments of every pet owned by a tutor"""
        return appointment_service.find_all_by_tutor_id(tutor_id, current_query()), 200


@appointment_ns.route('/pets/<pet_id>')
class PetAppointments(Resource):
    @jwt_required()
    @appointment_ns.expect(appointment_model)
    def post(self, pet_id):
        """Create an appointment for a pet"""
        data = request_payload()
        if not data.get('date_time'):
            return {'message': 'date_time is required'}, 400
        try:
            return appointment_lifecycle.create_for_pet(pet_id, data), 201
        except ValueError as ve:
            return {'message': str(ve)}, 400


@appointment_ns.route('/providers/<provider_id>')
class ProviderScopedAppointments(Resource):
    @jwt_required()
    @appointment_ns.expect(appointment_model)
    def post(self, provider_id):
        """Create an appointment with a provider"""
        data = request_payload()
        if not data.get('date_time'):
            return {'message': 'date_time is required'}, 400
        try:
            return appointment_lifecycle.create_for_provider(provider_id, data), 201
        except ValueError as ve:
            return {'message': str(ve)}, 400


@appointment_ns.route('/<appointment_id>')
class AppointmentResource(Resource):
    @jwt_required()
    def get(self, appointment_id):
        """Get appointment by ID"""
        return appointment_service.find_one(appointment_id), 200

    @jwt_required()
    @appointment_ns.expect(appointment_model)
    def put(self, appointment_id):
        """Update the fields present in the body"""
        try:
            return appointment_lifecycle.update_appointment(appointment_id, request_payload()), 200
        except ValueError as ve:
            return {'message': str(ve)}, 400

    @jwt_required()
    def delete(self, appointment_id):
        """Delete an appointment"""
        return appointment_lifecycle.remove_appointment(appointment_id), 200


@appointment_ns.route('/<appointment_id>/status')
class AppointmentStatusResource(Resource):
    @jwt_required()
    @appointment_ns.expect(status_parser)
    def patch(self, appointment_id):
        """Update either the status or the rated flag"""
        args = status_parser.parse_args()
        try:
            appointment_lifecycle.update_appointment_status(appointment_id, dict(args))
        except ValueError as ve:
            return {'message': str(ve)}, 400
        logger.info(f"Appointment {appointment_id} status updated: {dict(args)}")
        return {'message': 'Appointment status updated'}, 200
