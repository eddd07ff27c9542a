from petcare.models.user_model import User, Role
from petcare.models.tutor_model import Tutor
from petcare.models.pet_model import Pet
from petcare.models.provider_model import Provider
from petcare.models.service_model import Service
from petcare.models.review_model import Review
from petcare.models.appointment_model import Appointment, AppointmentStatus, TERMINAL_STATUSES
from petcare.models.chat_model import ChatRoom, Message, chat_room_participant

__all__ = [
    'User', 'Role', 'Tutor', 'Pet', 'Provider', 'Service', 'Review',
    'Appointment', 'AppointmentStatus', 'TERMINAL_STATUSES',
    'ChatRoom', 'Message', 'chat_room_participant',
]
