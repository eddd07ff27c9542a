import enum
from datetime import datetime
from petcare import db


class AppointmentStatus(enum.Enum):
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'
    COMPLETED = 'completed'


# Excluded from the "pending today" counter
TERMINAL_STATUSES = (AppointmentStatus.CANCELLED.value, AppointmentStatus.COMPLETED.value)


class Appointment(db.Model):
    __tablename__ = 'appointment'
    id = db.Column(db.Integer, primary_key=True)
    pet_id = db.Column(db.Integer, db.ForeignKey('pet.id'), nullable=False, index=True)
    provider_id = db.Column(db.Integer, db.ForeignKey('provider.id'), nullable=False, index=True)
    service_id = db.Column(db.Integer, db.ForeignKey('service.id'), nullable=True)
    date_time = db.Column(db.DateTime, nullable=False, index=True)
    duration = db.Column(db.Integer)
    reason = db.Column(db.String(300))
    notes = db.Column(db.Text)
    location = db.Column(db.String(200))
    price = db.Column(db.Float)
    status = db.Column(db.String(20), nullable=False, default=AppointmentStatus.PENDING.value)
    email = db.Column(db.String(120))
    phone = db.Column(db.String(40))
    is_rated = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    pet = db.relationship('Pet')
    provider = db.relationship('Provider')
    service = db.relationship('Service')

    def __repr__(self):
        return f'<Appointment {self.id} for Pet {self.pet_id} with Provider {self.provider_id}>'
