from datetime import datetime
from types import SimpleNamespace

import pytest
from flask_jwt_extended import create_access_token

from petcare import create_app, db
from petcare.config import TestConfig
from petcare.models import User, Role, Tutor, Pet, Service, Review, Appointment
from petcare.services import provider_service
from petcare.utils.reporting import ErrorReporter


@pytest.fixture
def app(tmp_path):
    # File-backed so worker threads running parallel reads share the data
    class Config(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'petcare.db'}"

    app = create_app(Config)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def reporter():
    return ErrorReporter(history=10)


@pytest.fixture
def data(app):
    tutor_user = User(name='Ana Tutor', email='ana@example.com', role=Role.TUTOR)
    provider_user = User(name='Bruno Vet', email='bruno@example.com', role=Role.PROVIDER)
    other_user = User(name='Carla', email='carla@example.com', role=Role.TUTOR)
    db.session.add_all([tutor_user, provider_user, other_user])
    db.session.commit()

    tutor = Tutor(name='Ana', email='ana@example.com', user_id=tutor_user.id)
    unlinked_tutor = Tutor(name='No Account')
    lonely_tutor = Tutor(name='No Pets', user_id=other_user.id)
    db.session.add_all([tutor, unlinked_tutor, lonely_tutor])
    db.session.commit()

    rex = Pet(name='Rex', species='dog', tutor_id=tutor.id)
    mia = Pet(name='Mia', species='cat', tutor_id=tutor.id)
    stray = Pet(name='Stray', species='dog', tutor_id=unlinked_tutor.id)
    db.session.add_all([rex, mia, stray])
    db.session.commit()

    provider = provider_service.create_provider({
        'name': 'Clinica Bruno', 'email': 'clinic@example.com', 'city': 'Recife',
        'state': 'PE', 'whatsapp': '+5581999999999', 'usuario': provider_user.id,
    })
    unlinked_provider = provider_service.create_provider({'name': 'Walker Joe'})

    service = Service(name='Vaccination', price=120.0, duration=30, provider_id=provider.id)
    db.session.add(service)
    db.session.commit()

    return SimpleNamespace(
        tutor_user=tutor_user, provider_user=provider_user, other_user=other_user,
        tutor=tutor, unlinked_tutor=unlinked_tutor, lonely_tutor=lonely_tutor,
        rex=rex, mia=mia, stray=stray,
        provider=provider, unlinked_provider=unlinked_provider, service=service,
    )


@pytest.fixture
def make_appointment(data):
    def make(**overrides):
        values = {
            'pet_id': data.rex.id,
            'provider_id': data.provider.id,
            'date_time': datetime(2026, 3, 10, 9, 0),
            'duration': 30,
            'reason': 'Checkup',
            'price': 100.0,
            'status': 'pending',
        }
        values.update(overrides)
        appointment = Appointment(**values)
        db.session.add(appointment)
        db.session.commit()
        return appointment
    return make


@pytest.fixture
def make_review():
    def make(author, appointment, rating=5):
        review = Review(author_id=author.id, appointment_id=appointment.id, rating=rating)
        db.session.add(review)
        db.session.commit()
        return review
    return make


@pytest.fixture
def auth_headers(app):
    def headers(user):
        token = create_access_token(identity=str(user.id))
        return {'Authorization': f'Bearer {token}'}
    return headers
