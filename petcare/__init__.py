import logging
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_restx import Api
from petcare.config import Config
from petcare.errors import NotFoundError

migrate = Migrate()
db = SQLAlchemy()
jwt = JWTManager()

logger = logging.getLogger(__name__)


def build_api():
    api = Api(
        title='PetCare API',
        version='1.0',
        description='Appointments and chat between tutors and service providers',
        doc='/docs',
        ui_config={
            'displayOperationId': True,
            'docExpansion': 'none',
            'filter': True,
            'defaultModelsExpandDepth': 1,
            'defaultModelExpandDepth': 1
        },
        security=[{'BearerAuth': []}],
        authorizations={
            'BearerAuth': {
                'type': 'apiKey',
                'in': 'header',
                'name': 'Authorization',
                'description': 'Enter your JWT token as "Bearer <token>"'
            }
        }
    )

    @api.errorhandler(NotFoundError)
    def not_found(error):
        return {'message': error.message}, 404

    return api


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    api = build_api()
    api.init_app(app)

    # Enable CORS
    CORS(app, resources={r"/*": {"origins": app.config.get('CORS_ORIGINS', '*')}},
         supports_credentials=app.config.get('CORS_SUPPORTS_CREDENTIALS', True),
         allow_headers=app.config.get('CORS_ALLOW_HEADERS', ["Content-Type", "Authorization"]),
         methods=app.config.get('CORS_METHODS', ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]))

    # Models must be imported before create_all
    from petcare import models  # noqa: F401

    from petcare.routes.appointment_routes import appointment_ns
    from petcare.routes.chat_routes import chat_ns

    api.add_namespace(appointment_ns)
    api.add_namespace(chat_ns)

    @app.cli.command('init-db')
    def init_db():
        db.create_all()
        print('Database initialized.')

    with app.app_context():
        db.create_all()

    logger.debug(f"Application created with database {app.config['SQLALCHEMY_DATABASE_URI']}")
    return app
