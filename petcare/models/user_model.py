import enum
from datetime import datetime
from petcare import db


class Role(enum.Enum):
    TUTOR = 'TUTOR'
    PROVIDER = 'PROVIDER'
    ADMIN = 'ADMIN'


class User(db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    role = db.Column(db.Enum(Role), nullable=False, default=Role.TUTOR)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<User {self.name} ({self.role})>'
