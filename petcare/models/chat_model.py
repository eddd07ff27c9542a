from datetime import datetime

from petcare import db

chat_room_participant = db.Table('chat_room_participant',
    db.Column('room_id', db.Integer, db.ForeignKey('chat_room.id'), primary_key=True),
    db.Column('user_id', db.Integer, db.ForeignKey('user.id'), primary_key=True)
)


class ChatRoom(db.Model):
    __tablename__ = 'chat_room'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(150), nullable=False, default='Atendimento')
    # Sorted, comma-joined participant ids; rooms are resolved by exact match on it
    participants_key = db.Column(db.String(255), nullable=False, index=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    participants = db.relationship('User', secondary=chat_room_participant, lazy='selectin',
                                   backref=db.backref('chat_rooms', lazy=True))
    messages = db.relationship('Message', backref='room', lazy=True, order_by='Message.created_at')

    def __repr__(self):
        return f'<ChatRoom {self.id} [{self.participants_key}]>'


class Message(db.Model):
    __tablename__ = 'message'
    id = db.Column(db.Integer, primary_key=True)
    room_id = db.Column(db.Integer, db.ForeignKey('chat_room.id'), nullable=False, index=True)
    sender_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f'<Message {self.id} in Room {self.room_id} from User {self.sender_id}>'
