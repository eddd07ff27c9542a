from petcare import db


class Provider(db.Model):
    __tablename__ = 'provider'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120))
    city = db.Column(db.String(80))
    state = db.Column(db.String(40))
    whatsapp = db.Column(db.String(40))
    # Single linked account; legacy payload keys are folded in by provider_service
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True, index=True)
    user = db.relationship('User', backref=db.backref('provider_profile', uselist=False))
    services = db.relationship('Service', backref='provider', lazy=True)

    def __repr__(self):
        return f'<Provider {self.name}>'
