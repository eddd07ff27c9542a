from petcare import db


class Service(db.Model):
    __tablename__ = 'service'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    price = db.Column(db.Float, nullable=False, default=0)
    duration = db.Column(db.Integer)
    provider_id = db.Column(db.Integer, db.ForeignKey('provider.id'), nullable=True)

    def __repr__(self):
        return f'<Service {self.name}>'
