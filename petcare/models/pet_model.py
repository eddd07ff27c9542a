from petcare import db


class Pet(db.Model):
    __tablename__ = 'pet'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    species = db.Column(db.String(50), nullable=False)
    breed = db.Column(db.String(50))
    tutor_id = db.Column(db.Integer, db.ForeignKey('tutor.id'), nullable=True)
    tutor = db.relationship('Tutor', back_populates='pets')

    def __repr__(self):
        return f'<Pet {self.name} ({self.species})>'
