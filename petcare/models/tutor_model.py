from petcare import db


class Tutor(db.Model):
    __tablename__ = 'tutor'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120))
    phone = db.Column(db.String(40))
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True)
    user = db.relationship('User', backref=db.backref('tutor_profile', uselist=False))
    pets = db.relationship('Pet', back_populates='tutor', lazy=True)

    def __repr__(self):
        return f'<Tutor {self.name}>'
