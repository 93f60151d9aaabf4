"""
Room Model
Interview rooms and the interviewers eligible to sit in them
"""
from datetime import datetime
from recruitment import db


room_interviewers = db.Table(
    'room_interviewers',
    db.Column('room_id', db.Integer, db.ForeignKey('rooms.id', ondelete='CASCADE'), primary_key=True),
    db.Column('interviewer_id', db.Integer, db.ForeignKey('interviewers.id', ondelete='CASCADE'), primary_key=True)
)


class Interviewer(db.Model):
    """Staff member who can conduct interviews"""
    __tablename__ = 'interviewers'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True)

    def __repr__(self):
        return f'<Interviewer {self.name}>'


class Room(db.Model):
    """Physical room where interviews take place"""
    __tablename__ = 'rooms'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    location = db.Column(db.String(255))
    capacity = db.Column(db.Integer, nullable=False, default=1)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    interviewers = db.relationship('Interviewer', secondary=room_interviewers, lazy='subquery',
                                   backref=db.backref('rooms', lazy=True))
    interviews = db.relationship('Interview', back_populates='room', lazy='dynamic')

    def __repr__(self):
        return f'<Room {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'location': self.location,
            'capacity': self.capacity,
            'is_active': self.is_active,
            'interviewers': [{'id': i.id, 'name': i.name} for i in self.interviewers],
        }
