"""
Application Model
Candidate applications as seen by the interview scheduling subsystem
"""
from datetime import datetime
from recruitment import db


APPLICATION_STATUSES = (
    'pending',
    'reviewing',
    'approved',
    'interview_scheduled',
    'interviewed',
    'accepted',
    'rejected',
)


class Application(db.Model):
    """Candidate application for the recruitment pipeline"""
    __tablename__ = 'applications'

    id = db.Column(db.Integer, primary_key=True)

    # Contact information
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False, default='')
    email = db.Column(db.String(255), nullable=False)

    status = db.Column(db.String(50), nullable=False, default='pending', index=True)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    interview = db.relationship('Interview', back_populates='application', uselist=False)

    def __repr__(self):
        return f'<Application {self.id} {self.full_name} ({self.status})>'

    @property
    def full_name(self):
        """Get candidate's full name"""
        return f'{self.first_name} {self.last_name}'.strip()

    def update_status(self, new_status):
        """
        Move the application to a new pipeline status

        Args:
            new_status: One of APPLICATION_STATUSES
        """
        if new_status not in APPLICATION_STATUSES:
            raise ValueError(f'Unknown application status: {new_status}')
        self.status = new_status

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.full_name,
            'email': self.email,
            'status': self.status,
        }
