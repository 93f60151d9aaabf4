"""
Interview Model
Tracks scheduled interviews, their evaluation and result notification state
"""
from dataclasses import dataclass, asdict
from datetime import datetime
from numbers import Real
from sqlalchemy.orm import validates
from recruitment import db
from recruitment.errors import IncompleteEvaluation


INTERVIEW_STATUSES = ('scheduled', 'completed')
INTERVIEW_RESULTS = ('pending', 'passed', 'failed')
FINAL_RESULTS = ('passed', 'failed')

SCORE_FIELDS = ('technical', 'communication', 'teamwork', 'motivation', 'overall')
MIN_SCORE = 1
MAX_SCORE = 10


@dataclass(frozen=True)
class EvaluationScores:
    """The five evaluation fields recorded when an interview is scored"""
    technical: int
    communication: int
    teamwork: int
    motivation: int
    overall: int

    @classmethod
    def from_dict(cls, data):
        """
        Build scores from a request payload

        Raises:
            IncompleteEvaluation: if any field is missing, non-numeric or out of range
        """
        if not isinstance(data, dict):
            raise IncompleteEvaluation('Evaluation scores must be an object')

        missing = [field for field in SCORE_FIELDS if data.get(field) is None]
        if missing:
            raise IncompleteEvaluation(
                f"Missing evaluation fields: {', '.join(missing)}",
                missing_fields=missing
            )

        invalid = [
            field for field in SCORE_FIELDS
            if isinstance(data[field], bool)
            or not isinstance(data[field], Real)
            or not float(data[field]).is_integer()
            or not MIN_SCORE <= data[field] <= MAX_SCORE
        ]
        if invalid:
            raise IncompleteEvaluation(
                f"Evaluation fields must be whole numbers between {MIN_SCORE} and {MAX_SCORE}: {', '.join(invalid)}",
                invalid_fields=invalid
            )

        return cls(**{field: int(data[field]) for field in SCORE_FIELDS})

    def to_dict(self):
        return asdict(self)


class Interview(db.Model):
    """Interview slot allocated to one application in one room"""
    __tablename__ = 'interviews'
    __table_args__ = (
        db.UniqueConstraint('room_id', 'scheduled_at', name='uq_interviews_room_slot'),
    )

    id = db.Column(db.Integer, primary_key=True)
    # One active interview per application
    application_id = db.Column(db.Integer, db.ForeignKey('applications.id', ondelete='CASCADE'),
                               nullable=False, unique=True)
    room_id = db.Column(db.Integer, db.ForeignKey('rooms.id'), nullable=False, index=True)
    scheduled_at = db.Column(db.DateTime, nullable=False, index=True)

    # Lifecycle
    status = db.Column(db.String(20), nullable=False, default='scheduled', index=True)
    result = db.Column(db.String(20), nullable=False, default='pending', index=True)

    # Evaluation (null until scored)
    technical = db.Column(db.Integer)
    communication = db.Column(db.Integer)
    teamwork = db.Column(db.Integer)
    motivation = db.Column(db.Integer)
    overall = db.Column(db.Integer)
    interviewer_notes = db.Column(db.Text)

    # Flipped only by a delivered notification job, never reset
    notification_sent = db.Column(db.Boolean, nullable=False, default=False, index=True)

    # Timestamps
    completed_at = db.Column(db.DateTime)
    notified_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    application = db.relationship('Application', back_populates='interview')
    room = db.relationship('Room', back_populates='interviews')

    def __repr__(self):
        return f'<Interview {self.id} for Application {self.application_id} ({self.status}/{self.result})>'

    @validates('room_id')
    def validate_room_id(self, key, room_id):
        if self.room_id is not None and room_id != self.room_id:
            raise ValueError('Interview room cannot be reassigned')
        return room_id

    @property
    def evaluation_scores(self):
        """Get the recorded scores, or None until the interview is scored"""
        if any(getattr(self, field) is None for field in SCORE_FIELDS):
            return None
        return EvaluationScores(**{field: getattr(self, field) for field in SCORE_FIELDS})

    @property
    def is_completed(self):
        return self.status == 'completed'

    @property
    def has_final_result(self):
        return self.result in FINAL_RESULTS

    @property
    def payload_kind(self):
        """Notification kind matching the result ('accepted' or 'rejected')"""
        if self.result == 'passed':
            return 'accepted'
        if self.result == 'failed':
            return 'rejected'
        return None

    def record_evaluation(self, scores, notes, result):
        """
        Complete the interview with its evaluation

        Args:
            scores: EvaluationScores instance
            notes: Interviewer notes (optional)
            result: 'passed' or 'failed'
        """
        for field, value in scores.to_dict().items():
            setattr(self, field, value)
        self.interviewer_notes = notes
        self.result = result
        self.status = 'completed'
        self.completed_at = datetime.utcnow()

    def mark_notified(self):
        """Record that the candidate received their result"""
        if not self.has_final_result:
            raise ValueError('Cannot mark a pending result as notified')
        if not self.notification_sent:
            self.notification_sent = True
            self.notified_at = datetime.utcnow()

    def to_dict(self):
        scores = self.evaluation_scores
        return {
            'id': self.id,
            'application_id': self.application_id,
            'applicant': {
                'name': self.application.full_name if self.application else None,
                'email': self.application.email if self.application else None,
            },
            'room': {
                'id': self.room_id,
                'name': self.room.name if self.room else None,
                'location': self.room.location if self.room else None,
            },
            'scheduled_at': self.scheduled_at.isoformat(),
            'status': self.status,
            'result': self.result,
            'evaluation_scores': scores.to_dict() if scores else None,
            'interviewer_notes': self.interviewer_notes,
            'notification_sent': self.notification_sent,
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
        }
