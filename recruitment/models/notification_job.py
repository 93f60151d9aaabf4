"""
Notification Job Model
Durable record of one result email owed to one interview
"""
from datetime import datetime
from recruitment import db


JOB_STATES = ('queued', 'sent', 'failed')
PAYLOAD_KINDS = ('accepted', 'rejected')


class NotificationJob(db.Model):
    """Queued result notification for an interview"""
    __tablename__ = 'notification_jobs'

    id = db.Column(db.Integer, primary_key=True)
    # One job per interview; re-enqueueing is a no-op
    interview_id = db.Column(db.Integer, db.ForeignKey('interviews.id', ondelete='CASCADE'),
                             nullable=False, unique=True)
    confirmation_id = db.Column(db.Integer, db.ForeignKey('result_confirmations.id', ondelete='SET NULL'),
                                nullable=True, index=True)

    payload_kind = db.Column(db.String(20), nullable=False)  # accepted, rejected
    state = db.Column(db.String(20), nullable=False, default='queued', index=True)  # queued, sent, failed
    attempt_count = db.Column(db.Integer, nullable=False, default=0)
    last_error = db.Column(db.Text)

    # Scheduling
    next_attempt_at = db.Column(db.DateTime, nullable=True)
    locked_until = db.Column(db.DateTime, nullable=True)  # claim lease held by a delivering worker
    last_attempt_at = db.Column(db.DateTime, nullable=True)
    sent_at = db.Column(db.DateTime, nullable=True)
    rq_job_id = db.Column(db.String(100))

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    interview = db.relationship('Interview', backref=db.backref('notification_job', uselist=False))
    confirmation = db.relationship('ResultConfirmation', backref=db.backref('jobs', lazy='dynamic'))

    def __repr__(self):
        return f'<NotificationJob {self.id} {self.payload_kind} for Interview {self.interview_id} ({self.state})>'

    def to_dict(self):
        return {
            'id': self.id,
            'interview_id': self.interview_id,
            'payload_kind': self.payload_kind,
            'state': self.state,
            'attempt_count': self.attempt_count,
            'last_error': self.last_error,
            'next_attempt_at': self.next_attempt_at.isoformat() if self.next_attempt_at else None,
            'sent_at': self.sent_at.isoformat() if self.sent_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
