"""
Result Confirmation Model
Server-side state of the human-confirmed result notification workflow
"""
from datetime import datetime
import json
from recruitment import db


WORKFLOW_STATES = ('reviewing_accepted', 'reviewing_rejected', 'final_confirm', 'dispatched')


class ResultConfirmation(db.Model):
    """One run of the accepted/rejected review before bulk notification"""
    __tablename__ = 'result_confirmations'

    id = db.Column(db.Integer, primary_key=True)
    state = db.Column(db.String(30), nullable=False, default='reviewing_accepted', index=True)

    # Frozen at start: JSON arrays of interview ids
    accepted_interview_ids = db.Column(db.Text, nullable=False, default='[]')
    rejected_interview_ids = db.Column(db.Text, nullable=False, default='[]')

    accepted_confirmed = db.Column(db.Boolean, nullable=False, default=False)
    rejected_confirmed = db.Column(db.Boolean, nullable=False, default=False)

    enqueued_count = db.Column(db.Integer)
    dispatched_at = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<ResultConfirmation {self.id} ({self.state})>'

    @property
    def accepted_ids(self):
        """Get accepted interview ids as Python list"""
        return self._load_ids(self.accepted_interview_ids)

    @property
    def rejected_ids(self):
        """Get rejected interview ids as Python list"""
        return self._load_ids(self.rejected_interview_ids)

    def freeze_sets(self, accepted_ids, rejected_ids):
        self.accepted_interview_ids = json.dumps(list(accepted_ids))
        self.rejected_interview_ids = json.dumps(list(rejected_ids))

    @property
    def is_dispatched(self):
        return self.state == 'dispatched'

    @staticmethod
    def _load_ids(raw):
        if not raw:
            return []
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            return []

    def to_dict(self):
        return {
            'id': self.id,
            'state': self.state,
            'accepted_interview_ids': self.accepted_ids,
            'rejected_interview_ids': self.rejected_ids,
            'accepted_confirmed': self.accepted_confirmed,
            'rejected_confirmed': self.rejected_confirmed,
            'enqueued_count': self.enqueued_count,
            'dispatched_at': self.dispatched_at.isoformat() if self.dispatched_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
