"""
Audit Log Model
Records scheduling, scoring and notification actions for later review
"""
from datetime import datetime
from flask import has_request_context, request
from recruitment import db
import json


class AuditLog(db.Model):
    """Audit log for recruitment workflow events"""
    __tablename__ = 'audit_logs'

    id = db.Column(db.Integer, primary_key=True)

    # Event information
    event_type = db.Column(db.String(50), nullable=False, index=True)  # e.g., 'interviews_allocated', 'workflow_step'
    event_status = db.Column(db.String(20), nullable=False, default='success')  # 'success', 'failure'

    # Resource information
    resource_type = db.Column(db.String(50), nullable=True)  # 'interview', 'result_confirmation', 'notification_queue'
    resource_id = db.Column(db.Integer, nullable=True, index=True)

    # Request context
    ip_address = db.Column(db.String(45), nullable=True)  # IPv4 or IPv6

    # Event details (JSON)
    details = db.Column(db.Text, nullable=True)

    # Error information (for failures)
    error_message = db.Column(db.Text, nullable=True)

    # Timestamp
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f'<AuditLog {self.event_type} - {self.created_at}>'

    def get_details(self):
        """Parse and return details as dict"""
        if self.details:
            try:
                return json.loads(self.details)
            except json.JSONDecodeError:
                return {}
        return {}

    def set_details(self, details_dict):
        """Set details from dict"""
        if details_dict:
            self.details = json.dumps(details_dict, default=str)

    @staticmethod
    def record(event_type, resource_type=None, resource_id=None, details=None, status='success', error=None):
        """
        Add an audit entry to the current session

        The entry is committed together with the change it describes.

        Args:
            event_type: Short event name
            resource_type: Type of the affected resource
            resource_id: ID of the affected resource
            details: Optional dict of extra context
            status: 'success' or 'failure'
            error: Optional error message
        """
        log = AuditLog(
            event_type=event_type,
            event_status=status,
            resource_type=resource_type,
            resource_id=resource_id,
            ip_address=request.remote_addr if has_request_context() else None,
            error_message=error
        )
        log.set_details(details)

        db.session.add(log)
        return log

    @classmethod
    def get_for_resource(cls, resource_type, resource_id):
        """Get the audit trail of one resource, oldest first"""
        return cls.query.filter_by(
            resource_type=resource_type,
            resource_id=resource_id
        ).order_by(cls.created_at.asc(), cls.id.asc()).all()
