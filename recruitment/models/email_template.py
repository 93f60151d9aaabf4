"""
Email Template Model
Editable subject/body for result notification emails
"""
from datetime import datetime
from recruitment import db


TEMPLATE_TYPES = ('interview_result_accepted', 'interview_result_rejected')


class EmailTemplate(db.Model):
    """Stored email template with {{variable}} placeholders"""
    __tablename__ = 'email_templates'

    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.String(50), nullable=False, unique=True)
    name = db.Column(db.String(100), nullable=False)
    subject = db.Column(db.String(255), nullable=False)
    html_content = db.Column(db.Text, nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<EmailTemplate {self.type}>'
