# Models package
from recruitment.models.application import Application
from recruitment.models.room import Room, Interviewer, room_interviewers
from recruitment.models.interview import Interview, EvaluationScores
from recruitment.models.result_confirmation import ResultConfirmation
from recruitment.models.notification_job import NotificationJob
from recruitment.models.email_template import EmailTemplate
from recruitment.models.audit_log import AuditLog
