"""
Notification Queue
Durable, idempotent, retryable delivery of interview result emails.

Jobs live in the notification_jobs table; RQ only carries wake-ups for the
worker. A job that never reaches RQ (Redis down, worker lost) is still picked
up by the backlog sweep, so delivery is at-least-once.
"""
from datetime import datetime, timedelta
from typing import Dict, List, Optional
from flask import current_app
from redis import Redis
from rq import Queue
from sqlalchemy.exc import IntegrityError
from recruitment import db
from recruitment.errors import DeliveryFailure, InvalidRequest, NotFound, NotificationNotReady
from recruitment.models.audit_log import AuditLog
from recruitment.models.interview import Interview
from recruitment.models.notification_job import JOB_STATES, PAYLOAD_KINDS, NotificationJob
from recruitment.services.email_service import email_service
from recruitment.services.email_template_service import email_template_service
from recruitment.services.socketio_manager import emit_queue_status


DELIVER_TASK = 'recruitment.workers.notification_worker.deliver_notification'


class NotificationQueue:
    """Service for queueing and delivering result notifications"""

    def __init__(self, transport=None, template_service=None):
        self.transport = transport or email_service
        self.templates = template_service or email_template_service
        self._rq_queue = None
        self._rq_url = None

    # ===== CONFIGURATION =====

    @property
    def max_attempts(self):
        return current_app.config.get('NOTIFICATION_MAX_ATTEMPTS', 3)

    @property
    def retry_delay_seconds(self):
        return current_app.config.get('NOTIFICATION_RETRY_DELAY_SECONDS', 60)

    @property
    def lease_seconds(self):
        return current_app.config.get('NOTIFICATION_LEASE_SECONDS', 300)

    # ===== PRODUCER SIDE =====

    def enqueue(self, interview_id: int, payload_kind: str, confirmation_id: Optional[int] = None,
                commit: bool = True) -> Optional[NotificationJob]:
        """
        Record a notification job for an interview.

        Enqueueing for an interview that was already notified, or that
        already has a job, is a no-op.

        Args:
            interview_id: Interview to notify about
            payload_kind: 'accepted' or 'rejected'
            confirmation_id: Originating result confirmation run, if any
            commit: Commit and dispatch immediately; pass False to batch inside
                a caller's transaction and call dispatch() after committing

        Returns:
            The new NotificationJob, or None when nothing was enqueued
        """
        if payload_kind not in PAYLOAD_KINDS:
            raise InvalidRequest(f"Payload kind must be one of: {', '.join(PAYLOAD_KINDS)}")

        interview = db.session.get(Interview, interview_id)
        if not interview:
            raise NotFound(f'Interview {interview_id} not found')

        if interview.notification_sent:
            print(f"[NOTIFICATION_QUEUE] Interview {interview_id} already notified, skipping")
            return None

        if not interview.has_final_result:
            raise NotificationNotReady(f'Interview {interview_id} has no final result yet')

        if interview.payload_kind != payload_kind:
            raise InvalidRequest(
                f"Interview {interview_id} result is '{interview.result}', cannot send '{payload_kind}' notification"
            )

        if NotificationJob.query.filter_by(interview_id=interview.id).first():
            print(f"[NOTIFICATION_QUEUE] Interview {interview_id} already has a notification job, skipping")
            return None

        job = NotificationJob(
            interview_id=interview.id,
            confirmation_id=confirmation_id,
            payload_kind=payload_kind,
            state='queued',
            attempt_count=0
        )
        db.session.add(job)

        if not commit:
            db.session.flush()
            return job

        try:
            db.session.commit()
        except IntegrityError:
            # A concurrent request created the job first
            db.session.rollback()
            print(f"[NOTIFICATION_QUEUE] Interview {interview_id} job created concurrently, skipping")
            return None

        print(f"[NOTIFICATION_QUEUE] Queued {payload_kind} notification job {job.id} for interview {interview_id}")
        self.dispatch(job)
        self.broadcast_status()
        return job

    def send_single(self, interview_id: int) -> Optional[NotificationJob]:
        """
        Queue the result notification for one interview.

        Returns:
            The new NotificationJob, or None if already notified or queued
        """
        interview = db.session.get(Interview, interview_id)
        if not interview:
            raise NotFound(f'Interview {interview_id} not found')

        if interview.notification_sent:
            print(f"[NOTIFICATION_QUEUE] Interview {interview_id} already notified, skipping")
            return None

        if not interview.has_final_result:
            raise NotificationNotReady(f'Interview {interview_id} has no final result yet')

        return self.enqueue(interview.id, interview.payload_kind)

    def dispatch(self, job: NotificationJob, delay_seconds: int = 0):
        """
        Push a wake-up for the job onto RQ.

        Failures are logged only: the job row is already durable and the
        backlog sweep delivers it without RQ.

        Returns:
            RQ Job instance or None
        """
        if not current_app.config.get('NOTIFICATION_DISPATCH_ENABLED', True):
            return None

        job_id = job.id
        timeout = current_app.config.get('NOTIFICATION_SEND_TIMEOUT', 30) + 60

        try:
            queue = self._get_rq_queue()
            if delay_seconds:
                rq_job = queue.enqueue_in(timedelta(seconds=delay_seconds), DELIVER_TASK, job_id,
                                          job_timeout=timeout)
            else:
                rq_job = queue.enqueue(DELIVER_TASK, job_id, job_timeout=timeout)

            NotificationJob.query.filter_by(id=job_id).update(
                {'rq_job_id': rq_job.id}, synchronize_session=False
            )
            db.session.commit()
            return rq_job

        except Exception as e:
            print(f"[NOTIFICATION_QUEUE] Could not dispatch job {job_id} to RQ, leaving it for the backlog sweep: {e}")
            db.session.rollback()
            return None

    def dispatch_all(self, jobs: List[NotificationJob]):
        for job in jobs:
            self.dispatch(job)

    # ===== STATUS & RECOVERY =====

    def status(self) -> Dict[str, int]:
        """
        Count jobs per state

        Returns:
            Dict with queued, sent, failed and total counts
        """
        rows = db.session.query(
            NotificationJob.state,
            db.func.count(NotificationJob.id)
        ).group_by(NotificationJob.state).all()

        counts = {state: 0 for state in JOB_STATES}
        for state, count in rows:
            counts[state] = count
        counts['total'] = sum(counts[state] for state in JOB_STATES)
        return counts

    def list_jobs(self, state: Optional[str] = None, limit: int = 50) -> List[NotificationJob]:
        query = NotificationJob.query
        if state:
            query = query.filter_by(state=state)
        return query.order_by(NotificationJob.updated_at.desc(), NotificationJob.id.desc()).limit(limit).all()

    def retry_failed(self) -> int:
        """
        Move every failed job back to queued with a fresh attempt budget

        Returns:
            Number of jobs requeued (0 when nothing had failed)
        """
        failed_jobs = NotificationJob.query.filter_by(state='failed').all()
        if not failed_jobs:
            return 0

        for job in failed_jobs:
            job.state = 'queued'
            job.attempt_count = 0
            job.last_error = None
            job.next_attempt_at = None
            job.locked_until = None

        AuditLog.record(
            'notifications_retried',
            resource_type='notification_queue',
            details={'job_ids': [job.id for job in failed_jobs]}
        )
        db.session.commit()

        print(f"[NOTIFICATION_QUEUE] Retrying {len(failed_jobs)} failed notification jobs")
        self.dispatch_all(failed_jobs)
        self.broadcast_status()
        return len(failed_jobs)

    def release_expired_leases(self) -> int:
        """
        Clear claims left behind by workers that died mid-delivery

        Returns:
            Number of jobs released
        """
        released = NotificationJob.query.filter(
            NotificationJob.state == 'queued',
            NotificationJob.locked_until.isnot(None),
            NotificationJob.locked_until < datetime.utcnow()
        ).update({NotificationJob.locked_until: None}, synchronize_session=False)
        db.session.commit()

        if released:
            print(f"[NOTIFICATION_QUEUE] Released {released} expired job leases")
        return released

    def broadcast_status(self):
        emit_queue_status(self.status())

    # ===== WORKER SIDE =====

    def deliver(self, job_id: int) -> Optional[NotificationJob]:
        """
        Attempt delivery of one job.

        The job is claimed with a lease and its attempt counter committed
        before anything is sent, so concurrent workers never send the same
        job at once and a crash mid-send still counts as an attempt.
        Delivery failures are recorded on the job and never raised.

        Returns:
            The NotificationJob after the attempt, or None if it does not exist
        """
        now = datetime.utcnow()
        claimed = NotificationJob.query.filter(
            NotificationJob.id == job_id,
            NotificationJob.state == 'queued',
            db.or_(NotificationJob.next_attempt_at.is_(None), NotificationJob.next_attempt_at <= now),
            db.or_(NotificationJob.locked_until.is_(None), NotificationJob.locked_until < now)
        ).update({
            NotificationJob.attempt_count: NotificationJob.attempt_count + 1,
            NotificationJob.locked_until: now + timedelta(seconds=self.lease_seconds),
            NotificationJob.last_attempt_at: now,
        }, synchronize_session=False)
        db.session.commit()

        job = db.session.get(NotificationJob, job_id)
        if not claimed:
            if job:
                print(f"[NOTIFICATION_QUEUE] Job {job_id} is {job.state}, not due yet or claimed elsewhere, skipping")
            else:
                print(f"[NOTIFICATION_QUEUE] Job {job_id} not found")
            return job

        interview = job.interview
        if interview.notification_sent:
            # Delivered by an earlier attempt whose bookkeeping was lost
            self._mark_sent(job, interview)
            return job

        try:
            self._send(job, interview)
        except DeliveryFailure as e:
            self._record_failure(job, e.message)
            return job

        self._mark_sent(job, interview)
        return job

    def process_backlog(self, limit: Optional[int] = None) -> Dict[str, int]:
        """
        Deliver queued jobs that are due and not claimed by another worker

        Args:
            limit: Maximum jobs to attempt (defaults to NOTIFICATION_BATCH_SIZE)

        Returns:
            Dict with processed, sent, retrying and failed counts
        """
        limit = limit or current_app.config.get('NOTIFICATION_BATCH_SIZE', 10)
        now = datetime.utcnow()

        due_ids = [
            job.id for job in NotificationJob.query.filter(
                NotificationJob.state == 'queued',
                db.or_(NotificationJob.next_attempt_at.is_(None), NotificationJob.next_attempt_at <= now),
                db.or_(NotificationJob.locked_until.is_(None), NotificationJob.locked_until < now)
            ).order_by(NotificationJob.id.asc()).limit(limit).all()
        ]

        results = {'processed': 0, 'sent': 0, 'retrying': 0, 'failed': 0}
        for job_id in due_ids:
            job = self.deliver(job_id)
            if not job:
                continue
            results['processed'] += 1
            if job.state == 'sent':
                results['sent'] += 1
            elif job.state == 'failed':
                results['failed'] += 1
            else:
                results['retrying'] += 1

        return results

    # ===== INTERNALS =====

    def _send(self, job: NotificationJob, interview: Interview):
        application = interview.application
        subject, html = self.templates.render_result(job.payload_kind, {
            'name': application.full_name,
            'organization': current_app.config.get('ORGANIZATION_NAME'),
            'scheduled_at': interview.scheduled_at.strftime('%Y-%m-%d %H:%M'),
            'room': interview.room.name if interview.room else None,
        })

        try:
            ok = self.transport.send(application.email, subject, html)
        except Exception as e:
            raise DeliveryFailure(f'{type(e).__name__}: {e}') from e

        if not ok:
            raise DeliveryFailure(f'Mail transport did not accept message to {application.email}')

    def _mark_sent(self, job: NotificationJob, interview: Interview):
        job.state = 'sent'
        job.sent_at = datetime.utcnow()
        job.locked_until = None
        job.next_attempt_at = None
        job.last_error = None

        interview.mark_notified()
        interview.application.update_status('accepted' if job.payload_kind == 'accepted' else 'rejected')
        db.session.commit()

        print(f"[NOTIFICATION_QUEUE] Job {job.id} delivered ({job.payload_kind}) for interview {interview.id}")
        self.broadcast_status()

    def _record_failure(self, job: NotificationJob, error: str):
        job.last_error = error
        job.locked_until = None

        if job.attempt_count >= self.max_attempts:
            job.state = 'failed'
            job.next_attempt_at = None
            AuditLog.record(
                'notification_failed',
                resource_type='notification_job',
                resource_id=job.id,
                details={'interview_id': job.interview_id, 'attempts': job.attempt_count},
                status='failure',
                error=error
            )
            db.session.commit()
            print(f"[NOTIFICATION_QUEUE] Job {job.id} failed after {job.attempt_count} attempts: {error}")
            self.broadcast_status()
            return

        delay = self.retry_delay_seconds * job.attempt_count
        job.next_attempt_at = datetime.utcnow() + timedelta(seconds=delay)
        db.session.commit()
        print(f"[NOTIFICATION_QUEUE] Job {job.id} attempt {job.attempt_count} failed, retrying in {delay}s: {error}")
        self.dispatch(job, delay_seconds=delay)

    def _get_rq_queue(self):
        redis_url = current_app.config['REDIS_URL']
        if self._rq_queue is None or self._rq_url != redis_url:
            self._rq_queue = Queue(
                current_app.config.get('NOTIFICATION_QUEUE_NAME', 'notifications'),
                connection=Redis.from_url(redis_url)
            )
            self._rq_url = redis_url
        return self._rq_queue


# Singleton instance
_notification_queue = None


def get_notification_queue() -> NotificationQueue:
    """Get or create the notification queue singleton"""
    global _notification_queue
    if _notification_queue is None:
        _notification_queue = NotificationQueue()
    return _notification_queue
