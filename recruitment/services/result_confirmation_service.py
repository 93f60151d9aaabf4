"""
Result Confirmation Service
Human-confirmed review of accepted and rejected candidates before bulk notification

Runs move reviewing_accepted -> reviewing_rejected -> final_confirm -> dispatched.
State is stored in result_confirmations so an operator can resume a run.
"""
from datetime import datetime
from sqlalchemy.exc import IntegrityError
from recruitment import db
from recruitment.errors import InvalidRequest, InvalidWorkflowTransition, NotFound
from recruitment.models.audit_log import AuditLog
from recruitment.models.interview import Interview
from recruitment.models.result_confirmation import ResultConfirmation
from recruitment.services.notification_queue import get_notification_queue


STEPS = ('reviewing_accepted', 'reviewing_rejected', 'final_confirm')

PREVIOUS_STEP = {
    'reviewing_rejected': 'reviewing_accepted',
    'final_confirm': 'reviewing_rejected',
}


class ResultConfirmationService:
    """Service driving result confirmation runs"""

    def start(self):
        """
        Open a new run with frozen accepted and rejected sets

        Only completed, scored interviews that were neither notified nor
        already queued are included, so the sets are exactly what finalize
        enqueues. Anything scored later belongs to the next run.

        Returns:
            The new ResultConfirmation
        """
        pending = Interview.query.filter(
            Interview.status == 'completed',
            Interview.notification_sent.is_(False),
            ~Interview.notification_job.has(),
            Interview.result.in_(('passed', 'failed'))
        ).order_by(Interview.scheduled_at.asc(), Interview.id.asc()).all()

        accepted = [i.id for i in pending if i.result == 'passed']
        rejected = [i.id for i in pending if i.result == 'failed']

        run = ResultConfirmation(state='reviewing_accepted')
        run.freeze_sets(accepted, rejected)
        db.session.add(run)
        db.session.flush()

        AuditLog.record(
            'result_confirmation_started',
            resource_type='result_confirmation',
            resource_id=run.id,
            details={'accepted': len(accepted), 'rejected': len(rejected)}
        )
        db.session.commit()

        print(f"[RESULT_CONFIRMATION] Run {run.id} started: {len(accepted)} accepted, {len(rejected)} rejected")
        return run

    def get(self, run_id):
        run = db.session.get(ResultConfirmation, run_id)
        if not run:
            raise NotFound(f'Result confirmation {run_id} not found')
        return run

    def confirm_step(self, run_id, step, confirmed):
        """
        Confirm the step the run is currently on

        Args:
            run_id: ResultConfirmation ID
            step: Must equal the run's current state
            confirmed: Operator's explicit answer; False leaves the run unchanged

        Returns:
            The ResultConfirmation; confirming final_confirm finalises the run
        """
        if step not in STEPS:
            raise InvalidRequest(f"Unknown step '{step}'")
        if not isinstance(confirmed, bool):
            raise InvalidRequest('confirmed must be true or false')

        run = self._get_open_run(run_id)

        if step != run.state:
            raise InvalidWorkflowTransition(
                f"Run {run.id} is at '{run.state}', cannot confirm '{step}'",
                state=run.state
            )

        if not confirmed:
            return run

        if step == 'final_confirm':
            self.finalize(run.id)
            return self.get(run.id)

        previous = run.state
        if step == 'reviewing_accepted':
            run.accepted_confirmed = True
            run.state = 'final_confirm' if run.rejected_confirmed else 'reviewing_rejected'
        else:
            run.rejected_confirmed = True
            run.state = 'final_confirm'

        self._record_transition(run, previous)
        db.session.commit()
        return run

    def go_back(self, run_id):
        """Step back one stage, keeping confirmations already given"""
        run = self._get_open_run(run_id)

        if run.state not in PREVIOUS_STEP:
            raise InvalidWorkflowTransition(
                f"Run {run.id} cannot go back from '{run.state}'",
                state=run.state
            )

        previous = run.state
        run.state = PREVIOUS_STEP[previous]
        self._record_transition(run, previous)
        db.session.commit()
        return run

    def finalize(self, run_id):
        """
        Enqueue one notification job per frozen interview and close the run.

        Accepted jobs are enqueued before rejected ones. The run row is
        locked so two operators cannot finalise the same run twice.

        Returns:
            Number of jobs enqueued
        """
        run = ResultConfirmation.query.filter_by(id=run_id).with_for_update().first()
        if not run:
            raise NotFound(f'Result confirmation {run_id} not found')

        if run.state != 'final_confirm':
            raise InvalidWorkflowTransition(
                f"Run {run.id} is at '{run.state}', cannot finalize",
                state=run.state
            )

        queue = get_notification_queue()
        jobs = []
        try:
            for kind, interview_ids in (('accepted', run.accepted_ids), ('rejected', run.rejected_ids)):
                for interview_id in interview_ids:
                    job = queue.enqueue(interview_id, kind, confirmation_id=run_id, commit=False)
                    if job:
                        jobs.append(job)

            run.state = 'dispatched'
            run.enqueued_count = len(jobs)
            run.dispatched_at = datetime.utcnow()

            AuditLog.record(
                'result_notifications_dispatched',
                resource_type='result_confirmation',
                resource_id=run_id,
                details={'enqueued': len(jobs), 'job_ids': [job.id for job in jobs]}
            )
            db.session.commit()

        except IntegrityError as e:
            # A single send queued one of these interviews concurrently
            db.session.rollback()
            print(f"[RESULT_CONFIRMATION] Run {run_id} finalize conflicted with a concurrent send: {e.orig}")
            raise InvalidWorkflowTransition(
                f'Run {run_id} conflicted with a notification queued at the same time, finalize again',
                state='final_confirm'
            ) from e

        print(f"[RESULT_CONFIRMATION] Run {run.id} dispatched {len(jobs)} notification jobs")

        queue.dispatch_all(jobs)
        queue.broadcast_status()
        return len(jobs)

    def _get_open_run(self, run_id):
        run = self.get(run_id)
        if run.is_dispatched:
            raise InvalidWorkflowTransition(
                f'Run {run.id} has already been dispatched',
                state=run.state
            )
        return run

    def _record_transition(self, run, previous):
        AuditLog.record(
            'result_confirmation_step',
            resource_type='result_confirmation',
            resource_id=run.id,
            details={'from': previous, 'to': run.state}
        )
        print(f"[RESULT_CONFIRMATION] Run {run.id}: {previous} -> {run.state}")


# Singleton instance
result_confirmation_service = ResultConfirmationService()
