"""
Recruitment Errors
Domain errors raised by scheduling, scoring, confirmation and notification services
"""


class RecruitmentError(Exception):
    """Base class for errors surfaced to API callers"""
    status_code = 400
    code = 'recruitment_error'

    def __init__(self, message=None, **details):
        super().__init__(message or self.__doc__)
        self.message = message or self.__doc__
        self.details = details

    def to_dict(self):
        payload = {'error': self.code, 'message': self.message}
        payload.update(self.details)
        return payload


class InvalidRequest(RecruitmentError):
    """Malformed request payload"""
    code = 'invalid_request'


class NotFound(RecruitmentError):
    """Resource not found"""
    status_code = 404
    code = 'not_found'


class InvalidWindow(RecruitmentError):
    """Start time must be before end time and interval must be positive"""
    code = 'invalid_window'


class CapacityExceeded(RecruitmentError):
    """More candidates selected than available time slots"""
    code = 'capacity_exceeded'

    def __init__(self, max_assignable, requested):
        super().__init__(
            f"Selected {requested} candidates but only {max_assignable} slots are available",
            max_assignable=max_assignable,
            requested=requested
        )
        self.max_assignable = max_assignable


class RoomUnavailable(RecruitmentError):
    """Room does not exist or is not active"""
    code = 'room_unavailable'


class AllocationConflict(RecruitmentError):
    """Allocation conflicts with existing interviews"""
    status_code = 409
    code = 'allocation_conflict'


class DuplicateAssignment(AllocationConflict):
    """Application already has an active interview"""
    code = 'duplicate_assignment'

    def __init__(self, application_ids):
        super().__init__(
            f"Applications already scheduled: {', '.join(str(a) for a in application_ids)}",
            application_ids=list(application_ids)
        )
        self.application_ids = list(application_ids)


class RoomDoubleBooked(AllocationConflict):
    """Room already has an interview at one of the requested times"""
    code = 'room_double_booked'

    def __init__(self, scheduled_at):
        super().__init__(
            'Room already booked at ' + ', '.join(s.isoformat() for s in scheduled_at),
            scheduled_at=[s.isoformat() for s in scheduled_at]
        )


class IncompleteEvaluation(RecruitmentError):
    """Scoring requires a final result and all five evaluation fields"""
    code = 'incomplete_evaluation'


class ResultAlreadyRecorded(RecruitmentError):
    """Interview has already been scored"""
    status_code = 409
    code = 'result_already_recorded'


class InvalidWorkflowTransition(RecruitmentError):
    """Step is not allowed from the workflow's current state"""
    status_code = 409
    code = 'invalid_workflow_transition'


class NotificationNotReady(RecruitmentError):
    """Interview result is still pending"""
    code = 'notification_not_ready'


class DeliveryFailure(RecruitmentError):
    """Mail transport rejected or failed to send a message"""
    status_code = 502
    code = 'delivery_failure'


class QueueExhausted(RecruitmentError):
    """Notification job failed after exhausting its delivery attempts"""
    status_code = 502
    code = 'queue_exhausted'
