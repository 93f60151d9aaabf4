"""
Notification Worker
RQ task and periodic jobs delivering result notification emails
"""
from typing import Any, Dict
from recruitment.errors import QueueExhausted
from recruitment.services.notification_queue import get_notification_queue


def deliver_notification(job_id: int) -> Dict[str, Any]:
    """
    Deliver one notification job.
    This function runs in an RQ worker process, inside the app context
    pushed by worker.py.

    Args:
        job_id: ID of the NotificationJob

    Returns:
        Delivery result dictionary

    Raises:
        QueueExhausted: when the job has used up its attempts, so it lands
            in RQ's failed registry
    """
    print(f"[NOTIFICATION_WORKER] Delivering notification job {job_id}")

    job = get_notification_queue().deliver(job_id)
    if not job:
        return {'job_id': job_id, 'state': None, 'message': 'Job not found'}

    if job.state == 'failed':
        raise QueueExhausted(
            f'Notification job {job.id} failed after {job.attempt_count} attempts: {job.last_error}',
            job_id=job.id
        )

    print(f"[NOTIFICATION_WORKER] Job {job.id} is {job.state} after {job.attempt_count} attempts")
    return {
        'job_id': job.id,
        'state': job.state,
        'attempt_count': job.attempt_count
    }


def process_notification_backlog():
    """
    Deliver queued jobs that never reached RQ or are due for a retry.

    Returns:
        Dictionary with processing stats
    """
    print("[NOTIFICATION_WORKER] Starting backlog sweep...")

    try:
        results = get_notification_queue().process_backlog()

        result = {
            'success': True,
            **results,
            'message': f"Processed {results['processed']} jobs: {results['sent']} sent, "
                       f"{results['retrying']} retrying, {results['failed']} failed"
        }
        print(f"[NOTIFICATION_WORKER] Completed: {result['message']}")
        return result

    except Exception as e:
        print(f"[NOTIFICATION_WORKER] Fatal error: {e}")
        import traceback
        traceback.print_exc()

        return {
            'success': False,
            'error': str(e),
            'message': 'Failed to process notification backlog'
        }


def periodic_notification_maintenance():
    """
    Release abandoned claims, sweep the backlog and report queue counts.

    Returns:
        Dictionary with maintenance stats
    """
    print("[NOTIFICATION_WORKER] Running periodic maintenance...")

    queue = get_notification_queue()
    released = queue.release_expired_leases()
    backlog = process_notification_backlog()
    counts = queue.status()
    queue.broadcast_status()

    return {
        'success': backlog['success'],
        'leases_released': released,
        'backlog': backlog,
        'counts': counts,
        'message': f"Released {released} leases; {backlog['message']}"
    }
