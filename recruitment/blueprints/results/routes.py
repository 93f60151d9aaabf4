from flask import request, jsonify, current_app
from recruitment.blueprints.results import results_bp
from recruitment.errors import InvalidRequest
from recruitment.models.interview import Interview
from recruitment.models.notification_job import JOB_STATES
from recruitment.services.notification_queue import get_notification_queue
from recruitment.services.result_confirmation_service import result_confirmation_service
from recruitment.utils.input_validators import get_json_body
from recruitment import limiter


def _confirmation_payload(run):
    """Run state plus the frozen interviews the operator is reviewing"""
    ids = run.accepted_ids + run.rejected_ids
    interviews = {i.id: i for i in Interview.query.filter(Interview.id.in_(ids)).all()} if ids else {}

    payload = run.to_dict()
    payload['accepted'] = [interviews[i].to_dict() for i in run.accepted_ids if i in interviews]
    payload['rejected'] = [interviews[i].to_dict() for i in run.rejected_ids if i in interviews]
    return payload


# ===== RESULT CONFIRMATION =====

@results_bp.route('/confirmations', methods=['POST'])
def start_confirmation():
    """Freeze the current accepted/rejected sets into a new run"""
    run = result_confirmation_service.start()
    return jsonify(_confirmation_payload(run)), 201


@results_bp.route('/confirmations/<int:run_id>', methods=['GET'])
def view_confirmation(run_id):
    run = result_confirmation_service.get(run_id)
    return jsonify(_confirmation_payload(run))


@results_bp.route('/confirmations/<int:run_id>/steps', methods=['POST'])
def confirm_step(run_id):
    """
    Confirm the current step

    Body: {"step": "reviewing_accepted", "confirmed": true}
    """
    data = get_json_body()
    run = result_confirmation_service.confirm_step(run_id, data.get('step'), data.get('confirmed'))
    return jsonify(_confirmation_payload(run))


@results_bp.route('/confirmations/<int:run_id>/back', methods=['POST'])
def go_back(run_id):
    run = result_confirmation_service.go_back(run_id)
    return jsonify(_confirmation_payload(run))


@results_bp.route('/confirmations/<int:run_id>/finalize', methods=['POST'])
@limiter.limit("10 per minute")
def finalize(run_id):
    """Enqueue result emails for every interview in the run"""
    enqueued = result_confirmation_service.finalize(run_id)
    run = result_confirmation_service.get(run_id)
    return jsonify({
        'success': True,
        'enqueued': enqueued,
        'confirmation': run.to_dict()
    })


# ===== NOTIFICATION QUEUE =====

@results_bp.route('/interviews/<int:interview_id>/notify', methods=['POST'])
def notify_single(interview_id):
    """Queue the result email for one interview"""
    queue = get_notification_queue()
    job = queue.send_single(interview_id)

    if not job:
        return jsonify({
            'queued': False,
            'message': 'Candidate already notified or notification already queued'
        })

    return jsonify({
        'queued': True,
        'job': job.to_dict()
    }), 202


@results_bp.route('/queue', methods=['GET'])
def queue_status():
    """Queue counts and the most recently updated jobs"""
    state = request.args.get('state')
    if state and state not in JOB_STATES:
        raise InvalidRequest(f"Unknown job state '{state}'")

    queue = get_notification_queue()
    jobs = queue.list_jobs(state=state, limit=current_app.config.get('QUEUE_JOBS_LISTED', 50))

    return jsonify({
        'counts': queue.status(),
        'jobs': [job.to_dict() for job in jobs]
    })


@results_bp.route('/queue/retry-failed', methods=['POST'])
@limiter.limit("10 per minute")
def retry_failed():
    """Give every failed notification a fresh set of attempts"""
    queue = get_notification_queue()
    retried = queue.retry_failed()

    return jsonify({
        'success': True,
        'retried': retried,
        'counts': queue.status()
    })
