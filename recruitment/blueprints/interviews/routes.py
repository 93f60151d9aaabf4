from flask import request, jsonify, current_app
from recruitment.blueprints.interviews import interviews_bp
from recruitment.errors import InvalidRequest, NotFound
from recruitment.models.interview import INTERVIEW_RESULTS, INTERVIEW_STATUSES, Interview
from recruitment.services.allocation_service import allocation_service
from recruitment.services.scoring_service import scoring_service
from recruitment.services.slot_planner import plan_slots
from recruitment.utils.input_validators import (
    get_json_body, parse_bool_arg, parse_id_list, parse_window
)
from recruitment import db


@interviews_bp.route('/slots', methods=['POST'])
def plan():
    """Preview the slots for a time window"""
    data = get_json_body()
    slots = plan_slots(*parse_window(data))

    print(f"[SLOTS] Planned {len(slots)} slots: {slots!r}")
    return jsonify({
        'slots': [slot.to_dict() for slot in slots],
        'count': len(slots)
    })


@interviews_bp.route('/batch', methods=['POST'])
def batch_allocate():
    """
    Plan slots and allocate the selected applications in one step

    Body: application_ids (selection order), room_id, date, start_time,
    end_time, interval_minutes
    """
    data = get_json_body()

    application_ids = parse_id_list(data.get('application_ids'), 'application_ids')
    if not application_ids:
        raise InvalidRequest('Select at least one candidate')

    room_id = data.get('room_id')
    if isinstance(room_id, bool) or not isinstance(room_id, int):
        raise InvalidRequest('room_id is required')

    slots = plan_slots(*parse_window(data))
    interviews = allocation_service.allocate(application_ids, room_id, slots)

    return jsonify({
        'success': True,
        'count': len(interviews),
        'interviews': [interview.to_dict() for interview in interviews]
    }), 201


@interviews_bp.route('', methods=['GET'])
def index():
    """List interviews, filtered by status, result and notification state"""
    query = Interview.query

    status_filter = request.args.get('status')
    if status_filter:
        if status_filter not in INTERVIEW_STATUSES:
            raise InvalidRequest(f"Unknown status '{status_filter}'")
        query = query.filter_by(status=status_filter)

    result_filter = request.args.get('result')
    if result_filter:
        if result_filter not in INTERVIEW_RESULTS:
            raise InvalidRequest(f"Unknown result '{result_filter}'")
        query = query.filter_by(result=result_filter)

    notified_filter = parse_bool_arg(request.args.get('notified'))
    if notified_filter is not None:
        query = query.filter_by(notification_sent=notified_filter)

    page = request.args.get('page', 1, type=int)
    pagination = query.order_by(Interview.scheduled_at.asc(), Interview.id.asc()).paginate(
        page=page,
        per_page=current_app.config.get('INTERVIEWS_PER_PAGE', 20),
        error_out=False
    )

    return jsonify({
        'interviews': [interview.to_dict() for interview in pagination.items],
        'total': pagination.total,
        'page': pagination.page,
        'pages': pagination.pages
    })


@interviews_bp.route('/<int:interview_id>', methods=['GET'])
def view(interview_id):
    interview = db.session.get(Interview, interview_id)
    if not interview:
        raise NotFound(f'Interview {interview_id} not found')

    payload = interview.to_dict()
    job = interview.notification_job
    payload['notification_job'] = job.to_dict() if job else None
    return jsonify(payload)


@interviews_bp.route('/<int:interview_id>/score', methods=['POST'])
def score(interview_id):
    """Record the evaluation and final result of an interview"""
    data = get_json_body()

    interview = scoring_service.score(
        interview_id,
        data.get('scores'),
        notes=data.get('notes'),
        result=data.get('result')
    )

    return jsonify({
        'success': True,
        'interview': interview.to_dict()
    })
