"""
Tests for interview admin routes
"""
import pytest
from recruitment.models.interview import Interview


WINDOW = {
    'date': '2025-03-14',
    'start_time': '09:00',
    'end_time': '10:30',
    'interval_minutes': 30,
}

SCORES = {
    'technical': 9,
    'communication': 8,
    'teamwork': 7,
    'motivation': 9,
    'overall': 8,
}


class TestSlotRoutes:
    """Test suite for slot planning"""

    def test_plan_slots(self, client):
        response = client.post('/admin/interviews/slots', json=WINDOW)

        assert response.status_code == 200
        data = response.get_json()
        assert data['count'] == 3
        assert [slot['label'] for slot in data['slots']] == ['09:00-09:30', '09:30-10:00', '10:00-10:30']

    def test_invalid_window(self, client):
        response = client.post('/admin/interviews/slots', json={**WINDOW, 'start_time': '11:00'})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'invalid_window'

    def test_unparseable_time(self, client):
        response = client.post('/admin/interviews/slots', json={**WINDOW, 'end_time': 'noonish'})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'invalid_window'

    @pytest.mark.parametrize('start_time', ['9', '2025-03-14', 'March', '25:00', '09:00pm'])
    def test_time_must_be_hours_and_minutes(self, client, start_time):
        response = client.post('/admin/interviews/slots', json={**WINDOW, 'start_time': start_time})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'invalid_window'

    def test_single_digit_hour(self, client):
        response = client.post('/admin/interviews/slots', json={**WINDOW, 'start_time': '9:30'})

        assert response.status_code == 200
        assert response.get_json()['count'] == 2

    def test_missing_body(self, client):
        response = client.post('/admin/interviews/slots', data='not json', content_type='text/plain')

        assert response.status_code == 400
        assert response.get_json()['error'] == 'invalid_request'


class TestBatchRoutes:
    """Test suite for batch allocation"""

    def test_batch_allocate(self, client, room, make_applications):
        applications = make_applications(2)

        response = client.post('/admin/interviews/batch', json={
            **WINDOW,
            'application_ids': [applications[1].id, applications[0].id],
            'room_id': room.id,
        })

        assert response.status_code == 201
        data = response.get_json()
        assert data['count'] == 2
        assert [i['application_id'] for i in data['interviews']] == [applications[1].id, applications[0].id]
        assert [i['scheduled_at'] for i in data['interviews']] == ['2025-03-14T09:00:00', '2025-03-14T09:30:00']

    def test_capacity_exceeded(self, client, room, make_applications):
        applications = make_applications(4)

        response = client.post('/admin/interviews/batch', json={
            **WINDOW,
            'application_ids': [a.id for a in applications],
            'room_id': room.id,
        })

        assert response.status_code == 400
        data = response.get_json()
        assert data['error'] == 'capacity_exceeded'
        assert data['max_assignable'] == 3
        assert Interview.query.count() == 0

    def test_duplicate_assignment(self, client, room, make_applications):
        application = make_applications(1)[0]
        body = {**WINDOW, 'application_ids': [application.id], 'room_id': room.id}
        client.post('/admin/interviews/batch', json=body)

        response = client.post('/admin/interviews/batch', json={**body, 'start_time': '13:00', 'end_time': '14:00'})

        assert response.status_code == 409
        assert response.get_json()['error'] == 'duplicate_assignment'
        assert response.get_json()['application_ids'] == [application.id]

    def test_empty_selection(self, client, room):
        response = client.post('/admin/interviews/batch', json={**WINDOW, 'application_ids': [], 'room_id': room.id})

        assert response.status_code == 400

    def test_missing_room(self, client, make_applications):
        application = make_applications(1)[0]

        response = client.post('/admin/interviews/batch', json={**WINDOW, 'application_ids': [application.id]})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'invalid_request'


class TestInterviewListRoutes:
    """Test suite for listing and viewing interviews"""

    def test_list_with_filters(self, client, make_interview):
        pending = make_interview()
        passed = make_interview(result='passed')
        notified = make_interview(result='failed', notified=True)

        all_ids = [i['id'] for i in client.get('/admin/interviews').get_json()['interviews']]
        assert all_ids == [pending.id, passed.id, notified.id]

        completed = client.get('/admin/interviews?status=completed').get_json()
        assert [i['id'] for i in completed['interviews']] == [passed.id, notified.id]

        unnotified = client.get('/admin/interviews?status=completed&notified=false').get_json()
        assert [i['id'] for i in unnotified['interviews']] == [passed.id]

        failed = client.get('/admin/interviews?result=failed').get_json()
        assert failed['total'] == 1

    def test_unknown_filter_value(self, client):
        response = client.get('/admin/interviews?status=cancelled')

        assert response.status_code == 400

    def test_view_interview(self, client, passed_interview):
        response = client.get(f'/admin/interviews/{passed_interview.id}')

        assert response.status_code == 200
        data = response.get_json()
        assert data['result'] == 'passed'
        assert data['room']['name'] == 'Lab 1'
        assert data['notification_job'] is None

    def test_view_missing_interview(self, client):
        response = client.get('/admin/interviews/9999')

        assert response.status_code == 404
        assert response.get_json()['error'] == 'not_found'


class TestScoreRoutes:
    """Test suite for scoring over HTTP"""

    def test_score_interview(self, client, make_interview):
        interview = make_interview()

        response = client.post(f'/admin/interviews/{interview.id}/score', json={
            'scores': SCORES,
            'notes': 'Clear communicator',
            'result': 'passed',
        })

        assert response.status_code == 200
        data = response.get_json()['interview']
        assert data['status'] == 'completed'
        assert data['evaluation_scores'] == SCORES

    def test_incomplete_scores(self, client, make_interview):
        interview = make_interview()

        response = client.post(f'/admin/interviews/{interview.id}/score', json={
            'scores': {'technical': 9},
            'result': 'passed',
        })

        assert response.status_code == 400
        data = response.get_json()
        assert data['error'] == 'incomplete_evaluation'
        assert 'overall' in data['missing_fields']

    def test_rescore(self, client, passed_interview):
        response = client.post(f'/admin/interviews/{passed_interview.id}/score', json={
            'scores': SCORES,
            'result': 'failed',
        })

        assert response.status_code == 409
        assert response.get_json()['error'] == 'result_already_recorded'
