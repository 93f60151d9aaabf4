"""
Tests for result confirmation and notification queue routes
"""
from recruitment.models.notification_job import NotificationJob
from recruitment.services.notification_queue import get_notification_queue


def confirm(client, run_id, step, confirmed=True):
    return client.post(f'/admin/results/confirmations/{run_id}/steps', json={'step': step, 'confirmed': confirmed})


class TestConfirmationRoutes:
    """Test suite for the confirmation workflow over HTTP"""

    def test_full_workflow(self, client, transport, passed_interview, failed_interview):
        response = client.post('/admin/results/confirmations')
        assert response.status_code == 201
        run = response.get_json()
        assert run['state'] == 'reviewing_accepted'
        assert [i['id'] for i in run['accepted']] == [passed_interview.id]
        assert [i['id'] for i in run['rejected']] == [failed_interview.id]

        assert confirm(client, run['id'], 'reviewing_accepted').get_json()['state'] == 'reviewing_rejected'
        assert confirm(client, run['id'], 'reviewing_rejected').get_json()['state'] == 'final_confirm'

        response = client.post(f"/admin/results/confirmations/{run['id']}/finalize")
        assert response.status_code == 200
        data = response.get_json()
        assert data['enqueued'] == 2
        assert data['confirmation']['state'] == 'dispatched'

        queue = client.get('/admin/results/queue').get_json()
        assert queue['counts'] == {'queued': 2, 'sent': 0, 'failed': 0, 'total': 2}

    def test_view_confirmation(self, client, passed_interview):
        run_id = client.post('/admin/results/confirmations').get_json()['id']

        response = client.get(f'/admin/results/confirmations/{run_id}')

        assert response.status_code == 200
        assert response.get_json()['accepted_interview_ids'] == [passed_interview.id]

    def test_declined_confirmation_stays(self, client, passed_interview):
        run_id = client.post('/admin/results/confirmations').get_json()['id']

        response = confirm(client, run_id, 'reviewing_accepted', confirmed=False)

        assert response.get_json()['state'] == 'reviewing_accepted'

    def test_wrong_step(self, client, passed_interview):
        run_id = client.post('/admin/results/confirmations').get_json()['id']

        response = confirm(client, run_id, 'final_confirm')

        assert response.status_code == 409
        assert response.get_json()['error'] == 'invalid_workflow_transition'
        assert response.get_json()['state'] == 'reviewing_accepted'

    def test_go_back(self, client, passed_interview):
        run_id = client.post('/admin/results/confirmations').get_json()['id']
        confirm(client, run_id, 'reviewing_accepted')

        response = client.post(f'/admin/results/confirmations/{run_id}/back')

        assert response.get_json()['state'] == 'reviewing_accepted'
        assert response.get_json()['accepted_confirmed'] is True

    def test_finalize_too_early(self, client, passed_interview):
        run_id = client.post('/admin/results/confirmations').get_json()['id']

        response = client.post(f'/admin/results/confirmations/{run_id}/finalize')

        assert response.status_code == 409
        assert NotificationJob.query.count() == 0

    def test_missing_confirmation(self, client):
        assert client.get('/admin/results/confirmations/9999').status_code == 404


class TestQueueRoutes:
    """Test suite for single sends and queue management"""

    def test_notify_single(self, client, transport, passed_interview):
        response = client.post(f'/admin/results/interviews/{passed_interview.id}/notify')

        assert response.status_code == 202
        assert response.get_json()['job']['payload_kind'] == 'accepted'

        again = client.post(f'/admin/results/interviews/{passed_interview.id}/notify')
        assert again.status_code == 200
        assert again.get_json()['queued'] is False

    def test_notify_pending_result(self, client, make_interview):
        interview = make_interview()

        response = client.post(f'/admin/results/interviews/{interview.id}/notify')

        assert response.status_code == 400
        assert response.get_json()['error'] == 'notification_not_ready'

    def test_queue_lists_jobs_by_state(self, client, transport, make_interview):
        queue = get_notification_queue()
        sent = queue.enqueue(make_interview(result='passed').id, 'accepted')
        queue.deliver(sent.id)
        queue.enqueue(make_interview(result='failed').id, 'rejected')

        data = client.get('/admin/results/queue?state=sent').get_json()

        assert data['counts']['total'] == 2
        assert [job['id'] for job in data['jobs']] == [sent.id]

    def test_queue_unknown_state(self, client):
        assert client.get('/admin/results/queue?state=lost').status_code == 400

    def test_retry_failed(self, client, transport, passed_interview):
        queue = get_notification_queue()
        transport.fail_always = True
        job = queue.enqueue(passed_interview.id, 'accepted')
        for _ in range(3):
            queue.deliver(job.id)

        response = client.post('/admin/results/queue/retry-failed')

        assert response.status_code == 200
        data = response.get_json()
        assert data['retried'] == 1
        assert data['counts'] == {'queued': 1, 'sent': 0, 'failed': 0, 'total': 1}


class TestHealth:
    """Test suite for the health endpoint"""

    def test_health_reports_database(self, client, monkeypatch):
        from redis import Redis

        monkeypatch.setattr(Redis, 'ping', lambda self: True)

        response = client.get('/health')

        assert response.status_code == 200
        data = response.get_json()
        assert data['database'] == 'connected'
        assert data['redis'] == 'connected'
