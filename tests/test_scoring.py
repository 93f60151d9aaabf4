"""
Tests for interview scoring and the interview lifecycle
"""
import pytest
from recruitment import db
from recruitment.errors import IncompleteEvaluation, NotFound, ResultAlreadyRecorded
from recruitment.models.audit_log import AuditLog
from recruitment.models.interview import EvaluationScores, Interview
from recruitment.services.scoring_service import scoring_service


FULL_SCORES = {
    'technical': 8,
    'communication': 7,
    'teamwork': 9,
    'motivation': 8,
    'overall': 8,
}


class TestEvaluationScores:
    """Test suite for the evaluation value object"""

    def test_from_dict(self):
        scores = EvaluationScores.from_dict(FULL_SCORES)

        assert scores.technical == 8
        assert scores.to_dict() == FULL_SCORES

    def test_whole_number_floats_are_accepted(self):
        scores = EvaluationScores.from_dict({**FULL_SCORES, 'overall': 7.0})

        assert scores.overall == 7
        assert isinstance(scores.overall, int)

    def test_missing_fields_are_listed(self):
        with pytest.raises(IncompleteEvaluation) as exc_info:
            EvaluationScores.from_dict({'technical': 5, 'teamwork': 6})

        assert exc_info.value.details['missing_fields'] == ['communication', 'motivation', 'overall']

    @pytest.mark.parametrize('value', [0, 11, -1, 7.5, 'eight', True])
    def test_invalid_values(self, value):
        with pytest.raises(IncompleteEvaluation) as exc_info:
            EvaluationScores.from_dict({**FULL_SCORES, 'teamwork': value})

        assert exc_info.value.details['invalid_fields'] == ['teamwork']

    def test_scores_are_immutable(self):
        scores = EvaluationScores.from_dict(FULL_SCORES)

        with pytest.raises(AttributeError):
            scores.technical = 1


class TestScoringService:
    """Test suite for ScoringService.score"""

    def test_score_completes_interview(self, make_interview):
        interview = make_interview()

        scored = scoring_service.score(interview.id, FULL_SCORES, notes='Strong fundamentals', result='passed')

        assert scored.status == 'completed'
        assert scored.result == 'passed'
        assert scored.completed_at is not None
        assert scored.interviewer_notes == 'Strong fundamentals'
        assert scored.evaluation_scores.to_dict() == FULL_SCORES
        assert scored.notification_sent is False
        assert scored.application.status == 'interviewed'

    def test_score_failed_result(self, make_interview):
        interview = make_interview()

        scored = scoring_service.score(interview.id, FULL_SCORES, result='failed')

        assert scored.result == 'failed'
        assert scored.payload_kind == 'rejected'

    def test_records_audit_entry(self, make_interview):
        interview = make_interview()
        scoring_service.score(interview.id, FULL_SCORES, result='passed')

        entries = AuditLog.get_for_resource('interview', interview.id)
        assert [e.event_type for e in entries] == ['interview_scored']
        assert entries[0].get_details()['result'] == 'passed'

    @pytest.mark.parametrize('result', [None, 'pending', 'maybe'])
    def test_result_must_be_final(self, make_interview, result):
        interview = make_interview()

        with pytest.raises(IncompleteEvaluation):
            scoring_service.score(interview.id, FULL_SCORES, result=result)

    def test_incomplete_scores_leave_interview_untouched(self, make_interview):
        interview = make_interview()
        interview_id = interview.id

        with pytest.raises(IncompleteEvaluation):
            scoring_service.score(interview_id, {'technical': 9}, result='passed')

        db.session.expire_all()
        interview = db.session.get(Interview, interview_id)
        assert interview.status == 'scheduled'
        assert interview.result == 'pending'
        assert interview.technical is None

    def test_notes_must_be_text(self, make_interview):
        interview = make_interview()

        with pytest.raises(IncompleteEvaluation):
            scoring_service.score(interview.id, FULL_SCORES, notes=['not', 'text'], result='passed')

    def test_rescoring_is_rejected(self, passed_interview):
        with pytest.raises(ResultAlreadyRecorded):
            scoring_service.score(passed_interview.id, FULL_SCORES, result='failed')

        assert db.session.get(Interview, passed_interview.id).result == 'passed'

    def test_unknown_interview(self):
        with pytest.raises(NotFound):
            scoring_service.score(9999, FULL_SCORES, result='passed')


class TestInterviewLifecycle:
    """Test suite for notification flags on Interview"""

    def test_pending_interview_cannot_be_marked_notified(self, make_interview):
        interview = make_interview()

        with pytest.raises(ValueError):
            interview.mark_notified()

        assert interview.notification_sent is False

    def test_mark_notified_is_monotonic(self, passed_interview, db_session):
        passed_interview.mark_notified()
        first_notified_at = passed_interview.notified_at
        passed_interview.mark_notified()
        db_session.commit()

        assert passed_interview.notification_sent is True
        assert passed_interview.notified_at == first_notified_at

    def test_payload_kind_follows_result(self, make_interview):
        assert make_interview().payload_kind is None
        assert make_interview(result='passed').payload_kind == 'accepted'
        assert make_interview(result='failed').payload_kind == 'rejected'
