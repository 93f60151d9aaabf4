"""
Scoring Service
Records interview evaluations and moves interviews to completed
"""
from recruitment import db
from recruitment.errors import IncompleteEvaluation, NotFound, ResultAlreadyRecorded
from recruitment.models.audit_log import AuditLog
from recruitment.models.interview import EvaluationScores, FINAL_RESULTS, Interview


class ScoringService:
    """Service for interview scoring"""

    def score(self, interview_id, scores, notes=None, result=None):
        """
        Score an interview and set its final result

        Nothing is written unless the whole evaluation is valid.

        Args:
            interview_id: Interview ID
            scores: Dict with technical, communication, teamwork, motivation, overall (1-10)
            notes: Optional interviewer notes
            result: 'passed' or 'failed'

        Returns:
            The completed Interview
        """
        interview = db.session.get(Interview, interview_id)
        if not interview:
            raise NotFound(f'Interview {interview_id} not found')

        if interview.is_completed or interview.has_final_result:
            raise ResultAlreadyRecorded(f'Interview {interview_id} has already been scored')

        if result not in FINAL_RESULTS:
            raise IncompleteEvaluation("Result must be 'passed' or 'failed'")

        evaluation = EvaluationScores.from_dict(scores)

        if notes is not None and not isinstance(notes, str):
            raise IncompleteEvaluation('Interviewer notes must be text')

        interview.record_evaluation(evaluation, notes, result)
        interview.application.update_status('interviewed')

        AuditLog.record(
            'interview_scored',
            resource_type='interview',
            resource_id=interview.id,
            details={'result': result, 'scores': evaluation.to_dict()}
        )
        db.session.commit()

        print(f"[SCORING] Interview {interview.id} completed with result {result}")
        return interview


# Singleton instance
scoring_service = ScoringService()
