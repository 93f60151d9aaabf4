"""
Allocation Service
Binds selected applications to planned slots and creates their interviews
"""
from typing import List, Sequence, Tuple
from sqlalchemy.exc import IntegrityError
from recruitment import db
from recruitment.errors import (
    AllocationConflict,
    CapacityExceeded,
    DuplicateAssignment,
    InvalidRequest,
    NotFound,
    RoomDoubleBooked,
    RoomUnavailable,
)
from recruitment.models.application import Application
from recruitment.models.audit_log import AuditLog
from recruitment.models.interview import Interview
from recruitment.models.room import Room
from recruitment.services.slot_planner import TimeSlot


def pair_candidates(candidate_ids: Sequence, slots: Sequence[TimeSlot]) -> List[Tuple[object, TimeSlot]]:
    """
    Pair the i-th candidate with the i-th slot.

    Selection order is the only tie-break; nothing about the candidate
    affects which slot they get.

    Raises:
        CapacityExceeded: if there are more candidates than slots
    """
    slots = list(slots)
    if len(candidate_ids) > len(slots):
        raise CapacityExceeded(max_assignable=len(slots), requested=len(candidate_ids))
    return list(zip(candidate_ids, slots))


class AllocationService:
    """Service for batch interview allocation"""

    def allocate(self, application_ids: Sequence[int], room_id: int, slots: Sequence[TimeSlot]) -> List[Interview]:
        """
        Create one scheduled interview per application, in selection order

        Every check runs before the first row is written and the batch is
        committed as a single transaction, so a rejected batch leaves no
        interviews behind.

        Args:
            application_ids: Application IDs in selection order
            room_id: Room all interviews take place in
            slots: Chronological slots from the slot planner

        Returns:
            List of created Interview objects, in selection order
        """
        application_ids = list(application_ids)
        if any(isinstance(a, bool) or not isinstance(a, int) for a in application_ids):
            raise InvalidRequest('Application IDs must be integers')

        pairs = pair_candidates(application_ids, slots)
        if not pairs:
            return []

        repeated = sorted({a for a in application_ids if application_ids.count(a) > 1})
        if repeated:
            raise DuplicateAssignment(repeated)

        room = db.session.get(Room, room_id)
        if not room:
            raise RoomUnavailable(f'Room {room_id} not found')
        if not room.is_active:
            raise RoomUnavailable(f'Room {room.name} is not active')

        applications = {
            a.id: a for a in Application.query.filter(Application.id.in_(application_ids)).all()
        }
        missing = [a for a in application_ids if a not in applications]
        if missing:
            raise NotFound(f"Applications not found: {', '.join(str(a) for a in missing)}",
                           application_ids=missing)

        already_scheduled = [
            row.application_id for row in
            Interview.query.filter(Interview.application_id.in_(application_ids)).all()
        ]
        if already_scheduled:
            raise DuplicateAssignment(sorted(already_scheduled))

        requested_times = [slot.start for _, slot in pairs]
        booked = Interview.query.filter(
            Interview.room_id == room.id,
            Interview.scheduled_at.in_(requested_times)
        ).all()
        if booked:
            raise RoomDoubleBooked(sorted(i.scheduled_at for i in booked))

        interviews = []
        try:
            for application_id, slot in pairs:
                application = applications[application_id]
                interview = Interview(
                    application=application,
                    room=room,
                    scheduled_at=slot.start,
                    status='scheduled',
                    result='pending',
                    notification_sent=False
                )
                db.session.add(interview)
                application.update_status('interview_scheduled')
                interviews.append(interview)

            db.session.flush()

            AuditLog.record(
                'interviews_allocated',
                resource_type='room',
                resource_id=room.id,
                details={
                    'interview_ids': [i.id for i in interviews],
                    'application_ids': application_ids,
                    'first_slot': requested_times[0].isoformat(),
                    'last_slot': requested_times[-1].isoformat(),
                }
            )
            db.session.commit()

        except IntegrityError as e:
            # Another batch claimed an application or room slot first
            db.session.rollback()
            print(f"[ALLOCATION] Integrity conflict allocating room {room_id}: {e.orig}")
            raise AllocationConflict('Allocation conflicts with interviews created concurrently') from e

        print(f"[ALLOCATION] Scheduled {len(interviews)} interviews in room {room.name} "
              f"from {requested_times[0]:%Y-%m-%d %H:%M}")
        return interviews


# Singleton instance
allocation_service = AllocationService()
