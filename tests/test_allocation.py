"""
Tests for batch interview allocation
"""
import pytest
from datetime import date, datetime, time
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
from recruitment.services.allocation_service import allocation_service, pair_candidates
from recruitment.services.slot_planner import plan_slots


DAY = date(2025, 3, 14)


def morning_slots(count):
    """Plan exactly `count` half-hour slots starting 09:00"""
    end_minutes = 9 * 60 + 30 * count
    return plan_slots(DAY, time(9, 0), time(end_minutes // 60, end_minutes % 60), 30)


class TestPairCandidates:
    """Test suite for the positional pairing"""

    def test_pairs_in_selection_order(self):
        slots = morning_slots(3)
        pairs = pair_candidates([30, 10, 20], slots)

        assert [candidate for candidate, _ in pairs] == [30, 10, 20]
        assert [slot for _, slot in pairs] == list(slots)

    def test_fewer_candidates_than_slots(self):
        pairs = pair_candidates([1], morning_slots(4))

        assert len(pairs) == 1
        assert pairs[0][1].label == '09:00-09:30'

    def test_more_candidates_than_slots(self):
        with pytest.raises(CapacityExceeded) as exc_info:
            pair_candidates([1, 2, 3], morning_slots(2))

        assert exc_info.value.max_assignable == 2
        assert exc_info.value.to_dict()['requested'] == 3


class TestAllocate:
    """Test suite for AllocationService.allocate"""

    def test_creates_scheduled_interviews(self, room, make_applications, db_session):
        applications = make_applications(3)
        ids = [a.id for a in reversed(applications)]

        interviews = allocation_service.allocate(ids, room.id, morning_slots(4))

        assert [i.application_id for i in interviews] == ids
        assert [i.scheduled_at for i in interviews] == [
            datetime(2025, 3, 14, 9, 0),
            datetime(2025, 3, 14, 9, 30),
            datetime(2025, 3, 14, 10, 0),
        ]
        for interview in interviews:
            assert interview.status == 'scheduled'
            assert interview.result == 'pending'
            assert interview.notification_sent is False
            assert interview.room_id == room.id
            assert interview.application.status == 'interview_scheduled'

    def test_records_audit_entry(self, room, make_applications):
        applications = make_applications(2)

        allocation_service.allocate([a.id for a in applications], room.id, morning_slots(2))

        entries = AuditLog.get_for_resource('room', room.id)
        assert len(entries) == 1
        assert entries[0].event_type == 'interviews_allocated'
        assert entries[0].get_details()['application_ids'] == [a.id for a in applications]

    def test_capacity_exceeded_creates_nothing(self, room, make_applications):
        applications = make_applications(3)

        with pytest.raises(CapacityExceeded):
            allocation_service.allocate([a.id for a in applications], room.id, morning_slots(2))

        assert Interview.query.count() == 0
        assert all(a.status == 'approved' for a in Application.query.all())

    def test_empty_selection_creates_nothing(self, room):
        assert allocation_service.allocate([], room.id, morning_slots(2)) == []
        assert Interview.query.count() == 0

    def test_already_scheduled_application_is_rejected(self, room, make_applications):
        first, second = make_applications(2)
        allocation_service.allocate([first.id], room.id, morning_slots(1))

        afternoon = plan_slots(DAY, time(14, 0), time(15, 0), 30)
        with pytest.raises(DuplicateAssignment) as exc_info:
            allocation_service.allocate([second.id, first.id], room.id, afternoon)

        assert exc_info.value.application_ids == [first.id]
        assert Interview.query.count() == 1

    def test_repeated_id_in_batch_is_rejected(self, room, make_applications):
        application = make_applications(1)[0]

        with pytest.raises(DuplicateAssignment):
            allocation_service.allocate([application.id, application.id], room.id, morning_slots(2))

        assert Interview.query.count() == 0

    def test_room_time_already_booked(self, room, make_applications):
        first, second = make_applications(2)
        allocation_service.allocate([first.id], room.id, morning_slots(1))

        with pytest.raises(RoomDoubleBooked) as exc_info:
            allocation_service.allocate([second.id], room.id, morning_slots(1))

        assert isinstance(exc_info.value, AllocationConflict)
        assert exc_info.value.details['scheduled_at'] == ['2025-03-14T09:00:00']
        assert Interview.query.count() == 1

    def test_same_time_in_another_room_is_allowed(self, room, make_applications, db_session):
        other_room = Room(name='Lab 2', capacity=1, is_active=True)
        db_session.add(other_room)
        db_session.commit()
        first, second = make_applications(2)

        allocation_service.allocate([first.id], room.id, morning_slots(1))
        interviews = allocation_service.allocate([second.id], other_room.id, morning_slots(1))

        assert interviews[0].scheduled_at == datetime(2025, 3, 14, 9, 0)

    def test_inactive_room(self, room, make_applications, db_session):
        room.is_active = False
        db_session.commit()
        application = make_applications(1)[0]

        with pytest.raises(RoomUnavailable):
            allocation_service.allocate([application.id], room.id, morning_slots(1))

    def test_unknown_room(self, make_applications):
        application = make_applications(1)[0]

        with pytest.raises(RoomUnavailable):
            allocation_service.allocate([application.id], 9999, morning_slots(1))

    def test_unknown_application(self, room, make_applications):
        application = make_applications(1)[0]

        with pytest.raises(NotFound) as exc_info:
            allocation_service.allocate([application.id, 9999], room.id, morning_slots(2))

        assert exc_info.value.details['application_ids'] == [9999]
        assert Interview.query.count() == 0

    def test_non_integer_ids(self, room):
        with pytest.raises(InvalidRequest):
            allocation_service.allocate(['1'], room.id, morning_slots(1))

    def test_room_cannot_be_reassigned(self, room, make_applications, db_session):
        other_room = Room(name='Lab 2', capacity=1, is_active=True)
        db_session.add(other_room)
        db_session.commit()
        application = make_applications(1)[0]
        interview = allocation_service.allocate([application.id], room.id, morning_slots(1))[0]

        with pytest.raises(ValueError):
            interview.room_id = other_room.id
