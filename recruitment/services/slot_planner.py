"""
Slot Planner
Splits an interview day window into fixed-length, non-overlapping time slots
"""
from collections import namedtuple
from datetime import date, datetime, time, timedelta
from recruitment.errors import InvalidWindow


class TimeSlot(namedtuple('TimeSlot', ['start', 'end'])):
    """Half-open [start, end) interview slot"""
    __slots__ = ()

    @property
    def label(self):
        return f"{self.start:%H:%M}-{self.end:%H:%M}"

    def to_dict(self):
        return {
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'label': self.label,
        }


class SlotPlan:
    """
    Ordered slots for one window.

    Iterating always starts again from the first slot, so a plan can be
    listed, counted and allocated from without being rebuilt.
    """

    def __init__(self, day, start_time, end_time, interval_minutes):
        self.day = day
        self.start = datetime.combine(day, start_time)
        self.end = datetime.combine(day, end_time)
        self.interval = timedelta(minutes=interval_minutes)

    def __iter__(self):
        cursor = self.start
        while cursor + self.interval <= self.end:
            yield TimeSlot(cursor, cursor + self.interval)
            cursor += self.interval

    def __len__(self):
        return (self.end - self.start) // self.interval

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(len(self)))]
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError('slot indices must be integers or slices')
        if index < 0:
            index += len(self)
        if not 0 <= index < len(self):
            raise IndexError('slot index out of range')
        start = self.start + self.interval * index
        return TimeSlot(start, start + self.interval)

    def __repr__(self):
        return f'<SlotPlan {self.day} {self.start:%H:%M}-{self.end:%H:%M} every {self.interval} ({len(self)} slots)>'


def plan_slots(day, start_time, end_time, interval_minutes):
    """
    Plan interview slots for a window on a single day.

    Slots are emitted from start_time every interval_minutes; a slot that
    would run past end_time is dropped rather than shortened.

    Args:
        day: datetime.date of the interviews
        start_time: datetime.time the window opens
        end_time: datetime.time the window closes
        interval_minutes: Slot length in minutes

    Returns:
        SlotPlan

    Raises:
        InvalidWindow: if start_time >= end_time or interval_minutes <= 0
    """
    if not isinstance(day, date) or isinstance(day, datetime):
        raise InvalidWindow('Interview date must be a calendar date')
    if not isinstance(start_time, time) or not isinstance(end_time, time):
        raise InvalidWindow('Start and end must be times of day')
    if start_time >= end_time:
        raise InvalidWindow(f'Start time {start_time:%H:%M} must be before end time {end_time:%H:%M}')
    if isinstance(interval_minutes, bool) or not isinstance(interval_minutes, int) or interval_minutes <= 0:
        raise InvalidWindow('Interval must be a positive whole number of minutes')

    return SlotPlan(day, start_time, end_time, interval_minutes)
