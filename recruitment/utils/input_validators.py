"""
Input validation utilities for admin JSON requests
"""
from datetime import datetime
from dateutil import parser as date_parser
from flask import request
from recruitment.errors import InvalidRequest, InvalidWindow


TIME_FORMATS = ('%H:%M', '%H:%M:%S')


def get_json_body():
    """
    Get the request JSON object
    Raises InvalidRequest when the body is missing or not an object
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidRequest('Request body must be a JSON object')
    return data


def parse_date(value, field='date'):
    """Parse an ISO date string ('2025-03-14') into a datetime.date"""
    if not value or not isinstance(value, str):
        raise InvalidWindow(f'{field} is required')
    try:
        return date_parser.isoparse(value).date()
    except ValueError:
        raise InvalidWindow(f"{field} '{value}' is not a valid date")


def parse_time(value, field):
    """Parse a time of day ('09:00', '9:30', '14:00:00') into a datetime.time"""
    if not value or not isinstance(value, str):
        raise InvalidWindow(f'{field} is required')
    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt).time()
        except ValueError:
            continue
    raise InvalidWindow(f"{field} '{value}' is not a valid time (expected HH:MM)")


def parse_interval(value):
    """Slot length in minutes; must be a positive whole number"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidWindow('interval_minutes must be a whole number of minutes')
    return value


def parse_window(data):
    """
    Read the slot window fields from a request body

    Returns: (day, start_time, end_time, interval_minutes)
    """
    return (
        parse_date(data.get('date')),
        parse_time(data.get('start_time'), 'start_time'),
        parse_time(data.get('end_time'), 'end_time'),
        parse_interval(data.get('interval_minutes')),
    )


def parse_id_list(value, field):
    """Validate a non-empty list of integer IDs, keeping its order"""
    if not isinstance(value, list):
        raise InvalidRequest(f'{field} must be a list of IDs')
    if any(isinstance(v, bool) or not isinstance(v, int) for v in value):
        raise InvalidRequest(f'{field} must contain only integer IDs')
    return value


def parse_bool_arg(value):
    """Parse a query string flag ('true'/'false'); None when absent"""
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered in ('true', '1', 'yes'):
        return True
    if lowered in ('false', '0', 'no'):
        return False
    raise InvalidRequest(f"Expected true or false, got '{value}'")
