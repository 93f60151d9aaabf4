"""
Interviews Blueprint
Slot planning, allocation and scoring routes
"""
from flask import Blueprint

interviews_bp = Blueprint('interviews', __name__, url_prefix='/admin/interviews')

from recruitment.blueprints.interviews import routes
