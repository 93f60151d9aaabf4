"""
Results Blueprint
Result confirmation workflow and notification queue routes
"""
from flask import Blueprint

results_bp = Blueprint('results', __name__, url_prefix='/admin/results')

from recruitment.blueprints.results import routes
