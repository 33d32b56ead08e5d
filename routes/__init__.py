"""
Flask blueprints for the audit engine API.
"""

from flask import Blueprint

# Create blueprints
forms_bp = Blueprint('forms', __name__)
audits_bp = Blueprint('audits', __name__)

# Import routes to register them
from . import forms
from . import audits
