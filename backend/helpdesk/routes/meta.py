from __future__ import annotations
from flask import Blueprint
from helpdesk.constants.enums import all_enumerations

meta_bp = Blueprint('meta', __name__)


@meta_bp.get('/enums')
def enums():
    return all_enumerations()
