# Tutor lookups
from .. import db
from ..models import Tutor
from ..utils.util import parse_id


def find_by_id(tutor_id):
    tutor_id = parse_id(tutor_id)
    if tutor_id is None:
        return None
    return db.session.get(Tutor, tutor_id)
