# Pet lookups used by the appointment services
from ..models import Pet
from ..utils.util import parse_id


def find_all_by_tutor(tutor_id):
    tutor_id = parse_id(tutor_id)
    if tutor_id is None:
        return []
    return Pet.query.filter_by(tutor_id=tutor_id).order_by(Pet.id).all()
