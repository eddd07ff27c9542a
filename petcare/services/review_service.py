# Review lookups
from .. import db
from ..models import Review
from ..utils.util import parse_id


def find_reviewed_appointments(author_id, appointment_ids):
    """Return the ids (as strings) among ``appointment_ids`` already reviewed by the author."""
    author_id = parse_id(author_id)
    ids = [i for i in (parse_id(a) for a in appointment_ids) if i is not None]
    if author_id is None or not ids:
        return []
    rows = db.session.query(Review.appointment_id).filter(
        Review.author_id == author_id,
        Review.appointment_id.in_(ids)
    ).distinct().all()
    return [str(row.appointment_id) for row in rows]
