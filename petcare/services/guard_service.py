# Existence checks run before writes that reference other records
from .. import db
from ..errors import NotFoundError
from ..utils.util import parse_id


def assert_exists(model, raw_id, message):
    """Return the parsed id of a live ``model`` record or raise NotFoundError."""
    entity_id = parse_id(raw_id)
    if entity_id is None:
        raise NotFoundError(message)
    found = db.session.query(model.query.filter_by(id=entity_id).exists()).scalar()
    if not found:
        raise NotFoundError(message)
    return entity_id
