# Provider lookups and provider record intake
import logging
from .. import db
from ..models import Provider
from ..utils.util import parse_id

logger = logging.getLogger(__name__)

# Older provider payloads carried the linked account under any of these keys
LEGACY_USER_KEYS = ('user_id', 'userId', 'user', 'usuario')


def normalize_provider_user(payload):
    """Fold the legacy linked-user keys of a provider payload into one user id."""
    for key in LEGACY_USER_KEYS:
        value = payload.get(key)
        if isinstance(value, dict):
            value = value.get('id') or value.get('_id')
        user_id = parse_id(value)
        if user_id is not None:
            return user_id
    return None


def create_provider(data):
    provider = Provider(
        name=data['name'],
        email=data.get('email'),
        city=data.get('city'),
        state=data.get('state'),
        whatsapp=data.get('whatsapp'),
        user_id=normalize_provider_user(data)
    )
    try:
        db.session.add(provider)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    if provider.user_id is None:
        logger.warning(f"Provider {provider.id} created without a linked user account")
    return provider


def find_one(provider_id):
    provider_id = parse_id(provider_id)
    if provider_id is None:
        return None
    return db.session.get(Provider, provider_id)


def find_one_by_user_id(user_id):
    user_id = parse_id(user_id)
    if user_id is None:
        return None
    return Provider.query.filter_by(user_id=user_id).first()
