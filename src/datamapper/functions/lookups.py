"""
Domain-specific categorical mappers.

Source systems describe roles, venue types and booking states in free text.
These transforms fold that text onto the canonical values the league
platform stores, with a safe fallback for anything unrecognized.
"""

from typing import Dict

ROLE_MAPPING: Dict[str, str] = {
    'administrator': 'admin',
    'admin': 'admin',
    'manager': 'admin',
    'coach': 'coach',
    'assistant coach': 'coach',
    'player': 'member',
    'member': 'member',
    'parent': 'member',
    'viewer': 'viewer',
    'guest': 'viewer',
}
DEFAULT_ROLE = 'member'

FIELD_TYPE_MAPPING: Dict[str, str] = {
    'soccer field': 'soccer',
    'soccer': 'soccer',
    'football field': 'football',
    'football': 'football',
    'basketball court': 'basketball',
    'basketball': 'basketball',
    'tennis court': 'tennis',
    'tennis': 'tennis',
    'baseball field': 'baseball',
    'baseball diamond': 'baseball',
    'baseball': 'baseball',
    'multi-purpose': 'multipurpose',
    'multipurpose': 'multipurpose',
    'general': 'multipurpose',
}
DEFAULT_FIELD_TYPE = 'multipurpose'

RESERVATION_STATUS_MAPPING: Dict[str, str] = {
    'pending': 'pending',
    'requested': 'pending',
    'tentative': 'pending',
    'confirmed': 'confirmed',
    'approved': 'confirmed',
    'booked': 'confirmed',
    'cancelled': 'cancelled',
    'canceled': 'cancelled',
    'declined': 'cancelled',
    'completed': 'completed',
    'done': 'completed',
}
DEFAULT_RESERVATION_STATUS = 'pending'


def _normalize_key(value) -> str:
    return str(value).strip().lower()


def map_role(value, row=None, context=None) -> str:
    """Free-text role to admin/coach/member/viewer; unknown roles become member."""
    return ROLE_MAPPING.get(_normalize_key(value), DEFAULT_ROLE)


def map_field_type(value, row=None, context=None) -> str:
    """Free-text venue description to a canonical field type."""
    return FIELD_TYPE_MAPPING.get(_normalize_key(value), DEFAULT_FIELD_TYPE)


def map_reservation_status(value, row=None, context=None) -> str:
    return RESERVATION_STATUS_MAPPING.get(_normalize_key(value), DEFAULT_RESERVATION_STATUS)
