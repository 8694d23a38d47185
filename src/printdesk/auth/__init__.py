"""Identity verification for API callers."""

from .auth_models import STAFF_ROLES, SUBMITTER_ROLES, Actor, Role

__all__ = ["Actor", "Role", "STAFF_ROLES", "SUBMITTER_ROLES"]
