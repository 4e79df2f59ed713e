"""
Service layer interfaces and implementations.

Services own the unit of work: each mutating operation commits once on
success and rolls back on any error.
"""

from .interfaces import IAuthService, IHealthService, INoteService, IPublicLinkService, ISharingService

from .access_service import AccessEvaluator, Principal
from .auth_service import AuthService
from .health_service import HealthService
from .note_service import NoteService
from .public_link_service import PublicLinkService
from .sharing_service import SharingService
from .tag_resolver import TagResolver

__all__ = [
    # Interfaces
    "IAuthService",
    "INoteService",
    "ISharingService",
    "IPublicLinkService",
    "IHealthService",
    # Implementations
    "AccessEvaluator",
    "Principal",
    "AuthService",
    "HealthService",
    "NoteService",
    "PublicLinkService",
    "SharingService",
    "TagResolver",
]
