from docshare.domains.identity.entities import Identity
from docshare.domains.identity.services import IdentityService

__all__ = ["Identity", "IdentityService"]
