# sponsorship/routes/__init__.py
"""
API route handlers organized by domain.
"""

from sponsorship.routes.auth import router as auth_router
from sponsorship.routes.campaigns import router as campaigns_router
from sponsorship.routes.creators import router as creators_router
from sponsorship.routes.credits import router as credits_router
from sponsorship.routes.deliverables import router as deliverables_router
from sponsorship.routes.health import router as health_router
from sponsorship.routes.offerings import router as offerings_router
from sponsorship.routes.proofs import router as proofs_router
from sponsorship.routes.sponsors import router as sponsors_router

__all__ = [
    "auth_router",
    "campaigns_router",
    "creators_router",
    "credits_router",
    "deliverables_router",
    "health_router",
    "offerings_router",
    "proofs_router",
    "sponsors_router",
]
