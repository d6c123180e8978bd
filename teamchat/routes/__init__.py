"""
Team Chat API - Routes Module
All API endpoints organized by resource
"""

from fastapi import APIRouter

# Import all routers
from teamchat.routes.workspaces import router as workspaces_router
from teamchat.routes.members import router as members_router
from teamchat.routes.channels import router as channels_router

# Main router
api_router = APIRouter()

# Include all routers
api_router.include_router(workspaces_router)
api_router.include_router(members_router)
api_router.include_router(channels_router)

__all__ = ["api_router"]
