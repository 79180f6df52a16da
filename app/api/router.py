"""Main API router"""

from fastapi import APIRouter

from .routes import (
    auth,
    users,
    inspection_branches,
    inspections,
    dashboard,
    credit_packages,
    billing,
    reports,
    blockchain,
    public_api,
)

# Main API router
api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/admin/users", tags=["users"])
api_router.include_router(inspection_branches.router, prefix="/inspection-branches", tags=["inspection-branches"])
api_router.include_router(inspections.router, prefix="/inspections", tags=["inspections"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(credit_packages.router, prefix="/admin/credit-packages", tags=["credit-packages"])
api_router.include_router(billing.router, prefix="/billing", tags=["billing"])
api_router.include_router(billing.me_router, prefix="/me", tags=["credits"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
api_router.include_router(blockchain.router, prefix="/blockchain", tags=["blockchain"])
api_router.include_router(public_api.router, prefix="/public", tags=["public"])
