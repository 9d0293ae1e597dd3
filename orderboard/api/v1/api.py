"""API v1 router composition."""

from fastapi import APIRouter

from orderboard.api.v1.endpoints import dashboard, orders

api_router: APIRouter = APIRouter()
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
