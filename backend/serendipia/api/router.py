"""
Main API router.
"""

from fastapi import APIRouter
from serendipia.api import transactions, exchange_rate, dashboard, reports, analysis

api_router = APIRouter()

api_router.include_router(transactions.router)
api_router.include_router(exchange_rate.router)
api_router.include_router(dashboard.router)
api_router.include_router(reports.router)
api_router.include_router(analysis.router)
