"""API v1 router aggregation"""
from fastapi import APIRouter
from docpage.api.v1.endpoints import auth_endpoints, admin_endpoints, publish_endpoints
from docpage.api.v1.endpoints import domain_endpoints
from docpage.api.v1.endpoints import content_endpoints

api_router = APIRouter()

api_router.include_router(auth_endpoints.router,    tags=["Authentication"])
api_router.include_router(admin_endpoints.router,   tags=["Admin"])
api_router.include_router(publish_endpoints.router, tags=["Publishing"])
api_router.include_router(domain_endpoints.router,  tags=["Domains"])
api_router.include_router(content_endpoints.router, tags=["Content"])
