"""API v1 router aggregation"""
from fastapi import APIRouter
from app.api.v1.endpoints import auth_endpoints, vehicle_endpoints, sale_endpoints
from app.api.v1.endpoints import customer_endpoints
from app.api.v1.endpoints import status_endpoints

api_router = APIRouter()

api_router.include_router(auth_endpoints.router,     prefix="/auth",      tags=["Authentication"])
api_router.include_router(vehicle_endpoints.router,  prefix="/vehicles",  tags=["Vehicles"])
api_router.include_router(sale_endpoints.router,     prefix="/sales",     tags=["Sales"])
api_router.include_router(customer_endpoints.router, prefix="/customers", tags=["Customers"])
api_router.include_router(status_endpoints.router,   prefix="/status",    tags=["Status"])
