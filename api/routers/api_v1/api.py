from fastapi import APIRouter

from api.routers.api_v1.endpoints import admin, mint


api_router = APIRouter()

api_router.include_router(mint.router, prefix="/mint", tags=["Mint"])

# Sale administration (admin API key + owner wallet)
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
