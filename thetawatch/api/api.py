from fastapi import APIRouter
from thetawatch.api.endpoints import conjunctions

api_router = APIRouter()

api_router.include_router(conjunctions.router, prefix="/conjunctions", tags=["conjunctions"])
