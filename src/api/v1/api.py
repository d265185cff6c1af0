# api/v1/api.py

from fastapi import APIRouter
from api.v1.endpoints import auth, recipe

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(recipe.router, prefix="/recipes", tags=["recipes"])
