from fastapi import APIRouter

# Import all the individual routers
from . import analysis, core, extraction, multiphysics, pipeline

api_router = APIRouter()
api_router.include_router(core.router, prefix="/core", tags=["core"])
api_router.include_router(analysis.router, prefix="/analysis", tags=["analysis"])
api_router.include_router(multiphysics.router, prefix="/multiphysics", tags=["multiphysics"])
api_router.include_router(pipeline.router, prefix="/pipeline", tags=["pipeline"])
api_router.include_router(extraction.router, prefix="/extraction", tags=["extraction"])
