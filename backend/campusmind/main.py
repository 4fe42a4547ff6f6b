"""
FastAPI Application Entry Point

CampusMind Academic Search API
"""
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from campusmind.api.academic import router as academic_router
from campusmind.core.config import settings
from campusmind.core.dependencies import get_academic_service
from campusmind.core.rate_limit import limiter, rate_limit_exceeded_handler, storage_uri
from campusmind.services.search import CATEGORY_SOURCES, AcademicService

VERSION = "1.0.0"

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Federated search over open academic and educational sources",
    version=VERSION,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

app.include_router(academic_router)

origins = [
    "http://localhost:3000",
    "http://localhost:4200",
    "*"
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)


@app.get("/")
async def health_check(service: AcademicService = Depends(get_academic_service)):
    """Root endpoint to verify the server is running."""
    return {
        "status": "active",
        "project": settings.PROJECT_NAME,
        "version": VERSION,
        "providers": service.source_names,
        "categories": {name: list(sources) for name, sources in CATEGORY_SOURCES.items()},
        "rate_limiting": {
            "enabled": limiter.enabled,
            "storage": "redis" if storage_uri.startswith("redis") else "memory"
        },
        "endpoints": {
            "search": "/api/academic/search",
            "search_multi": "/api/academic/search/multi",
            "search_all": "/api/academic/search/all",
            "recommendations": "/api/academic/recommendations",
            "library": "/api/academic/library/textbooks",
            "careers": "/api/academic/careers"
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
