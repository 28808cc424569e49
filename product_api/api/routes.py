from datetime import datetime, timezone

from fastapi import APIRouter, Request

from product_api.api.products import router as products_router

router = APIRouter(prefix="/api")
router.include_router(products_router)


@router.get("/health")
def health(request: Request):
    settings = request.app.state.settings
    return {
        "success": True,
        "message": "Product CRUD API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.app_version,
        "environment": settings.environment,
    }
