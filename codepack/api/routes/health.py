from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Liveness check. Returns 503 until the template set has been loaded."""
    templates = getattr(request.app.state, "templates", None)
    if templates is None:
        return JSONResponse(
            status_code=503,
            content={"status": "starting", "service": "codepack"},
        )
    return {
        "status": "healthy",
        "service": "codepack",
        "templates": len(templates.list_template_ids()),
    }
