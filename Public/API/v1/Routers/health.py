# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from fastapi.responses import JSONResponse
from fastapi           import Request
from .                 import api_v1_router

@api_v1_router.get("/health")
async def health_check(request: Request):
    """API sağlık kontrolü"""
    ready = request.app.state.watch_payout.ready
    return JSONResponse(
        status_code = 200 if ready else 503,
        content     = {"success": ready, "status": "healthy" if ready else "starting"}
    )
