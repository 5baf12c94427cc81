# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from fastapi  import Request, HTTPException
from pydantic import BaseModel
from .        import api_v1_router

class WatchStats(BaseModel):
    username       : str
    videos_watched : int
    total_earned   : int
    lucky_rewards  : int

@api_v1_router.get("/watch/stats/{username}", response_model=WatchStats)
async def watch_stats(request: Request, username: str):
    """Kullanıcının izleme ödülü istatistikleri"""
    stats = await request.app.state.watch_payout.get_user_stats(username)
    return WatchStats(username=username, **stats)

@api_v1_router.get("/watch/rooms/{room_id}")
async def watch_room_status(request: Request, room_id: str):
    """Odanın açık oturumu ve izleyici sayısı"""
    status = request.app.state.watch_payout.get_room_status(room_id)
    if status is None:
        raise HTTPException(status_code=404, detail="Oda bulunamadı")

    return status
