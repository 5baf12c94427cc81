# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI        import konsol
from fastapi    import FastAPI
from contextlib import asynccontextmanager
from Libs       import Database, global_request
from Settings   import (
    DATABASE_URL, SQL_ECHO, ECONOMY_API_URL, ECONOMY_API_TOKEN,
    LUCKY_CHANCE, NORMAL_REWARD, LUCKY_REWARD, STALE_AFTER,
    RECONCILE_ATTEMPTS, RECONCILE_BASE_DELAY, SYSTEM_USERS
)
from Public.WatchPayout.Libs import (
    SessionStore, RoomPresence, RewardPolicy, EconomyRewardSink, WatchPayoutManager
)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan events - startup ve shutdown"""

    database = Database(DATABASE_URL, echo=SQL_ECHO)
    await database.init_db()
    await global_request.start()

    presence = RoomPresence(system_users=SYSTEM_USERS)
    manager  = WatchPayoutManager(
        store                = SessionStore(database),
        membership           = presence,
        reward_sink          = EconomyRewardSink(ECONOMY_API_URL, ECONOMY_API_TOKEN),
        policy               = RewardPolicy(LUCKY_CHANCE, NORMAL_REWARD, LUCKY_REWARD),
        stale_after          = STALE_AFTER,
        reconcile_attempts   = RECONCILE_ATTEMPTS,
        reconcile_base_delay = RECONCILE_BASE_DELAY,
    )

    app.state.room_presence = presence
    app.state.watch_payout  = manager

    # ! Canlı olaylar kabul edilmeden önce yarım kalan oturumlar toparlanmalı
    await manager.bootstrap()

    yield

    await manager.shutdown()
    await global_request.stop()
    await database.close()
    konsol.log("[yellow]WatchPayout kapatıldı, açık oturumlar devam için korundu.[/]")
