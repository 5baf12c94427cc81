# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from fastapi                   import WebSocket
from Public.WatchPayout.Models import MediaInfo, RoomMember
from Public.WatchPayout.Libs   import WatchPayoutManager, RoomPresence
import json

class RoomEventHandler:
    """Sohbet transport'undan gelen oda olaylarını motora ileten işleyici"""

    def __init__(self, websocket: WebSocket, room_id: str, manager: WatchPayoutManager, presence: RoomPresence):
        self.websocket = websocket
        self.room_id   = room_id
        self.manager   = manager
        self.presence  = presence

    async def send_error(self, message: str):
        """Hata mesajı gönder"""
        await self.websocket.send_text(json.dumps({
            "type"    : "error",
            "message" : message
        }, ensure_ascii=False))

    async def send_json(self, data: dict):
        """JSON mesajı gönder"""
        await self.websocket.send_text(json.dumps(data, ensure_ascii=False))

    # ============== Handlers ==============

    async def handle_userlist(self, message: dict):
        """USERLIST: tam üye listesi"""
        users = message.get("users")
        if not isinstance(users, list):
            await self.send_error("users listesi gerekli")
            return

        members = []
        for user in users:
            if isinstance(user, str):
                members.append(RoomMember(username=user))
            elif isinstance(user, dict) and user.get("name"):
                members.append(RoomMember(username=str(user["name"]), is_system=bool(user.get("system", False))))

        self.presence.set_userlist(self.room_id, members)
        result = await self.manager.on_membership_snapshot(self.room_id)

        await self.send_json({
            "type"    : "reconciled",
            "added"   : result.added if result else 0,
            "removed" : result.removed if result else 0,
        })

    async def handle_join(self, message: dict):
        """JOIN: tek kullanıcı katıldı"""
        username = str(message.get("username", "")).strip()
        if not username:
            await self.send_error("username gerekli")
            return

        self.presence.add_member(self.room_id, username, bool(message.get("system", False)))
        await self.manager.on_user_join(self.room_id, username)

    async def handle_leave(self, message: dict):
        """LEAVE: tek kullanıcı ayrıldı"""
        username = str(message.get("username", "")).strip()
        if not username:
            await self.send_error("username gerekli")
            return

        self.presence.remove_member(self.room_id, username)
        await self.manager.on_user_leave(self.room_id, username)

    async def handle_media_change(self, message: dict):
        """MEDIA_CHANGE: odada oynatılan medya değişti"""
        media = MediaInfo(
            media_id = str(message.get("id") or "unknown"),
            title    = str(message.get("title") or "Untitled")
        )

        summary = await self.manager.on_media_change(self.room_id, media)
        if summary:
            await self.send_json({
                "type"           : "session_closed",
                "session_id"     : summary.session_id,
                "rewarded_count" : summary.rewarded_count,
                "total_payout"   : summary.total_payout,
            })

    async def handle_ping(self, message: dict):
        """PING mesajını işle"""
        pong_response = {"type": "pong"}
        if message.get("_ping_id") is not None:
            pong_response["_ping_id"] = message["_ping_id"]

        await self.send_json(pong_response)
