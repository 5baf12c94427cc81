# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI     import konsol
from fastapi import WebSocket, WebSocketDisconnect
from .       import wss_router
from ..Libs  import RoomEventHandler
import json

MAX_PAYLOAD = 512 * 1024  # 512 KB

@wss_router.websocket("/rooms/{room_id}")
async def room_events_websocket(websocket: WebSocket, room_id: str):
    await websocket.accept()
    handler = RoomEventHandler(
        websocket,
        room_id,
        websocket.app.state.watch_payout,
        websocket.app.state.room_presence
    )

    handlers = {
        "userlist"     : handler.handle_userlist,
        "join"         : handler.handle_join,
        "leave"        : handler.handle_leave,
        "media_change" : handler.handle_media_change,
        "ping"         : handler.handle_ping,
    }

    try:
        while True:
            raw = await websocket.receive_text()

            if len(raw.encode("utf-8")) > MAX_PAYLOAD:
                await handler.send_error("Mesaj boyutu çok büyük")
                continue

            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                await handler.send_error("Geçersiz JSON formatı")
                continue

            if not isinstance(msg, dict):
                await handler.send_error("Geçersiz mesaj")
                continue

            fn = handlers.get(msg.get("type"))
            if not fn:
                await handler.send_error(f"Bilinmeyen olay: {msg.get('type')}")
                continue

            try:
                await fn(msg)
            except Exception as hata:
                konsol.log(f"[red][{room_id}] Olay işlenemedi ({msg.get('type')}):[/] {type(hata).__name__}: {hata}")
                await handler.send_error("Olay işlenemedi")

    except WebSocketDisconnect:
        pass
    except Exception as e:
        konsol.log(f"[red]WebSocket Error:[/] {e}")
