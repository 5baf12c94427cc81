# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .message_handlers import RoomEventHandler
