# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from ..Models import RoomMember

class RoomPresence:
    """
    Oda üyelik kaynağı: transport'tan gelen userlist/join/leave olaylarıyla beslenir.
    Sistem/bot kimlikleri üye kaydına işaretlenerek gelir; isim kalıbı eşleştirilmez.
    """

    def __init__(self, system_users: list[str] | None = None):
        self.rooms: dict[str, dict[str, RoomMember]] = {}
        self._system_users = {kullanici.lower() for kullanici in (system_users or [])}

    def _classify(self, username: str, is_system: bool) -> RoomMember:
        # Ayarlarda tanımlı bot/sunucu kimlikleri kaynakta işaretlenir
        return RoomMember(username=username, is_system=is_system or username.lower() in self._system_users)

    def set_userlist(self, room_id: str, members: list[RoomMember]) -> None:
        """Tam userlist snapshot'ı - öncekinin yerini alır"""
        self.rooms[room_id] = {
            member.username: self._classify(member.username, member.is_system)
            for member in members
        }

    def add_member(self, room_id: str, username: str, is_system: bool = False) -> None:
        self.rooms.setdefault(room_id, {})[username] = self._classify(username, is_system)

    def remove_member(self, room_id: str, username: str) -> bool:
        members = self.rooms.get(room_id)
        if not members or username not in members:
            return False

        del members[username]
        return True

    def is_system_user(self, room_id: str, username: str) -> bool:
        member = self.rooms.get(room_id, {}).get(username)
        if member:
            return member.is_system
        return username.lower() in self._system_users

    def snapshot(self, room_id: str) -> set[str] | None:
        """Sistem dışı üyeler. Oda için hiç userlist gelmediyse None"""
        members = self.rooms.get(room_id)
        if members is None:
            return None

        return {username for username, member in members.items() if not member.is_system}
