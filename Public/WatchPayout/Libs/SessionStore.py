# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from sqlalchemy import select, update, func, distinct, case
from Libs       import Database
from ..Models   import VideoSession, VideoWatcher, MediaInfo

class SessionStore:
    """video_sessions / video_watchers tabloları için kalıcılık katmanı"""

    def __init__(self, database: Database):
        self.database = database

    # ==================== SESSIONS ====================

    async def create_session(self, room_id: str, media: MediaInfo, start_time: float) -> int:
        """Yeni oturum satırı ekle, id döndür"""
        async with self.database.oturum() as session:
            satir = VideoSession(
                room_id     = room_id,
                media_id    = media.media_id or "unknown",
                media_title = media.title or "Untitled",
                start_time  = start_time
            )
            session.add(satir)
            await session.commit()
            return satir.id

    async def close_session(self, session_id: int, end_time: float, duration: float) -> None:
        """Oturumu kapat - end_time bir kez yazılır, sonra değişmez"""
        async with self.database.oturum() as session:
            await session.execute(
                update(VideoSession)
                .where(VideoSession.id == session_id, VideoSession.end_time.is_(None))
                .values(end_time=end_time, duration=duration)
            )
            await session.commit()

    async def get_session(self, session_id: int) -> VideoSession | None:
        async with self.database.oturum() as session:
            return await session.get(VideoSession, session_id)

    async def open_sessions(self) -> list[VideoSession]:
        """Kapanmamış oturumlar (en yeni önce)"""
        async with self.database.oturum() as session:
            sonuc = await session.execute(
                select(VideoSession)
                .where(VideoSession.end_time.is_(None))
                .order_by(VideoSession.start_time.desc(), VideoSession.id.desc())
            )
            return list(sonuc.scalars().all())

    # ==================== WATCHERS ====================

    async def add_watcher(self, session_id: int, username: str, join_time: float) -> bool:
        """Aktif satır yoksa izleyici ekle. Eklendiyse True"""
        async with self.database.oturum() as session:
            mevcut = await session.execute(
                select(VideoWatcher.id).where(
                    VideoWatcher.session_id == session_id,
                    VideoWatcher.username   == username,
                    VideoWatcher.leave_time.is_(None)
                ).limit(1)
            )
            if mevcut.scalar_one_or_none() is not None:
                return False

            session.add(VideoWatcher(session_id=session_id, username=username, join_time=join_time))
            await session.commit()
            return True

    async def close_watcher(self, session_id: int, username: str, leave_time: float) -> int:
        """Kullanıcının aktif satırını kapat"""
        async with self.database.oturum() as session:
            sonuc = await session.execute(
                update(VideoWatcher)
                .where(
                    VideoWatcher.session_id == session_id,
                    VideoWatcher.username   == username,
                    VideoWatcher.leave_time.is_(None)
                )
                .values(leave_time=leave_time)
            )
            await session.commit()
            return sonuc.rowcount

    async def close_all_watchers(self, session_id: int, leave_time: float) -> int:
        """Oturumdaki tüm aktif satırları kapat"""
        async with self.database.oturum() as session:
            sonuc = await session.execute(
                update(VideoWatcher)
                .where(VideoWatcher.session_id == session_id, VideoWatcher.leave_time.is_(None))
                .values(leave_time=leave_time)
            )
            await session.commit()
            return sonuc.rowcount

    async def mark_rewarded(self, session_id: int, username: str, amount: int) -> int:
        """Sadece aktif (leave_time'sız) satırı ödüllendirilmiş işaretle"""
        async with self.database.oturum() as session:
            sonuc = await session.execute(
                update(VideoWatcher)
                .where(
                    VideoWatcher.session_id == session_id,
                    VideoWatcher.username   == username,
                    VideoWatcher.leave_time.is_(None),
                    VideoWatcher.rewarded.is_(False)
                )
                .values(rewarded=True, reward_amount=amount)
            )
            await session.commit()
            return sonuc.rowcount

    async def unrewarded_active_watchers(self, session_id: int) -> list[tuple[str, float]]:
        """Ayrılmamış ve ödül almamış izleyiciler: (username, join_time)"""
        async with self.database.oturum() as session:
            sonuc = await session.execute(
                select(VideoWatcher.username, func.min(VideoWatcher.join_time))
                .where(
                    VideoWatcher.session_id == session_id,
                    VideoWatcher.leave_time.is_(None),
                    VideoWatcher.rewarded.is_(False)
                )
                .group_by(VideoWatcher.username)
            )
            return [(username, join_time) for username, join_time in sonuc.all()]

    async def watchers(self, session_id: int) -> list[VideoWatcher]:
        async with self.database.oturum() as session:
            sonuc = await session.execute(
                select(VideoWatcher)
                .where(VideoWatcher.session_id == session_id)
                .order_by(VideoWatcher.id)
            )
            return list(sonuc.scalars().all())

    # ==================== STATS ====================

    async def user_stats(self, username: str, lucky_amount: int) -> dict:
        """Kullanıcının izleme ödülü istatistikleri"""
        async with self.database.oturum() as session:
            sonuc = await session.execute(
                select(
                    func.count(distinct(VideoWatcher.session_id)),
                    func.coalesce(func.sum(VideoWatcher.reward_amount), 0),
                    func.count(case((VideoWatcher.reward_amount == lucky_amount, 1)))
                ).where(
                    func.lower(VideoWatcher.username) == username.lower(),
                    VideoWatcher.rewarded.is_(True)
                )
            )
            videos_watched, total_earned, lucky_rewards = sonuc.one()

        return {
            "videos_watched" : videos_watched or 0,
            "total_earned"   : total_earned or 0,
            "lucky_rewards"  : lucky_rewards or 0,
        }
