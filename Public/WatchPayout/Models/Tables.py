# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, ForeignKey, Index, func
from Libs       import Base

class VideoSession(Base):
    __tablename__ = "video_sessions"

    id          = Column(Integer, primary_key=True, autoincrement=True)
    room_id     = Column(String(128), nullable=False, default="default")
    media_id    = Column(String(255), nullable=True)
    media_title = Column(String(512), nullable=True)

    # Epoch saniye
    start_time  = Column(Float, nullable=False, index=True)
    end_time    = Column(Float, nullable=True)
    duration    = Column(Float, nullable=True)

    created_at  = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("idx_video_sessions_room_end", "room_id", "end_time"),
    )

class VideoWatcher(Base):
    __tablename__ = "video_watchers"

    id            = Column(Integer, primary_key=True, autoincrement=True)
    session_id    = Column(Integer, ForeignKey("video_sessions.id"), nullable=False)
    username      = Column(String(128), nullable=False, index=True)

    join_time     = Column(Float, nullable=False)
    leave_time    = Column(Float, nullable=True)

    rewarded      = Column(Boolean, default=False, nullable=False, index=True)
    reward_amount = Column(Integer, default=0, nullable=False)

    created_at    = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("idx_video_watchers_active", "session_id", "username", "leave_time"),
    )
