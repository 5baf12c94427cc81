# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm         import sessionmaker, declarative_base
from sqlalchemy.pool        import StaticPool
from contextlib             import asynccontextmanager

Base = declarative_base()

class Database:
    """Async SQLAlchemy engine + oturum fabrikası"""

    def __init__(self, url: str, echo: bool = False):
        kwargs = {}
        # In-memory SQLite: tüm bağlantılar aynı veritabanını görmeli
        if ":memory:" in url:
            kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}

        self.url    = url
        self.engine = create_async_engine(url, echo=echo, future=True, **kwargs)
        self.oturum_fabrikasi = sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)

    async def init_db(self):
        """Tabloları oluştur"""
        # Tablo tanımları Base.metadata'ya kayıt olsun
        from Public.WatchPayout.Models import VideoSession, VideoWatcher  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @asynccontextmanager
    async def oturum(self):
        """Tek iş birimi için AsyncSession"""
        async with self.oturum_fabrikasi() as session:
            yield session

    async def close(self):
        await self.engine.dispose()
