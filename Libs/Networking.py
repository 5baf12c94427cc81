# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from __future__ import annotations
import httpx, asyncio

class GlobalClient:
    """
    Paylaşımlı httpx.AsyncClient singleton yapısı.
    Connection pooling ve eşzamanlı istek sınırı sağlar.
    """
    _instance  : 'GlobalClient'    | None = None
    _client    : httpx.AsyncClient | None = None
    _semaphore : asyncio.Semaphore | None = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(GlobalClient, cls).__new__(cls)
        return cls._instance

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("GlobalClient henüz başlatılmadı! lifespan içinde 'start()' çağrılmalı.")
        return self._client

    @property
    def semaphore(self) -> asyncio.Semaphore:
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(50)
        return self._semaphore

    async def start(self, transport: httpx.AsyncBaseTransport | None = None):
        """Client'ı ilklendir (FastAPI startup'ta çağrılmalı)"""
        if self._client is not None:
            return

        limits = httpx.Limits(
            max_connections           = 50,
            max_keepalive_connections = 10,
            keepalive_expiry          = 30.0
        )
        timeout = httpx.Timeout(
            connect = 5.0,
            read    = 10.0,
            write   = 10.0,
            pool    = 5.0
        )

        self._client = httpx.AsyncClient(
            headers          = {"User-Agent": "WatchPayout/1.0"},
            limits           = limits,
            timeout          = timeout,
            follow_redirects = True,
            transport        = transport
        )

    async def stop(self):
        """Client'ı kapat (FastAPI shutdown'da çağrılmalı)"""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str, method: str = "GET", **kwargs) -> httpx.Response:
        """
        Paylaşımlı client ve limiter ile istek atar.
        """
        async with self.semaphore:
            return await self.client.request(method, url, **kwargs)

# Singleton instance
global_request = GlobalClient()
