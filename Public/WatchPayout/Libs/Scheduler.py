# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI    import konsol
from typing import Awaitable, Callable
import asyncio

class ScheduledTask:
    """Zamanlanmış işin tutamacı - iptal edilebilir"""

    def __init__(self, task: asyncio.Task, label: str = ""):
        self._task      = task
        self._cancelled = False
        self.label      = label

    def cancel(self) -> bool:
        """Bekleyen işi iptal et. Gerçekten iptal edildiyse True"""
        if self._cancelled or self._task.done():
            return False

        self._cancelled = True
        self._task.cancel()
        return True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._task.done()

class TaskScheduler:
    """asyncio tabanlı gecikmeli iş zamanlayıcı"""

    def __init__(self):
        self._handles: set[ScheduledTask] = set()

    def schedule(self, delay: float, callback: Callable[..., Awaitable], *args, label: str = "") -> ScheduledTask:
        async def _runner():
            await asyncio.sleep(delay)
            await callback(*args)

        task   = asyncio.create_task(_runner())
        handle = ScheduledTask(task, label)
        self._handles.add(handle)

        def _on_done(t: asyncio.Task):
            self._handles.discard(handle)
            try:
                exc = t.exception()
            except asyncio.CancelledError:
                return
            if exc:
                konsol.log(f"[red]Zamanlanmış iş hatası ({label}):[/] {exc}")

        task.add_done_callback(_on_done)
        return handle

    def cancel_all(self) -> int:
        """Bekleyen tüm işleri iptal et"""
        iptal = 0
        for handle in list(self._handles):
            if handle.cancel():
                iptal += 1
        self._handles.clear()
        return iptal

    @property
    def pending(self) -> int:
        return sum(1 for handle in self._handles if not handle.done)
