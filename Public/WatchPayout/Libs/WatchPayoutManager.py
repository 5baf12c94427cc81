# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI            import konsol
from typing         import Callable
from ..Models       import MediaInfo, ActiveSession, ReconcileResult, PayoutSummary, RoomSessionState
from .SessionStore  import SessionStore
from .Scheduler     import TaskScheduler
from .RewardPolicy  import RewardPolicy
import asyncio, time

# ============== Varsayılanlar ==============
STALE_AFTER          = 2 * 60 * 60  # 2 saat: bundan eski açık oturum güvenilmez
RECONCILE_ATTEMPTS   = 3            # Oturum açıldıktan sonra ek uzlaştırma sayısı
RECONCILE_BASE_DELAY = 2.0          # 2s, 4s, 8s

class WatchPayoutManager:
    """
    Oda bazlı izleme oturumu uzlaştırma motoru.

    membership  : snapshot(room_id) -> set[str] | None, is_system_user(room_id, username) -> bool
    reward_sink : async credit(username, amount) -> bool
    """

    def __init__(
        self,
        store                : SessionStore,
        membership,
        reward_sink,
        policy               : RewardPolicy | None = None,
        scheduler            : TaskScheduler | None = None,
        clock                : Callable[[], float] = time.time,
        stale_after          : float = STALE_AFTER,
        reconcile_attempts   : int   = RECONCILE_ATTEMPTS,
        reconcile_base_delay : float = RECONCILE_BASE_DELAY,
    ):
        self.store       = store
        self.membership  = membership
        self.reward_sink = reward_sink
        self.policy      = policy or RewardPolicy()
        self.scheduler   = scheduler or TaskScheduler()
        self.clock       = clock

        self.stale_after          = stale_after
        self.reconcile_attempts   = reconcile_attempts
        self.reconcile_base_delay = reconcile_base_delay

        self._rooms: dict[str, RoomSessionState] = {}
        self._ready = asyncio.Event()

    def _room(self, room_id: str) -> RoomSessionState:
        state = self._rooms.get(room_id)
        if state is None:
            state = RoomSessionState(room_id=room_id)
            self._rooms[room_id] = state
        return state

    @property
    def ready(self) -> bool:
        return self._ready.is_set()

    # ==================== CRASH RECOVERY ====================

    async def bootstrap(self) -> None:
        """Önceki çalışmadan kalan açık oturumları kapat ya da devam ettir"""
        open_sessions = await self.store.open_sessions()

        seen_rooms: set[str] = set()
        for row in open_sessions:
            room_id = row.room_id or "default"
            now     = self.clock()
            age     = now - row.start_time

            # Aynı odada birden fazla açık oturum: en yenisi dışındakiler terk edilmiş
            if room_id in seen_rooms or age > self.stale_after:
                await self.store.close_session(row.id, now, age)
                closed = await self.store.close_all_watchers(row.id, now)
                konsol.log(f"[yellow][{room_id}] Eski oturum terk edildi ({round(age / 60)} dk):[/] {row.media_title} (ID: {row.id}, {closed} izleyici ödülsüz kapatıldı)")
                seen_rooms.add(room_id)
                continue

            seen_rooms.add(room_id)
            await self._resume_session(room_id, row, age)

        self._ready.set()
        konsol.log("[green]WatchPayoutManager hazır.[/]")

    async def _resume_session(self, room_id: str, row, age: float) -> None:
        state = self._room(room_id)
        async with state.lock:
            state.session = ActiveSession(
                session_id = row.id,
                room_id    = room_id,
                media      = MediaInfo(media_id=row.media_id, title=row.media_title),
                start_time = row.start_time
            )
            state.watchers.clear()
            state.pending_restore.clear()
            # Devam ettirme: sonraki medya değişimi normal kapat-aç yapmalı
            state.media_change_seen = True

            konsol.log(f"[cyan][{room_id}] Oturum devam ettiriliyor ({round(age / 60)} dk):[/] {row.media_title} (ID: {row.id})")

            rows    = await self.store.unrewarded_active_watchers(row.id)
            present = self.membership.snapshot(room_id)

            # Üyelik henüz bilinmiyor: satırlar açık kalır, ilk userlist'te doğrulanır
            if present is None:
                state.pending_restore.update(rows)
                konsol.log(f"[cyan][{room_id}] {len(rows)} izleyici userlist bekliyor[/]")
                return

            state.pending_restore.update(rows)
            await self._apply_pending_restore_locked(state, present)

    async def _apply_pending_restore_locked(self, state: RoomSessionState, present: set[str]) -> None:
        """Geri yüklenen satırları mevcut üyelikle karşılaştır, join_time korunur"""
        if not state.pending_restore:
            return

        closed = 0
        for username, join_time in state.pending_restore.items():
            if username in present:
                state.watchers[username] = join_time
            else:
                await self.store.close_watcher(state.session.session_id, username, self.clock())
                closed += 1

        state.pending_restore.clear()
        konsol.log(f"[cyan][{state.room_id}] {len(state.watchers)} aktif izleyici geri yüklendi ({closed} ayrılmış)[/]")

    # ==================== SESSION LIFECYCLE ====================

    async def on_media_change(self, room_id: str, media: MediaInfo) -> PayoutSummary | None:
        """Medya değişti: açık oturumu kapat, yenisini aç. Kalıcılık hataları yukarı iletilir"""
        await self._ready.wait()
        state = self._room(room_id)

        async with state.lock:
            # İlk değişim bağlanırken zaten oynayan medyadır, oturum açılmaz
            if not state.media_change_seen:
                state.media_change_seen = True
                konsol.log(f"[dim][{room_id}] İlk medya değişimi yok sayıldı: {media.title}[/]")
                return None

            summary = None
            if state.session:
                summary = await self._end_session_locked(state)

            await self._start_session_locked(state, media)
            return summary

    async def _start_session_locked(self, state: RoomSessionState, media: MediaInfo) -> None:
        start_time = self.clock()
        session_id = await self.store.create_session(state.room_id, media, start_time)

        state.session = ActiveSession(
            session_id = session_id,
            room_id    = state.room_id,
            media      = media,
            start_time = start_time
        )
        state.watchers.clear()

        # İlk uzlaştırma eksik olabilir (userlist oturumdan sonra gelebilir)
        await self._reconcile_locked(state, "initial")
        self._schedule_reconciliation_locked(state)

        konsol.log(f"[green][{state.room_id}] Yeni izleme oturumu:[/] {media.title} ({len(state.watchers)} izleyici, uzlaştırma bekliyor)")

    async def _end_session_locked(self, state: RoomSessionState) -> PayoutSummary:
        session = state.session
        self._cancel_reconciliation_locked(state)

        end_time = self.clock()
        duration = end_time - session.start_time
        halfway  = session.start_time + duration / 2

        await self.store.close_session(session.session_id, end_time, duration)

        # Oturum kapandı: bundan sonraki bir hata tekrar denemede ödeme döngüsüne ulaşmamalı
        watchers = dict(state.watchers)
        unconfirmed = len(state.pending_restore)
        state.session = None
        state.watchers.clear()
        state.pending_restore.clear()
        state.reconcile_attempts = 0

        summary = PayoutSummary(session_id=session.session_id)
        for username, join_time in watchers.items():
            if join_time > halfway:
                summary.skipped.append(username)
                continue

            amount, recorded = await self._reward_watcher(state.room_id, session.session_id, username)
            if amount > 0:
                summary.rewarded_count += 1
                summary.total_payout   += amount
                if not recorded:
                    summary.unrecorded.append(username)
            else:
                summary.failed.append(username)

        # Ödül satırları işaretlendi, kalan aktif satırlar oturumla birlikte kapanır
        await self.store.close_all_watchers(session.session_id, end_time)

        if unconfirmed:
            konsol.log(f"[yellow][{state.room_id}] {unconfirmed} geri yüklenen izleyici doğrulanamadı, ödülsüz kapatıldı[/]")

        konsol.log(f"[green][{state.room_id}] Oturum bitti:[/] {summary.rewarded_count} kullanıcı ödüllendirildi, toplam ödeme: ${summary.total_payout}")
        return summary

    async def _reward_watcher(self, room_id: str, session_id: int, username: str) -> tuple[int, bool]:
        """Tek izleyiciyi ödüllendir: (ödenen miktar, kayda düşüldü mü). Hata diğer izleyicileri durdurmaz"""
        amount, is_lucky = self.policy.draw()

        try:
            credited = await self.reward_sink.credit(username, amount)
        except Exception as hata:
            konsol.log(f"[red][{room_id}] {username} ödüllendirilemedi:[/] {type(hata).__name__}: {hata}")
            return 0, False

        if not credited:
            konsol.log(f"[red][{room_id}] Ödeme başarısız:[/] {username} (${amount})")
            return 0, False

        try:
            await self.store.mark_rewarded(session_id, username, amount)
        except Exception as hata:
            konsol.log(f"[bold red][{room_id}] {username} ödendi ama kayda düşülemedi:[/] ${amount} » {type(hata).__name__}: {hata}")
            return amount, False

        konsol.log(f"[dim][{room_id}] {username} ödüllendirildi: ${amount}{' (LUCKY!)' if is_lucky else ''}[/]")
        return amount, True

    # ==================== WATCHERS ====================

    async def on_user_join(self, room_id: str, username: str) -> bool:
        """Açık oturuma katılım. Takibe alındıysa True"""
        await self._ready.wait()
        state = self._room(room_id)

        async with state.lock:
            if not state.session or self.membership.is_system_user(room_id, username):
                return False

            if username in state.watchers:
                return False

            # Geri yüklenen satır hâlâ açık, ilk katılım zamanı korunur
            if username in state.pending_restore:
                state.watchers[username] = state.pending_restore.pop(username)
                konsol.log(f"[dim][{room_id}] {username} geri yüklendi (katılım korundu)[/]")
                return True

            await self._add_watcher_locked(state, username, self.clock())
            konsol.log(f"[dim][{room_id}] {username} izleme oturumuna katıldı[/]")
            return True

    async def on_user_leave(self, room_id: str, username: str) -> bool:
        """Ayrılma. Takip edilmeyen kullanıcı için no-op"""
        await self._ready.wait()
        state = self._room(room_id)

        async with state.lock:
            if state.session and username in state.pending_restore:
                del state.pending_restore[username]
                await self.store.close_watcher(state.session.session_id, username, self.clock())
                konsol.log(f"[dim][{room_id}] {username} doğrulanmadan ayrıldı[/]")
                return True

            if not state.session or username not in state.watchers:
                konsol.log(f"[dim][{room_id}] Takip edilmeyen kullanıcı ayrıldı, yok sayıldı: {username}[/]")
                return False

            await self._remove_watcher_locked(state, username)
            konsol.log(f"[dim][{room_id}] {username} izleme oturumundan ayrıldı[/]")
            return True

    async def _add_watcher_locked(self, state: RoomSessionState, username: str, join_time: float) -> None:
        await self.store.add_watcher(state.session.session_id, username, join_time)
        state.watchers[username] = join_time

    async def _remove_watcher_locked(self, state: RoomSessionState, username: str) -> None:
        await self.store.close_watcher(state.session.session_id, username, self.clock())
        state.watchers.pop(username, None)

    # ==================== RECONCILIATION ====================

    async def on_membership_snapshot(self, room_id: str) -> ReconcileResult | None:
        """Taze userlist geldi: hemen uzlaştır, izleyici varsa bekleyen denemeleri iptal et"""
        await self._ready.wait()
        state = self._room(room_id)

        async with state.lock:
            state.last_userlist_time = self.clock()
            if not state.session:
                return None

            result = await self._reconcile_locked(state, "userlist_update")

            if state.watchers and self._cancel_reconciliation_locked(state):
                konsol.log(f"[dim][{room_id}] Kalan uzlaştırma denemeleri iptal edildi - userlist güncellendi[/]")

            return result

    async def reconcile(self, room_id: str, source: str = "reconciliation") -> ReconcileResult | None:
        await self._ready.wait()
        state = self._room(room_id)

        async with state.lock:
            if not state.session:
                return None
            return await self._reconcile_locked(state, source)

    async def _reconcile_locked(self, state: RoomSessionState, source: str) -> ReconcileResult | None:
        present = self.membership.snapshot(state.room_id)
        if present is None:
            return None

        await self._apply_pending_restore_locked(state, present)

        result  = ReconcileResult()
        session = state.session

        # Sadece uzlaştırmayla bulunan kullanıcı oturum başından beri burada sayılır
        for username in sorted(present):
            if username not in state.watchers:
                await self._add_watcher_locked(state, username, session.start_time)
                result.added += 1

        for username in list(state.watchers):
            if username not in present:
                await self._remove_watcher_locked(state, username)
                result.removed += 1

        state.last_reconcile_time = self.clock()

        if result.changed:
            konsol.log(f"[blue][{state.room_id}] Uzlaştırma ({source}):[/] {len(state.watchers)} izleyici (+{result.added}/-{result.removed})")

        return result

    def _schedule_reconciliation_locked(self, state: RoomSessionState) -> None:
        self._cancel_reconciliation_locked(state)
        state.reconcile_attempts = 0

        if self.reconcile_attempts > 0:
            state.reconcile_handle = self.scheduler.schedule(
                self.reconcile_base_delay, self._reconcile_attempt, state.room_id, state.session.session_id,
                label = f"{state.room_id}:reconcile"
            )

    def _cancel_reconciliation_locked(self, state: RoomSessionState) -> bool:
        handle = state.reconcile_handle
        state.reconcile_handle = None
        if handle and not handle.done:
            return handle.cancel()
        return False

    async def _reconcile_attempt(self, room_id: str, session_id: int) -> None:
        state = self._room(room_id)

        async with state.lock:
            # Başka bir oturuma ait gecikmiş deneme
            if not state.session or state.session.session_id != session_id:
                return

            state.reconcile_handle = None
            if state.reconcile_attempts >= self.reconcile_attempts:
                return

            state.reconcile_attempts += 1
            await self._reconcile_locked(state, f"attempt {state.reconcile_attempts}")

            if state.reconcile_attempts < self.reconcile_attempts:
                delay = self.reconcile_base_delay * (2 ** state.reconcile_attempts)
                state.reconcile_handle = self.scheduler.schedule(
                    delay, self._reconcile_attempt, room_id, session_id,
                    label = f"{room_id}:reconcile"
                )

    # ==================== STATUS / SHUTDOWN ====================

    async def get_user_stats(self, username: str) -> dict:
        """Kullanıcının izleme istatistikleri (hata durumunda sıfırlar)"""
        try:
            return await self.store.user_stats(username, self.policy.lucky_reward)
        except Exception as hata:
            konsol.log(f"[red]İzleme istatistikleri alınamadı:[/] {username} » {hata}")
            return {"videos_watched": 0, "total_earned": 0, "lucky_rewards": 0}

    def get_room_status(self, room_id: str) -> dict | None:
        state = self._rooms.get(room_id)
        if not state:
            return None

        session = state.session
        return {
            "room_id"             : room_id,
            "session"             : {
                "session_id"  : session.session_id,
                "media_id"    : session.media.media_id,
                "media_title" : session.media.title,
                "start_time"  : session.start_time,
            } if session else None,
            "watchers"            : len(state.watchers),
            "pending_restore"     : len(state.pending_restore),
            "reconcile_attempts"  : state.reconcile_attempts,
            "reconcile_pending"   : bool(state.reconcile_handle and not state.reconcile_handle.done),
            "last_reconcile_time" : state.last_reconcile_time,
            "last_userlist_time"  : state.last_userlist_time,
        }

    def get_watchers(self, room_id: str) -> dict[str, float]:
        """Odadaki aktif izleyicilerin kopyası"""
        state = self._rooms.get(room_id)
        return dict(state.watchers) if state else {}

    async def shutdown(self) -> None:
        """Zamanlayıcıları durdur, açık oturumları devam için koru"""
        for state in self._rooms.values():
            self._cancel_reconciliation_locked(state)
            if state.session:
                konsol.log(f"[yellow][{state.room_id}] Oturum durumu korunuyor:[/] {state.session.media.title}")

        self.scheduler.cancel_all()
