# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from dataclasses import dataclass, field
import asyncio

@dataclass
class MediaInfo:
    """Odada oynatılan medya"""
    media_id : str = "unknown"
    title    : str = "Untitled"

@dataclass
class RoomMember:
    """Oda üyesi - sistem/bot kimliği kaynak tarafından işaretlenir"""
    username  : str
    is_system : bool = False

@dataclass
class ActiveSession:
    """Bir odada açık izleme oturumu"""
    session_id : int
    room_id    : str
    media      : MediaInfo
    start_time : float

@dataclass
class ReconcileResult:
    """Uzlaştırma geçişinin özeti"""
    added   : int = 0
    removed : int = 0

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)

@dataclass
class PayoutSummary:
    """Oturum kapanışında yapılan ödemeler"""
    session_id     : int
    rewarded_count : int = 0
    total_payout   : int = 0
    skipped        : list[str] = field(default_factory=list)  # yarıdan sonra katılanlar
    failed         : list[str] = field(default_factory=list)  # ödeme hatası
    unrecorded     : list[str] = field(default_factory=list)  # ödendi, kayıt düşülemedi

@dataclass
class RoomSessionState:
    """Oda bazlı bellek içi durum - sadece WatchPayoutManager değiştirir"""
    room_id             : str
    session             : ActiveSession | None = None
    watchers            : dict[str, float]     = field(default_factory=dict)  # username -> join_time
    pending_restore     : dict[str, float]     = field(default_factory=dict)  # ilk userlist ile doğrulanacak
    media_change_seen   : bool  = False   # İlk medya değişimi tüketildi mi?
    reconcile_attempts  : int   = 0       # Zamanlanmış uzlaştırma deneme sayısı
    last_reconcile_time : float = 0.0     # Son uzlaştırma zamanı
    last_userlist_time  : float = 0.0     # Son userlist güncellemesi
    reconcile_handle    : object | None = None  # ScheduledTask
    lock                : asyncio.Lock = field(default_factory=asyncio.Lock)
