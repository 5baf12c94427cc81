# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .WatchPayoutModels import MediaInfo, RoomMember, ActiveSession, ReconcileResult, PayoutSummary, RoomSessionState
from .Tables            import VideoSession, VideoWatcher
