# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .SessionStore       import SessionStore
from .Scheduler          import TaskScheduler, ScheduledTask
from .RewardPolicy       import RewardPolicy
from .RoomPresence       import RoomPresence
from .RewardSink         import EconomyRewardSink
from .WatchPayoutManager import WatchPayoutManager
