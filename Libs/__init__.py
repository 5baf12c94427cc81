# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .Networking import GlobalClient, global_request
from .Database   import Database, Base
