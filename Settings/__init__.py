# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from pathlib import Path
from yaml    import load, FullLoader
from dotenv  import load_dotenv
import os

# .env yükleme
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# AYAR.yml yükleme
with open("AYAR.yml", "r", encoding="utf-8") as yaml_dosyasi:
    AYAR = load(yaml_dosyasi, Loader=FullLoader)

# Genel ayarlar
PRODUCTION = os.getenv("PRODUCTION", "false").lower() == "true"

PROJE = AYAR["PROJE"]
HOST  = AYAR["APP"]["HOST"]
PORT  = AYAR["APP"]["PORT"]

# Veritabanı
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./watch_payout.db")
SQL_ECHO     = os.getenv("SQL_ECHO", "false").lower() == "true"

# Ekonomi servisi (ödül defteri)
ECONOMY_API_URL   = os.getenv("ECONOMY_API_URL", "http://economy:3321")
ECONOMY_API_TOKEN = os.getenv("ECONOMY_API_TOKEN", "")

# İzleme ödülü
_WP = AYAR.get("WATCH_PAYOUT", {})

LUCKY_CHANCE         = float(_WP.get("LUCKY_CHANCE", 0.02))
NORMAL_REWARD        = int(_WP.get("NORMAL_REWARD", 1))
LUCKY_REWARD         = int(_WP.get("LUCKY_REWARD", 3))
STALE_AFTER          = float(_WP.get("STALE_AFTER", 2 * 60 * 60))
RECONCILE_ATTEMPTS   = int(_WP.get("RECONCILE_ATTEMPTS", 3))
RECONCILE_BASE_DELAY = float(_WP.get("RECONCILE_BASE_DELAY", 2.0))
SYSTEM_USERS         = [str(kullanici) for kullanici in _WP.get("SYSTEM_USERS", [])]
