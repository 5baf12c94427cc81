# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from rich.console   import Console
from rich.traceback import Traceback
import sys

konsol = Console(log_path=False, highlight=False)

def cikis_yap(temizle: bool = True):
    """Kapanış mesajı bas"""
    if temizle:
        konsol.clear()

    konsol.print("\n[bold red]Çıkış yapıldı...[/]", width=70, justify="center")

def hata_yakala(hata: BaseException):
    """Yakalanmamış hatayı rich traceback ile bas ve çık"""
    if isinstance(hata, KeyboardInterrupt):
        cikis_yap(False)
        sys.exit(0)

    konsol.print(Traceback.from_exception(type(hata), hata, hata.__traceback__, show_locals=False))
    konsol.log(f"[bold red]{type(hata).__name__}[/] » {hata}")
    sys.exit(1)
