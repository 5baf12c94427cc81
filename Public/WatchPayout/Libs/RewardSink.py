# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI  import konsol
from Libs import GlobalClient, global_request
import httpx

class EconomyRewardSink:
    """
    Ekonomi defterine (harici HTTP servisi) bakiye yükler.
    Tekrar denemez; başarısız kredi False döner.
    """

    def __init__(self, base_url: str, token: str = "", client: GlobalClient = global_request):
        self.base_url = base_url.rstrip("/")
        self.token    = token
        self.client   = client

    async def credit(self, username: str, amount: int) -> bool:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        payload = {
            "username"     : username,
            "amount"       : amount,
            "trust_change" : 0,   # İzleme ödülü güven puanını etkilemez
            "reason"       : "video_watch"
        }

        try:
            istek = await self.client.fetch(f"{self.base_url}/credit", method="POST", json=payload, headers=headers)
        except httpx.HTTPError as hata:
            konsol.log(f"[red]Ekonomi servisine ulaşılamadı:[/] {username} » {type(hata).__name__}: {hata}")
            return False

        if istek.status_code >= 400:
            konsol.log(f"[red]Ödeme reddedildi:[/] {username} » HTTP {istek.status_code}")
            return False

        try:
            return bool(istek.json().get("success", True))
        except ValueError:
            return True
