# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from dataclasses import dataclass, field
import random

@dataclass
class RewardPolicy:
    """İzleme ödülü kademesi: düşük olasılıkla şanslı miktar, yoksa temel miktar"""
    lucky_chance  : float = 0.02
    normal_reward : int   = 1
    lucky_reward  : int   = 3
    rng           : random.Random = field(default_factory=random.Random, repr=False)

    def draw(self) -> tuple[int, bool]:
        """(miktar, şanslı_mı)"""
        is_lucky = self.rng.random() < self.lucky_chance
        return (self.lucky_reward if is_lucky else self.normal_reward), is_lucky
