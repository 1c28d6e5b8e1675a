"""
对局配置
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class GameConfig:
    """
    对局配置

    Attributes:
        seed: 随机种子 (None 表示每局随机)
        auto_play_opponent: 玩家意图交出回合后，控制器是否立即走完对手回合
        opponent_delay: 视图层在对手每一步之前等待的秒数 (仅用于表现节奏)
    """
    seed: Optional[int] = None
    auto_play_opponent: bool = False
    opponent_delay: float = 1.2

    @classmethod
    def from_dict(cls, d: dict) -> 'GameConfig':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)
