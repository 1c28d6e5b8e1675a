"""
奖励函数

支持两种奖励设计:
- 终局奖励 (sparse)
- 过程奖励 (shaped): 终局奖励 + 双方手牌张数变化
"""
from dataclasses import dataclass
from typing import Optional
from enum import Enum

from core.state import GameState, Side, Winner


class RewardType(Enum):
    """奖励类型"""
    SPARSE = "sparse"      # 仅终局奖励
    SHAPED = "shaped"      # 过程奖励


@dataclass
class RewardConfig:
    """奖励配置"""
    reward_type: RewardType = RewardType.SPARSE
    win_reward: float = 1.0
    lose_reward: float = -1.0
    draw_reward: float = 0.0
    illegal_action_reward: float = -1.0   # 被拒绝的动作
    card_shaping: float = 0.01            # 每张手牌差的过程奖励

    @classmethod
    def from_dict(cls, d: dict) -> 'RewardConfig':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        if isinstance(filtered.get("reward_type"), str):
            filtered["reward_type"] = RewardType(filtered["reward_type"])
        return cls(**filtered)


class RewardCalculator:
    """
    奖励计算器

    始终以人类玩家座位为视角
    """

    def __init__(self, config: Optional[RewardConfig] = None):
        self.config = config or RewardConfig()

    def compute(self, state: GameState, prev_state: Optional[GameState] = None) -> float:
        """
        计算奖励

        Args:
            state: 当前状态
            prev_state: 前一状态 (用于 shaped 奖励)

        Returns:
            奖励值
        """
        reward = self._terminal_reward(state)
        if self.config.reward_type == RewardType.SHAPED and prev_state is not None:
            reward += self._shaping(state, prev_state)
        return reward

    def _terminal_reward(self, state: GameState) -> float:
        """
        终局奖励

        Returns:
            胜利: win_reward, 失败: lose_reward, 平局: draw_reward, 未结束: 0
        """
        winner = state.winner
        if winner is None:
            return 0.0
        if winner == Winner.DRAW:
            return self.config.draw_reward
        if winner == Winner.PLAYER:
            return self.config.win_reward
        return self.config.lose_reward

    def _shaping(self, state: GameState, prev_state: GameState) -> float:
        """自己少掉的牌为正，对手少掉的牌为负"""
        own = len(prev_state.get_hand(Side.PLAYER)) - len(state.get_hand(Side.PLAYER))
        opp = len(prev_state.get_hand(Side.OPPONENT)) - len(state.get_hand(Side.OPPONENT))
        return (own - opp) * self.config.card_shaping


def create_reward_calculator(reward_type: str = "sparse", **kwargs) -> RewardCalculator:
    """
    工厂函数：创建奖励计算器

    Args:
        reward_type: 奖励类型 ("sparse", "shaped")
        **kwargs: 其他配置参数
    """
    config = RewardConfig(reward_type=RewardType(reward_type), **kwargs)
    return RewardCalculator(config)
