"""
评估器

让智能体坐在人类玩家座位，与内置对手策略批量对局并统计结果
"""
from typing import Any, Callable, Dict, List, Optional
from dataclasses import dataclass
import numpy as np
import logging

from core.actions import Action, ActionType
from core.cards import array_to_cards
from core.policy import OpponentPolicy

logger = logging.getLogger(__name__)


@dataclass
class EvalResult:
    """评估结果"""
    win_rate: float
    loss_rate: float
    draw_rate: float
    avg_length: float
    games_played: int
    avg_reward: float = 0.0
    illegal_actions: int = 0

    def __repr__(self) -> str:
        return (
            f"EvalResult(win_rate={self.win_rate:.2%}, "
            f"draw_rate={self.draw_rate:.2%}, "
            f"games={self.games_played})"
        )


class Agent:
    """智能体基类"""

    def __init__(self, name: str = "agent"):
        self.name = name

    def act(self, obs: Dict[str, Any], legal_actions: List[Action]) -> Action:
        """选择动作"""
        raise NotImplementedError

    def reset(self):
        """重置状态"""
        pass


class RandomAgent(Agent):
    """随机智能体"""

    def __init__(self, name: str = "random", seed: Optional[int] = None):
        super().__init__(name)
        self._rng = np.random.default_rng(seed)

    def act(self, obs: Dict[str, Any], legal_actions: List[Action]) -> Action:
        if not legal_actions:
            raise ValueError("No legal actions available")
        idx = self._rng.integers(len(legal_actions))
        return legal_actions[idx]


class RuleBasedAgent(Agent):
    """
    规则智能体

    与内置对手相同的思路: 有牌就出 (非 8 优先)，没有就摸，摸不了才过；
    打出 8 后选择剩余手牌中最多的花色
    """

    def __init__(self, name: str = "rule"):
        super().__init__(name)

    def act(self, obs: Dict[str, Any], legal_actions: List[Action]) -> Action:
        if not legal_actions:
            raise ValueError("No legal actions available")

        by_type: Dict[ActionType, List[Action]] = {}
        for action in legal_actions:
            by_type.setdefault(action.action_type, []).append(action)

        if ActionType.CHOOSE_SUIT in by_type:
            hand = array_to_cards(obs["hand"])
            suit = OpponentPolicy.choose_suit(hand)
            return next(a for a in by_type[ActionType.CHOOSE_SUIT] if a.suit == suit)

        plays = by_type.get(ActionType.PLAY, [])
        if plays:
            card = OpponentPolicy.choose_card([a.card for a in plays])
            return next(a for a in plays if a.card == card)

        if ActionType.DRAW in by_type:
            return by_type[ActionType.DRAW][0]
        return by_type[ActionType.PASS][0]


class Evaluator:
    """
    评估器

    评估智能体在环境中的表现
    """

    def __init__(self, env_fn: Callable):
        """
        Args:
            env_fn: 创建 CrazyEightsEnv 的工厂函数
        """
        self.env_fn = env_fn

    def evaluate(
        self,
        agent: Agent,
        n_games: int = 100,
        seed: Optional[int] = None,
        verbose: bool = False,
    ) -> EvalResult:
        """
        评估智能体

        Args:
            agent: 待评估智能体
            n_games: 游戏数量
            seed: 首局的随机种子 (之后沿用同一发牌序列)
            verbose: 是否输出详情

        Returns:
            评估结果
        """
        env = self.env_fn()

        wins = 0
        losses = 0
        draws = 0
        total_length = 0
        total_reward = 0.0
        illegal = 0

        for game_idx in range(n_games):
            obs, info = env.reset(seed=seed if game_idx == 0 else None)
            agent.reset()
            done = False
            length = 0

            while not done:
                action = agent.act(obs, info["legal_actions"])
                obs, reward, terminated, truncated, info = env.step(action)
                done = terminated or truncated
                total_reward += reward
                length += 1
                if "error" in info:
                    illegal += 1

            winner = info.get("winner")
            if winner == "player":
                wins += 1
            elif winner == "opponent":
                losses += 1
            elif winner == "draw":
                draws += 1

            total_length += length

            if verbose and (game_idx + 1) % 10 == 0:
                logger.info(f"Game {game_idx + 1}/{n_games}, Win rate: {wins/(game_idx+1):.2%}")

        return EvalResult(
            win_rate=wins / n_games if n_games > 0 else 0.0,
            loss_rate=losses / n_games if n_games > 0 else 0.0,
            draw_rate=draws / n_games if n_games > 0 else 0.0,
            avg_length=total_length / n_games if n_games > 0 else 0.0,
            games_played=n_games,
            avg_reward=total_reward / n_games if n_games > 0 else 0.0,
            illegal_actions=illegal,
        )

    def compare(
        self,
        agent1: Agent,
        agent2: Agent,
        n_games: int = 100,
        seed: Optional[int] = None,
    ) -> Dict[str, float]:
        """
        对比两个智能体

        两者在相同的发牌序列下分别与内置对手对局

        Returns:
            对比结果
        """
        result1 = self.evaluate(agent1, n_games, seed=seed)
        result2 = self.evaluate(agent2, n_games, seed=seed)
        return {
            "agent1_win_rate": result1.win_rate,
            "agent2_win_rate": result2.win_rate,
            "agent1_draw_rate": result1.draw_rate,
            "agent2_draw_rate": result2.draw_rate,
        }
