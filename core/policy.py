"""
自动对手策略

对手回合的决策流程:
1. 找出手牌中所有可出的牌
2. 优先出第一张非 8 的合法牌，只有 8 可出时才出 8 (并选择剩余手牌最多的花色)
3. 无牌可出且牌堆非空: 摸一张，回合不变 (再次决策)
4. 无牌可出且牌堆为空: 过

决策本身是纯函数；延迟由视图层负责，核心不含计时器。
"""
from typing import Optional, Sequence
import logging

from .cards import Card, Suit, SUITS, count_by_suit
from .actions import Action
from .rules import RuleEngine
from .state import GameState, OpponentTurn, InvariantViolation

logger = logging.getLogger(__name__)


class OpponentPolicy:
    """
    对手决策策略

    给定手牌即确定性，不依赖随机数
    """

    @staticmethod
    def choose_card(valid: Sequence[Card]) -> Optional[Card]:
        """从合法牌中选出要打的牌 (非 8 优先，按手牌顺序)"""
        for card in valid:
            if not card.is_wild:
                return card
        return valid[0] if valid else None

    @staticmethod
    def choose_suit(hand: Sequence[Card]) -> Suit:
        """
        打出 8 后选择花色

        统计剩余手牌中各花色的非 8 牌数量，取最多者；
        数量相同时取枚举顺序 (红桃、方块、梅花、黑桃) 中靠后的花色

        Args:
            hand: 打出 8 之后的剩余手牌

        Returns:
            选择的花色
        """
        counts = count_by_suit(hand, include_wild=False)
        best = SUITS[0]
        for suit in SUITS[1:]:
            if counts[suit] >= counts[best]:
                best = suit
        return best

    def decide(self, state: GameState) -> Action:
        """
        对当前状态做出一步决策

        Args:
            state: 处于对手回合的状态

        Returns:
            出牌 / 摸牌 / 过
        """
        if not isinstance(state.turn, OpponentTurn):
            raise ValueError(f"Opponent cannot act in phase {state.phase.value}")

        hand = state.opponent_hand
        valid = RuleEngine.valid_cards(hand, state.top_card, state.active_suit)
        card = self.choose_card(valid)

        if card is not None:
            if card.is_wild:
                remaining = [c for c in hand if c != card]
                return Action.play(card, self.choose_suit(remaining))
            return Action.play(card)

        if state.stock:
            return Action.draw()
        return Action.pass_action()


DEFAULT_POLICY = OpponentPolicy()


def advance_opponent_turn(state: GameState, policy: Optional[OpponentPolicy] = None) -> GameState:
    """
    执行对手回合的一步

    摸牌后仍处于对手回合，视图层应在延迟后再次调用

    Args:
        state: 处于对手回合的状态
        policy: 决策策略

    Returns:
        新状态
    """
    policy = policy or DEFAULT_POLICY
    action = policy.decide(state)
    logger.debug("Opponent action: %s", action)
    return state.with_action(action)


def run_opponent_turn(state: GameState, policy: Optional[OpponentPolicy] = None) -> GameState:
    """
    连续执行对手回合直到轮到玩家或终局

    摸到可出的牌或牌堆摸空之前会反复摸牌，
    因此最多执行 len(stock) + 1 步

    Args:
        state: 处于对手回合的状态
        policy: 决策策略

    Returns:
        对手回合结束后的状态
    """
    max_steps = len(state.stock) + 1
    steps = 0
    while isinstance(state.turn, OpponentTurn):
        if steps >= max_steps:
            raise InvariantViolation(f"Opponent turn did not resolve within {max_steps} steps")
        state = advance_opponent_turn(state, policy)
        steps += 1
    return state

