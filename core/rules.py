"""
规则引擎 - 出牌合法性判断、意图前置条件校验、终局判定

所有方法都是纯函数，无状态
"""
from enum import Enum
from typing import List, Optional, Sequence

from .cards import Card, Suit


class RejectReason(Enum):
    """意图被拒绝的原因"""
    WRONG_TURN = "wrong-turn"
    SUIT_CHOICE_PENDING = "suit-choice-pending"
    GAME_ALREADY_OVER = "game-already-over"
    CARD_NOT_IN_HAND = "card-not-in-hand"
    CARD_NOT_LEGAL = "card-not-legal"
    STOCK_EMPTY = "stock-empty"
    PASS_NOT_PERMITTED = "pass-not-permitted"
    INVALID_SUIT = "invalid-suit"       # 选花色时给出无法识别的花色名


# 连续过牌达到该次数即结束游戏
MAX_CONSECUTIVE_PASSES = 2


class RuleEngine:
    """
    疯狂八点规则引擎

    人类出牌校验、对手策略、能否过牌的判断共用同一个 is_valid_card
    所有方法都是静态方法，无状态
    """

    @staticmethod
    def is_valid_card(card: Card, top_card: Card, active_suit: Suit) -> bool:
        """
        判断一张牌能否打出

        满足任一即可:
        1. 点数为 8 (万能牌)
        2. 花色等于当前生效花色
        3. 点数等于弃牌堆顶的点数

        Args:
            card: 要出的牌
            top_card: 弃牌堆顶
            active_suit: 当前生效花色

        Returns:
            是否合法
        """
        if card.is_wild:
            return True
        if card.suit == active_suit:
            return True
        if card.rank == top_card.rank:
            return True
        return False

    @staticmethod
    def valid_cards(hand: Sequence[Card], top_card: Card, active_suit: Suit) -> List[Card]:
        """手牌中所有可出的牌 (保持手牌顺序)"""
        return [c for c in hand if RuleEngine.is_valid_card(c, top_card, active_suit)]

    @staticmethod
    def has_valid_card(hand: Sequence[Card], top_card: Card, active_suit: Suit) -> bool:
        return any(RuleEngine.is_valid_card(c, top_card, active_suit) for c in hand)

    @staticmethod
    def can_pass(hand: Sequence[Card], top_card: Card, active_suit: Suit, stock_size: int) -> bool:
        """牌堆为空且手中无牌可出时才允许过"""
        return stock_size == 0 and not RuleEngine.has_valid_card(hand, top_card, active_suit)

    @staticmethod
    def check_turn(state, side) -> Optional[RejectReason]:
        """所有意图共有的前置条件"""
        if state.is_finished:
            return RejectReason.GAME_ALREADY_OVER
        if state.awaiting_suit_choice:
            return RejectReason.SUIT_CHOICE_PENDING
        if state.current_side != side:
            return RejectReason.WRONG_TURN
        return None

    @staticmethod
    def check_play(state, side, card: Card) -> Optional[RejectReason]:
        """
        校验出牌意图

        Args:
            state: 当前游戏状态
            side: 发出意图的一方
            card: 要出的牌

        Returns:
            None 表示可以执行，否则为拒绝原因
        """
        reason = RuleEngine.check_turn(state, side)
        if reason is not None:
            return reason
        if card not in state.get_hand(side):
            return RejectReason.CARD_NOT_IN_HAND
        if not RuleEngine.is_valid_card(card, state.top_card, state.active_suit):
            return RejectReason.CARD_NOT_LEGAL
        return None

    @staticmethod
    def check_choose_suit(state, side) -> Optional[RejectReason]:
        if state.is_finished:
            return RejectReason.GAME_ALREADY_OVER
        if not state.awaiting_suit_choice or state.current_side != side:
            return RejectReason.WRONG_TURN
        return None

    @staticmethod
    def check_draw(state, side) -> Optional[RejectReason]:
        reason = RuleEngine.check_turn(state, side)
        if reason is not None:
            return reason
        if not state.stock:
            return RejectReason.STOCK_EMPTY
        return None

    @staticmethod
    def check_pass(state, side) -> Optional[RejectReason]:
        reason = RuleEngine.check_turn(state, side)
        if reason is not None:
            return reason
        if not RuleEngine.can_pass(
            state.get_hand(side), state.top_card, state.active_suit, len(state.stock)
        ):
            return RejectReason.PASS_NOT_PERMITTED
        return None

    @staticmethod
    def check_advance_opponent(state, side) -> Optional[RejectReason]:
        """校验推进自动对手回合的请求"""
        return RuleEngine.check_turn(state, side)

    @staticmethod
    def get_winner_by_count(player_cards: int, opponent_cards: int) -> str:
        """
        连续过牌终局时的胜负判定

        手牌严格更少的一方获胜，相等为平局

        Returns:
            "player" / "opponent" / "draw"
        """
        if player_cards < opponent_cards:
            return "player"
        if opponent_cards < player_cards:
            return "opponent"
        return "draw"


is_valid_card = RuleEngine.is_valid_card
