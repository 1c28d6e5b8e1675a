"""
动作 (意图) 定义与动作生成器

视图层或智能体发出的意图:
- PLAY: 出一张牌 (对手出 8 时同时带上所选花色)
- CHOOSE_SUIT: 打出 8 之后选择花色
- DRAW: 从牌堆摸一张
- PASS: 牌堆为空且无牌可出时过
"""
from enum import IntEnum
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .cards import Card, Suit, SUITS


class ActionType(IntEnum):
    """动作类型"""
    PLAY = 0
    CHOOSE_SUIT = 1
    DRAW = 2
    PASS = 3


@dataclass(frozen=True, slots=True)
class Action:
    """
    不可变动作表示

    Attributes:
        action_type: 动作类型
        card: 出的牌 (仅 PLAY)
        suit: 选择的花色 (CHOOSE_SUIT，或对手出 8 时的 PLAY)
    """
    action_type: ActionType
    card: Optional[Card] = None
    suit: Optional[Suit] = None

    @classmethod
    def play(cls, card: Card, suit: Optional[Suit] = None) -> 'Action':
        """创建出牌动作"""
        return cls(action_type=ActionType.PLAY, card=card, suit=suit)

    @classmethod
    def choose_suit(cls, suit: Suit) -> 'Action':
        return cls(action_type=ActionType.CHOOSE_SUIT, suit=suit)

    @classmethod
    def draw(cls) -> 'Action':
        return cls(action_type=ActionType.DRAW)

    @classmethod
    def pass_action(cls) -> 'Action':
        """创建 PASS 动作"""
        return cls(action_type=ActionType.PASS)

    @property
    def is_pass(self) -> bool:
        return self.action_type == ActionType.PASS

    @property
    def is_play(self) -> bool:
        return self.action_type == ActionType.PLAY

    def __str__(self) -> str:
        if self.action_type == ActionType.PLAY:
            if self.suit is not None:
                return f"Play {self.card} ({self.suit.symbol})"
            return f"Play {self.card}"
        if self.action_type == ActionType.CHOOSE_SUIT:
            return f"Choose {self.suit.symbol}"
        if self.action_type == ActionType.DRAW:
            return "Draw"
        return "Pass"


class ActionGenerator:
    """
    合法动作生成器

    根据手牌与桌面状态列出当前所有合法意图
    """

    def __init__(self, hand: Sequence[Card], top_card: Card, active_suit: Suit, stock_size: int):
        """
        Args:
            hand: 行动方手牌
            top_card: 弃牌堆顶
            active_suit: 当前生效花色
            stock_size: 牌堆剩余张数
        """
        from .rules import RuleEngine

        self.hand = list(hand)
        self.stock_size = stock_size
        self._valid = RuleEngine.valid_cards(self.hand, top_card, active_suit)

    def gen_plays(self) -> List[Action]:
        """生成所有合法出牌 (按手牌顺序)"""
        return [Action.play(card) for card in self._valid]

    def gen_draw(self) -> List[Action]:
        return [Action.draw()] if self.stock_size > 0 else []

    def gen_pass(self) -> List[Action]:
        # 只有牌堆为空且无牌可出时才能过
        if self.stock_size == 0 and not self._valid:
            return [Action.pass_action()]
        return []

    def generate_all(self) -> List[Action]:
        """
        生成全部合法动作

        摸牌与出牌可以并存 (有牌可出时仍允许摸牌)
        """
        return self.gen_plays() + self.gen_draw() + self.gen_pass()

    @staticmethod
    def gen_suit_choices() -> List[Action]:
        """等待选花色时的合法动作"""
        return [Action.choose_suit(suit) for suit in SUITS]
