"""
牌的定义与编码

疯狂八点使用一副 52 张的标准扑克牌:
- 4 种花色: 红桃、方块、梅花、黑桃
- 13 种点数: 2-10, J, Q, K, A
- 8 为万能牌
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple
import random

import numpy as np


class Suit(Enum):
    """花色 (枚举顺序即规范顺序)"""
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    @property
    def symbol(self) -> str:
        return SUIT_TO_SYMBOL[self]

    @property
    def is_red(self) -> bool:
        return self in (Suit.HEARTS, Suit.DIAMONDS)


class Rank(Enum):
    """点数"""
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"


# 规范顺序
SUITS: Tuple[Suit, ...] = tuple(Suit)
RANKS: Tuple[Rank, ...] = tuple(Rank)

# 万能牌点数
WILD_RANK = Rank.EIGHT

# 花色到显示字符的映射
SUIT_TO_SYMBOL: Dict[Suit, str] = {
    Suit.HEARTS: '♥',
    Suit.DIAMONDS: '♦',
    Suit.CLUBS: '♣',
    Suit.SPADES: '♠',
}

# 显示字符到花色的映射
SYMBOL_TO_SUIT: Dict[str, Suit] = {v: k for k, v in SUIT_TO_SYMBOL.items()}


@dataclass(frozen=True, slots=True)
class Card:
    """
    不可变的牌

    身份由 (suit, rank) 唯一确定，可哈希，可在各牌堆之间转移。

    Attributes:
        suit: 花色
        rank: 点数
    """
    suit: Suit
    rank: Rank

    @property
    def id(self) -> str:
        """牌的字符串标识，如 "hearts-8" """
        return f"{self.suit.value}-{self.rank.value}"

    @property
    def is_wild(self) -> bool:
        return self.rank == WILD_RANK

    @classmethod
    def from_id(cls, card_id: str) -> 'Card':
        """
        从字符串标识解析牌

        Args:
            card_id: 如 "spades-10"

        Returns:
            对应的牌

        Raises:
            ValueError: 标识无法解析
        """
        suit_str, sep, rank_str = card_id.partition('-')
        if not sep:
            raise ValueError(f"Invalid card id: {card_id!r}")
        try:
            return cls(Suit(suit_str), Rank(rank_str))
        except ValueError:
            raise ValueError(f"Invalid card id: {card_id!r}") from None

    @classmethod
    def parse(cls, text: str) -> 'Card':
        """
        从简写解析牌

        支持 "8♣"、"10h"、"Qs" 以及 "clubs-8" 形式
        """
        text = text.strip()
        if '-' in text:
            return cls.from_id(text)
        if len(text) < 2:
            raise ValueError(f"Invalid card: {text!r}")
        rank_str, suit_str = text[:-1].upper(), text[-1]
        suit = SYMBOL_TO_SUIT.get(suit_str) or _SUIT_LETTERS.get(suit_str.lower())
        if suit is None:
            raise ValueError(f"Invalid card: {text!r}")
        try:
            return cls(suit, Rank(rank_str))
        except ValueError:
            raise ValueError(f"Invalid card: {text!r}") from None

    def __str__(self) -> str:
        return f"{self.rank.value}{self.suit.symbol}"


_SUIT_LETTERS: Dict[str, Suit] = {s.value[0]: s for s in SUITS}


def create_deck() -> List[Card]:
    """
    生成完整牌组

    按规范顺序 (花色优先，点数其次) 返回 52 张牌，每张恰好一次

    Returns:
        牌列表
    """
    return [Card(suit, rank) for suit in SUITS for rank in RANKS]


# 完整牌组 (52 张)
FULL_DECK: Tuple[Card, ...] = tuple(create_deck())

# 牌到 one-hot 索引的映射
CARD_TO_INDEX: Dict[Card, int] = {card: i for i, card in enumerate(FULL_DECK)}


def shuffle(cards: Sequence[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """
    洗牌 (Fisher-Yates)

    在副本上原地交换，不修改输入

    Args:
        cards: 待洗的牌
        rng: 随机数生成器 (默认使用全局 random)

    Returns:
        打乱顺序后的新列表
    """
    rng = rng or random
    result = list(cards)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


def parse_suit(value) -> Suit:
    """
    解析花色

    Args:
        value: Suit、名称 ("clubs")、首字母 ("c") 或符号 ("♣")
    """
    if isinstance(value, Suit):
        return value
    text = str(value).strip()
    suit = SYMBOL_TO_SUIT.get(text)
    if suit is not None:
        return suit
    text = text.lower()
    try:
        return Suit(text)
    except ValueError:
        pass
    if text in _SUIT_LETTERS:
        return _SUIT_LETTERS[text]
    raise ValueError(f"Invalid suit: {value!r}")


def suit_to_symbol(suit: Suit) -> str:
    """花色显示符号"""
    return SUIT_TO_SYMBOL[suit]


def cards_to_str(cards: Sequence[Card]) -> str:
    """
    将牌列表转换为可读字符串

    Returns:
        如 "3♥ 8♣ K♠"
    """
    return ' '.join(str(c) for c in cards)


def count_by_suit(cards: Sequence[Card], include_wild: bool = True) -> Dict[Suit, int]:
    """按花色计数"""
    counts = {suit: 0 for suit in SUITS}
    for card in cards:
        if include_wild or not card.is_wild:
            counts[card.suit] += 1
    return counts


def cards_to_array(cards: Sequence[Card]) -> np.ndarray:
    """
    将牌列表转换为 52 维 one-hot 向量

    索引顺序与 FULL_DECK 一致

    Args:
        cards: 牌列表

    Returns:
        52 维 numpy 数组
    """
    array = np.zeros(len(FULL_DECK), dtype=np.float32)
    for card in cards:
        array[CARD_TO_INDEX[card]] = 1
    return array


def array_to_cards(array: np.ndarray) -> List[Card]:
    """将 52 维数组转换回牌列表 (规范顺序)"""
    return [FULL_DECK[i] for i in np.flatnonzero(array[:len(FULL_DECK)] > 0)]
