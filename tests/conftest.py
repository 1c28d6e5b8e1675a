"""测试公用的状态构造器"""
import pytest

from core.cards import Card, FULL_DECK, parse_suit
from core.state import GameState, PlayerTurn


def build_state(
    player,
    opponent,
    top,
    active_suit=None,
    stock=None,
    turn=None,
    passes=0,
):
    """
    按指定牌面构造状态

    未指定的牌: stock 为 None 时全部进入牌堆，否则压在弃牌堆顶之下，
    保证 52 张守恒

    Args:
        player: 玩家手牌，如 ["3h", "8c"]
        opponent: 对手手牌
        top: 弃牌堆顶
        active_suit: 生效花色 (默认为堆顶花色)
        stock: 牌堆 (最后一个元素最先被摸到)
        turn: 回合状态 (默认 PlayerTurn)
        passes: 连续过牌次数
    """
    player_hand = tuple(Card.parse(c) for c in player)
    opponent_hand = tuple(Card.parse(c) for c in opponent)
    top_card = Card.parse(top)

    used = set(player_hand) | set(opponent_hand) | {top_card}
    if stock is None:
        stock_cards = tuple(c for c in FULL_DECK if c not in used)
        below = ()
    else:
        stock_cards = tuple(Card.parse(c) for c in stock)
        used |= set(stock_cards)
        below = tuple(c for c in FULL_DECK if c not in used)

    state = GameState(
        stock=stock_cards,
        discard=below + (top_card,),
        player_hand=player_hand,
        opponent_hand=opponent_hand,
        active_suit=parse_suit(active_suit) if active_suit else top_card.suit,
        turn=turn or PlayerTurn(),
        consecutive_passes=passes,
    )
    state.validate()
    return state


@pytest.fixture
def make_state():
    return build_state
