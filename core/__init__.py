"""
Core Layer - 纯游戏逻辑

Modules:
    cards: 牌定义、牌组与洗牌
    actions: 意图类型与合法动作生成
    rules: 规则引擎
    state: 游戏状态与回合状态机
    policy: 自动对手策略
    controller: 游戏控制器与快照
    config: 对局配置
"""
from .cards import (
    Suit,
    Rank,
    Card,
    SUITS,
    RANKS,
    FULL_DECK,
    create_deck,
    shuffle,
    parse_suit,
    suit_to_symbol,
    cards_to_str,
    cards_to_array,
    array_to_cards,
)

from .actions import (
    ActionType,
    Action,
    ActionGenerator,
)

from .rules import (
    RuleEngine,
    RejectReason,
    is_valid_card,
    MAX_CONSECUTIVE_PASSES,
)

from .state import (
    Side,
    Winner,
    Phase,
    PlayerTurn,
    OpponentTurn,
    AwaitingSuitChoice,
    GameOver,
    GameState,
    InvariantViolation,
    HAND_SIZE,
)

from .policy import (
    OpponentPolicy,
    advance_opponent_turn,
    run_opponent_turn,
)

from .config import GameConfig

from .controller import (
    Snapshot,
    IntentResult,
    GameController,
)

__all__ = [
    # cards
    "Suit",
    "Rank",
    "Card",
    "SUITS",
    "RANKS",
    "FULL_DECK",
    "create_deck",
    "shuffle",
    "parse_suit",
    "suit_to_symbol",
    "cards_to_str",
    "cards_to_array",
    "array_to_cards",
    # actions
    "ActionType",
    "Action",
    "ActionGenerator",
    # rules
    "RuleEngine",
    "RejectReason",
    "is_valid_card",
    "MAX_CONSECUTIVE_PASSES",
    # state
    "Side",
    "Winner",
    "Phase",
    "PlayerTurn",
    "OpponentTurn",
    "AwaitingSuitChoice",
    "GameOver",
    "GameState",
    "InvariantViolation",
    "HAND_SIZE",
    # policy
    "OpponentPolicy",
    "advance_opponent_turn",
    "run_opponent_turn",
    # config
    "GameConfig",
    # controller
    "Snapshot",
    "IntentResult",
    "GameController",
]
