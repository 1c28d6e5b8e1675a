"""
游戏控制器

视图层只通过这里发出意图并读取快照:
- start_new_game / play_card / choose_suit / draw_card / pass_turn
- advance_opponent (视图层在自己的延迟之后调用)

每个意图都会独立重新校验前置条件，不信任调用方。
被拒绝的意图不改变状态，只返回拒绝原因。
"""
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Tuple, Union
import logging
import random

from .cards import Card, Suit, cards_to_str, parse_suit
from .config import GameConfig
from .policy import OpponentPolicy, advance_opponent_turn, run_opponent_turn
from .rules import RuleEngine, RejectReason
from .state import GameState, OpponentTurn, Side

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """
    供视图层读取的状态快照

    对手手牌只暴露张数
    """
    stock_size: int
    top_card: Card
    active_suit: Suit
    player_hand: Tuple[Card, ...]
    opponent_hand_size: int
    turn: Optional[str]
    phase: str
    suit_choice_pending: bool
    winner: Optional[str]
    message: str
    can_pass: bool
    can_draw: bool
    playable_cards: Tuple[Card, ...]

    @classmethod
    def from_state(cls, state: GameState) -> 'Snapshot':
        side = state.current_side
        player_turn = side == Side.PLAYER and not state.awaiting_suit_choice and not state.is_finished
        playable = ()
        if player_turn:
            playable = tuple(RuleEngine.valid_cards(state.player_hand, state.top_card, state.active_suit))

        return cls(
            stock_size=len(state.stock),
            top_card=state.top_card,
            active_suit=state.active_suit,
            player_hand=state.player_hand,
            opponent_hand_size=len(state.opponent_hand),
            turn=side.value if side is not None else None,
            phase=state.phase.value,
            suit_choice_pending=state.awaiting_suit_choice,
            winner=state.winner.value if state.winner is not None else None,
            message=state.message,
            can_pass=state.can_pass(Side.PLAYER),
            can_draw=player_turn and bool(state.stock),
            playable_cards=playable,
        )

    def to_dict(self) -> Dict[str, Any]:
        """转换为可 JSON 序列化的字典"""
        d = asdict(self)
        d["top_card"] = self.top_card.id
        d["active_suit"] = self.active_suit.value
        d["player_hand"] = [c.id for c in self.player_hand]
        d["playable_cards"] = [c.id for c in self.playable_cards]
        return d


@dataclass(frozen=True)
class IntentResult:
    """
    意图处理结果

    Attributes:
        accepted: 是否被接受
        snapshot: 处理后的快照 (被拒绝时与处理前相同)
        reason: 拒绝原因
    """
    accepted: bool
    snapshot: Snapshot
    reason: Optional[RejectReason] = None


class GameController:
    """
    游戏控制器

    持有当前 GameState，把意图转换为状态转移
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        policy: Optional[OpponentPolicy] = None,
    ):
        """
        Args:
            config: 对局配置
            policy: 对手策略
        """
        self.config = config or GameConfig()
        self.policy = policy or OpponentPolicy()
        self._rng = random.Random(self.config.seed) if self.config.seed is not None else None
        self._state: GameState = self._new_state()

    def _new_state(self) -> GameState:
        state = GameState.initial(rng=self._rng)
        state.validate()
        return state

    @property
    def state(self) -> GameState:
        """当前状态 (只读)"""
        return self._state

    def snapshot(self) -> Snapshot:
        return Snapshot.from_state(self._state)

    # ------------------------------------------------------------------
    # 意图
    # ------------------------------------------------------------------

    def start_new_game(self) -> IntentResult:
        """开新局，整体替换旧状态"""
        self._state = self._new_state()
        logger.info(
            "New game: top card %s, player hand %s",
            self._state.top_card,
            cards_to_str(self._state.player_hand),
        )
        return IntentResult(True, self.snapshot())

    def play_card(self, card: Union[Card, str]) -> IntentResult:
        """
        玩家出牌

        Args:
            card: 牌或牌的标识 (如 "clubs-8")
        """
        if not isinstance(card, Card):
            try:
                card = Card.from_id(card)
            except ValueError:
                # 无法解析的标识不可能是手中的牌
                reason = RuleEngine.check_turn(self._state, Side.PLAYER)
                return self._reject("play", reason or RejectReason.CARD_NOT_IN_HAND)
        reason = RuleEngine.check_play(self._state, Side.PLAYER, card)
        if reason is not None:
            return self._reject("play", reason)
        return self._accept("play", self._state.with_play(card))

    def choose_suit(self, suit: Union[Suit, str]) -> IntentResult:
        """玩家为刚打出的 8 选择花色"""
        reason = RuleEngine.check_choose_suit(self._state, Side.PLAYER)
        if reason is not None:
            return self._reject("choose_suit", reason)
        try:
            suit = parse_suit(suit)
        except ValueError:
            return self._reject("choose_suit", RejectReason.INVALID_SUIT)
        return self._accept("choose_suit", self._state.with_choose_suit(suit))

    def draw_card(self) -> IntentResult:
        """玩家摸牌"""
        reason = RuleEngine.check_draw(self._state, Side.PLAYER)
        if reason is not None:
            return self._reject("draw", reason)
        return self._accept("draw", self._state.with_draw())

    def pass_turn(self) -> IntentResult:
        """玩家过牌"""
        reason = RuleEngine.check_pass(self._state, Side.PLAYER)
        if reason is not None:
            return self._reject("pass", reason)
        return self._accept("pass", self._state.with_pass())

    def advance_opponent(self) -> IntentResult:
        """
        执行对手回合的一步

        摸牌后仍是对手回合，视图层需再次调用
        """
        reason = RuleEngine.check_advance_opponent(self._state, Side.OPPONENT)
        if reason is not None:
            return self._reject("advance_opponent", reason)

        new_state = advance_opponent_turn(self._state, self.policy)
        new_state.validate()
        self._state = new_state
        logger.debug("Opponent step: %s", new_state.message)
        return IntentResult(True, self.snapshot())

    # ------------------------------------------------------------------
    # 内部
    # ------------------------------------------------------------------

    def _accept(self, intent: str, new_state: GameState) -> IntentResult:
        new_state.validate()
        self._state = new_state
        logger.info("%s accepted: %s", intent, new_state.message)

        if self.config.auto_play_opponent and isinstance(new_state.turn, OpponentTurn):
            self._state = run_opponent_turn(new_state, self.policy)
            self._state.validate()
            logger.debug("Opponent turn resolved: %s", self._state.message)

        return IntentResult(True, self.snapshot())

    def _reject(self, intent: str, reason: RejectReason) -> IntentResult:
        logger.debug("%s rejected: %s", intent, reason.value)
        return IntentResult(False, self.snapshot(), reason)
