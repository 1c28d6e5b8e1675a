"""
游戏状态定义

使用不可变数据结构，支持:
- 哈希
- 每局之间完全独立 (不共享可变引用)
- 转移函数为纯函数: 旧状态 + 意图 -> 新状态

回合状态是一个标签联合 (PlayerTurn | OpponentTurn | AwaitingSuitChoice | GameOver)，
每个变体只携带对该状态有意义的数据。
"""
from dataclasses import dataclass, replace
from typing import ClassVar, Dict, List, Optional, Tuple, Union
from enum import Enum
from collections import Counter
import random

from .cards import Card, Suit, FULL_DECK, shuffle, suit_to_symbol
from .actions import Action, ActionType, ActionGenerator
from .rules import RuleEngine, MAX_CONSECUTIVE_PASSES


# 每人起手张数
HAND_SIZE = 8


class Side(Enum):
    """对局双方"""
    PLAYER = "player"      # 人类玩家
    OPPONENT = "opponent"  # 自动对手

    @property
    def other(self) -> 'Side':
        return Side.OPPONENT if self == Side.PLAYER else Side.PLAYER


class Winner(Enum):
    """胜负结果"""
    PLAYER = "player"
    OPPONENT = "opponent"
    DRAW = "draw"


class Phase(Enum):
    """回合阶段"""
    PLAYER_TURN = "player-turn"
    OPPONENT_TURN = "opponent-turn"
    AWAITING_SUIT_CHOICE = "awaiting-suit-choice"
    GAME_OVER = "game-over"


@dataclass(frozen=True)
class PlayerTurn:
    phase: ClassVar[Phase] = Phase.PLAYER_TURN
    side: ClassVar[Side] = Side.PLAYER


@dataclass(frozen=True)
class OpponentTurn:
    phase: ClassVar[Phase] = Phase.OPPONENT_TURN
    side: ClassVar[Side] = Side.OPPONENT


@dataclass(frozen=True)
class AwaitingSuitChoice:
    """打出 8 之后等待选择花色 (生效花色尚未更新)"""
    phase: ClassVar[Phase] = Phase.AWAITING_SUIT_CHOICE
    side: Side = Side.PLAYER


@dataclass(frozen=True)
class GameOver:
    """终局，只接受开新局"""
    phase: ClassVar[Phase] = Phase.GAME_OVER
    winner: Winner


Turn = Union[PlayerTurn, OpponentTurn, AwaitingSuitChoice, GameOver]


def turn_for(side: Side) -> Turn:
    """轮到某一方出牌的回合状态"""
    return PlayerTurn() if side == Side.PLAYER else OpponentTurn()


class InvariantViolation(RuntimeError):
    """内部不变量被破坏 (程序缺陷，而非用户错误)"""


# 状态消息中的称呼
ACTOR_NAMES: Dict[Side, str] = {
    Side.PLAYER: "You",
    Side.OPPONENT: "AI",
}


def _card_phrase(card: Card) -> str:
    return f"{card.rank.value} of {suit_to_symbol(card.suit)}"


@dataclass(frozen=True)
class GameState:
    """
    不可变游戏状态

    Attributes:
        stock: 牌堆 (最后一个元素为下一张摸到的牌)
        discard: 弃牌堆 (最后一个元素为堆顶)
        player_hand: 人类玩家手牌
        opponent_hand: 对手手牌
        active_suit: 当前生效花色
        turn: 回合状态
        consecutive_passes: 连续过牌次数
        message: 给视图层显示的状态消息
        step_count: 已执行的转移次数
    """
    # 牌堆
    stock: Tuple[Card, ...]

    # 弃牌堆
    discard: Tuple[Card, ...]

    # 双方手牌
    player_hand: Tuple[Card, ...]
    opponent_hand: Tuple[Card, ...]

    # 当前生效花色
    active_suit: Suit

    # 回合状态
    turn: Turn

    # 连续过牌次数
    consecutive_passes: int = 0

    # 状态消息
    message: str = ""

    # 步数
    step_count: int = 0

    @classmethod
    def initial(cls, seed: Optional[int] = None, rng: Optional[random.Random] = None) -> 'GameState':
        """
        创建初始游戏状态

        前 8 张发给玩家，接下来 8 张发给对手，其余为牌堆。
        从牌堆末端翻出首张弃牌；若为 8 则放回牌堆底部再翻，直到不是 8。

        Args:
            seed: 随机种子
            rng: 随机数生成器 (优先于 seed)

        Returns:
            初始状态 (玩家先手)
        """
        if rng is None and seed is not None:
            rng = random.Random(seed)

        # 洗牌
        deck = shuffle(FULL_DECK, rng)

        # 发牌
        player_hand = deck[:HAND_SIZE]
        opponent_hand = deck[HAND_SIZE:2 * HAND_SIZE]
        stock = deck[2 * HAND_SIZE:]

        # 首张弃牌不能是 8 (最多 4 张 8，必然终止)
        top_card = stock.pop()
        while top_card.is_wild:
            stock.insert(0, top_card)
            top_card = stock.pop()

        return cls(
            stock=tuple(stock),
            discard=(top_card,),
            player_hand=tuple(player_hand),
            opponent_hand=tuple(opponent_hand),
            active_suit=top_card.suit,
            turn=PlayerTurn(),
            message="Game started. Your turn!",
        )

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    @property
    def top_card(self) -> Card:
        return self.discard[-1]

    @property
    def phase(self) -> Phase:
        return self.turn.phase

    @property
    def current_side(self) -> Optional[Side]:
        """当前行动方，终局时为 None"""
        if isinstance(self.turn, GameOver):
            return None
        return self.turn.side

    @property
    def is_finished(self) -> bool:
        return isinstance(self.turn, GameOver)

    @property
    def awaiting_suit_choice(self) -> bool:
        return isinstance(self.turn, AwaitingSuitChoice)

    @property
    def winner(self) -> Optional[Winner]:
        if isinstance(self.turn, GameOver):
            return self.turn.winner
        return None

    def get_hand(self, side: Side) -> Tuple[Card, ...]:
        """获取指定一方的手牌"""
        return self.player_hand if side == Side.PLAYER else self.opponent_hand

    def can_pass(self, side: Side) -> bool:
        """该方当前能否过牌 (轮到该方、牌堆为空且无牌可出)"""
        return RuleEngine.check_pass(self, side) is None

    def get_legal_actions(self) -> List[Action]:
        """
        获取当前行动方的合法动作

        Returns:
            等待选花色: 四种花色选择
            出牌回合: 出牌 / 摸牌 / 过
            终局: 空列表
        """
        if self.is_finished:
            return []
        if self.awaiting_suit_choice:
            return ActionGenerator.gen_suit_choices()
        generator = ActionGenerator(
            self.get_hand(self.current_side), self.top_card, self.active_suit, len(self.stock)
        )
        return generator.generate_all()

    # ------------------------------------------------------------------
    # 转移
    # ------------------------------------------------------------------

    def _with_hand(self, side: Side, hand: Tuple[Card, ...], **changes) -> 'GameState':
        key = "player_hand" if side == Side.PLAYER else "opponent_hand"
        changes[key] = hand
        return replace(self, step_count=self.step_count + 1, **changes)

    def _require_turn(self) -> Side:
        if not isinstance(self.turn, (PlayerTurn, OpponentTurn)):
            raise ValueError(f"No card action allowed in phase {self.phase.value}")
        return self.turn.side

    def with_play(self, card: Card, suit: Optional[Suit] = None) -> 'GameState':
        """
        出牌后的新状态

        不带花色打出 8 时进入 AwaitingSuitChoice (人类玩家的路径)；
        带花色打出 8 时立即生效 (对手的路径)。

        Args:
            card: 要出的牌
            suit: 打出 8 时选择的花色

        Returns:
            新状态
        """
        side = self._require_turn()
        hand = self.get_hand(side)

        if card not in hand:
            raise ValueError(f"{card} is not in the {side.value}'s hand")
        if not RuleEngine.is_valid_card(card, self.top_card, self.active_suit):
            raise ValueError(f"{card} cannot be played on {self.top_card}")
        if suit is not None and not card.is_wild:
            raise ValueError("Only an 8 carries a suit choice")
        if card.is_wild and suit is None and side != Side.PLAYER:
            raise ValueError("The opponent must name a suit when playing an 8")

        new_hand = tuple(c for c in hand if c != card)
        new_discard = self.discard + (card,)
        actor = ACTOR_NAMES[side]

        if card.is_wild and suit is None:
            return self._with_hand(
                side,
                new_hand,
                discard=new_discard,
                turn=AwaitingSuitChoice(side),
                consecutive_passes=0,
                message="Choose a suit for your 8",
            )

        if card.is_wild:
            new_suit = suit
            message = f"{actor} played 8 and chose {suit_to_symbol(suit)}"
        else:
            new_suit = card.suit
            message = f"{actor} played {_card_phrase(card)}"

        if not new_hand:
            new_turn = GameOver(Winner(side.value))
            message = self._win_message(side)
        else:
            new_turn = turn_for(side.other)

        return self._with_hand(
            side,
            new_hand,
            discard=new_discard,
            active_suit=new_suit,
            turn=new_turn,
            consecutive_passes=0,
            message=message,
        )

    def with_choose_suit(self, suit: Suit) -> 'GameState':
        """
        选择花色后的新状态

        Args:
            suit: 选择的花色

        Returns:
            新状态
        """
        if not isinstance(self.turn, AwaitingSuitChoice):
            raise ValueError("No suit choice is pending")

        side = self.turn.side
        if not self.get_hand(side):
            new_turn = GameOver(Winner(side.value))
            message = self._win_message(side)
        else:
            new_turn = turn_for(side.other)
            message = f"{ACTOR_NAMES[side]} played 8 and chose {suit_to_symbol(suit)}"

        return replace(
            self,
            active_suit=suit,
            turn=new_turn,
            message=message,
            step_count=self.step_count + 1,
        )

    def with_draw(self) -> 'GameState':
        """摸牌后的新状态 (仍由同一方行动)"""
        side = self._require_turn()
        if not self.stock:
            raise ValueError("Cannot draw from an empty stock")

        drawn = self.stock[-1]
        return self._with_hand(
            side,
            self.get_hand(side) + (drawn,),
            stock=self.stock[:-1],
            consecutive_passes=0,
            message=f"{ACTOR_NAMES[side]} drew a card",
        )

    def with_pass(self) -> 'GameState':
        """
        过牌后的新状态

        双方连续过牌即终局，手牌更少的一方获胜
        """
        side = self._require_turn()
        if not self.can_pass(side):
            raise ValueError("Passing is only allowed with an empty stock and no playable card")

        passes = self.consecutive_passes + 1
        if passes >= MAX_CONSECUTIVE_PASSES:
            winner = Winner(RuleEngine.get_winner_by_count(
                len(self.player_hand), len(self.opponent_hand)
            ))
            return replace(
                self,
                turn=GameOver(winner),
                consecutive_passes=passes,
                message=self._stalemate_message(winner),
                step_count=self.step_count + 1,
            )

        return replace(
            self,
            turn=turn_for(side.other),
            consecutive_passes=passes,
            message=f"{ACTOR_NAMES[side]} passed",
            step_count=self.step_count + 1,
        )

    def with_action(self, action: Action) -> 'GameState':
        """
        执行动作后的新状态

        Args:
            action: 动作

        Returns:
            新状态
        """
        if self.is_finished:
            raise ValueError("Game is finished")
        if action.action_type == ActionType.PLAY:
            return self.with_play(action.card, action.suit)
        elif action.action_type == ActionType.CHOOSE_SUIT:
            return self.with_choose_suit(action.suit)
        elif action.action_type == ActionType.DRAW:
            return self.with_draw()
        elif action.action_type == ActionType.PASS:
            return self.with_pass()
        raise ValueError(f"Unknown action: {action!r}")

    @staticmethod
    def _win_message(side: Side) -> str:
        if side == Side.PLAYER:
            return "You played your last card. You win!"
        return "AI played its last card. AI wins!"

    @staticmethod
    def _stalemate_message(winner: Winner) -> str:
        if winner == Winner.PLAYER:
            return "Game over! No more moves. You win by having fewer cards!"
        if winner == Winner.OPPONENT:
            return "Game over! No more moves. AI wins by having fewer cards!"
        return "Game over! No more moves. It's a draw!"

    # ------------------------------------------------------------------
    # 不变量
    # ------------------------------------------------------------------

    def validate(self) -> None:
        """
        检查内部不变量

        - 四个牌堆合计恰好 52 张，两两不相交，且正好是一副完整的牌
        - 弃牌堆非空
        - 连续过牌次数在合法范围内

        Raises:
            InvariantViolation: 不变量被破坏
        """
        containers = (self.stock, self.discard, self.player_hand, self.opponent_hand)
        total = sum(len(c) for c in containers)
        if total != len(FULL_DECK):
            raise InvariantViolation(f"Card count is {total}, expected {len(FULL_DECK)}")

        counts = Counter(card for container in containers for card in container)
        duplicates = [card for card, n in counts.items() if n > 1]
        if duplicates:
            raise InvariantViolation(f"Duplicated cards: {duplicates}")
        if set(counts) != set(FULL_DECK):
            raise InvariantViolation("Cards do not form a complete deck")

        if not self.discard:
            raise InvariantViolation("Discard pile is empty")
        if not 0 <= self.consecutive_passes <= MAX_CONSECUTIVE_PASSES:
            raise InvariantViolation(f"Invalid pass counter: {self.consecutive_passes}")
        if self.consecutive_passes >= MAX_CONSECUTIVE_PASSES and not self.is_finished:
            raise InvariantViolation("Two consecutive passes must end the game")
