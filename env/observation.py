"""
观察空间编码

将游戏状态转换为智能体可用的特征表示 (始终为人类玩家座位的视角)
"""
from dataclasses import dataclass
from typing import Dict, List, Optional
import numpy as np

from core.cards import FULL_DECK, SUITS, CARD_TO_INDEX, cards_to_array
from core.actions import Action, ActionType
from core.state import GameState, Phase


# 动作索引布局
NUM_CARDS = len(FULL_DECK)                  # 0-51: 出对应的牌
SUIT_OFFSET = NUM_CARDS                     # 52-55: 选择花色
DRAW_INDEX = SUIT_OFFSET + len(SUITS)       # 56: 摸牌
PASS_INDEX = DRAW_INDEX + 1                 # 57: 过
NUM_ACTIONS = PASS_INDEX + 1

PHASES = tuple(Phase)


@dataclass
class Observation:
    """
    结构化观测

    Attributes:
        hand: 自己的手牌 (52,)
        top_card: 弃牌堆顶 (52,)
        discard: 已进入弃牌堆的牌 (52,)
        active_suit: 当前生效花色 one-hot (4,)
        phase: 回合阶段 one-hot (4,)
        cards_left: [牌堆, 自己手牌, 对手手牌] 张数 / 52 (3,)
        consecutive_passes: 连续过牌次数
    """
    hand: np.ndarray
    top_card: np.ndarray
    discard: np.ndarray
    active_suit: np.ndarray
    phase: np.ndarray
    cards_left: np.ndarray
    consecutive_passes: int

    def to_dict(self) -> Dict[str, np.ndarray]:
        """转换为字典格式"""
        return {
            "hand": self.hand,
            "top_card": self.top_card,
            "discard": self.discard,
            "active_suit": self.active_suit,
            "phase": self.phase,
            "cards_left": self.cards_left,
        }

    def to_flat_array(self) -> np.ndarray:
        """
        展平为单一向量

        特征维度: 52 * 3 + 4 + 4 + 3 + 1 = 168
        """
        return np.concatenate([
            self.hand,
            self.top_card,
            self.discard,
            self.active_suit,
            self.phase,
            self.cards_left,
            np.array([self.consecutive_passes], dtype=np.float32),
        ])


class ObservationBuilder:
    """
    观测构建器

    负责将 GameState 转换为 Observation，对手手牌只编码张数
    """

    def build(self, state: GameState) -> Observation:
        """
        从游戏状态构建观测

        Args:
            state: 游戏状态

        Returns:
            Observation 对象
        """
        active_suit = np.zeros(len(SUITS), dtype=np.float32)
        active_suit[SUITS.index(state.active_suit)] = 1

        phase = np.zeros(len(PHASES), dtype=np.float32)
        phase[PHASES.index(state.phase)] = 1

        cards_left = np.array(
            [len(state.stock), len(state.player_hand), len(state.opponent_hand)],
            dtype=np.float32,
        ) / NUM_CARDS

        return Observation(
            hand=cards_to_array(state.player_hand),
            top_card=cards_to_array([state.top_card]),
            discard=cards_to_array(state.discard),
            active_suit=active_suit,
            phase=phase,
            cards_left=cards_left,
            consecutive_passes=state.consecutive_passes,
        )


class ActionEncoder:
    """
    动作编码器

    Action <-> 离散动作索引
    """

    @property
    def num_actions(self) -> int:
        return NUM_ACTIONS

    def encode(self, action: Action) -> int:
        """
        动作编码为索引

        对手出 8 时携带的花色不参与编码
        """
        if action.action_type == ActionType.PLAY:
            return CARD_TO_INDEX[action.card]
        if action.action_type == ActionType.CHOOSE_SUIT:
            return SUIT_OFFSET + SUITS.index(action.suit)
        if action.action_type == ActionType.DRAW:
            return DRAW_INDEX
        return PASS_INDEX

    def decode(self, index: int) -> Optional[Action]:
        """
        索引解码为动作

        Returns:
            动作，索引越界时返回 None
        """
        index = int(index)
        if 0 <= index < NUM_CARDS:
            return Action.play(FULL_DECK[index])
        if SUIT_OFFSET <= index < DRAW_INDEX:
            return Action.choose_suit(SUITS[index - SUIT_OFFSET])
        if index == DRAW_INDEX:
            return Action.draw()
        if index == PASS_INDEX:
            return Action.pass_action()
        return None

    def build_legal_mask(self, legal_actions: List[Action]) -> np.ndarray:
        """构建合法动作掩码"""
        mask = np.zeros(NUM_ACTIONS, dtype=np.bool_)
        for action in legal_actions:
            mask[self.encode(action)] = True
        return mask

    def get_legal_action_indices(self, legal_actions: List[Action]) -> List[int]:
        return [self.encode(a) for a in legal_actions]


_ENCODER: Optional[ActionEncoder] = None


def get_action_encoder() -> ActionEncoder:
    """获取全局动作编码器 (单例)"""
    global _ENCODER
    if _ENCODER is None:
        _ENCODER = ActionEncoder()
    return _ENCODER
