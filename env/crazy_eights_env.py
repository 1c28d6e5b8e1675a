"""
疯狂八点 Gymnasium 环境

智能体坐在人类玩家的座位，对手回合在 step 内由内置策略走完。
遵循标准 Gymnasium API
"""
from typing import Any, Dict, List, Optional, Tuple, Union
import logging
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from core.actions import Action, ActionType
from core.cards import cards_to_str
from core.config import GameConfig
from core.controller import GameController, IntentResult
from core.policy import OpponentPolicy
from core.state import GameState

from .observation import ObservationBuilder, get_action_encoder, NUM_CARDS
from .reward import RewardCalculator, RewardConfig, RewardType

logger = logging.getLogger(__name__)


class CrazyEightsEnv(gym.Env):
    """
    疯狂八点 Gymnasium 环境

    API:
    - reset() -> observation, info
    - step(action) -> observation, reward, terminated, truncated, info

    被拒绝的动作不改变状态，返回 illegal_action_reward，
    并在 info["error"] 中给出拒绝原因
    """

    metadata = {
        "render_modes": ["human", "ansi"],
        "name": "CrazyEights-v0",
    }

    def __init__(
        self,
        render_mode: Optional[str] = None,
        reward_type: str = "sparse",
        seed: Optional[int] = None,
        policy: Optional[OpponentPolicy] = None,
        max_steps: Optional[int] = None,
    ):
        """
        Args:
            render_mode: 渲染模式 ("human", "ansi", None)
            reward_type: 奖励类型 ("sparse", "shaped")
            seed: 随机种子
            policy: 对手策略
            max_steps: 单局最大步数 (超过则 truncated)，None 表示不限
        """
        super().__init__()

        self.render_mode = render_mode
        self._seed = seed
        self._policy = policy
        self._max_steps = max_steps

        self._obs_builder = ObservationBuilder()
        self._reward_calculator = RewardCalculator(
            RewardConfig(reward_type=RewardType(reward_type))
        )
        self._action_encoder = get_action_encoder()

        self._controller: Optional[GameController] = None
        self._steps = 0

        self._define_spaces()

    def _define_spaces(self):
        """定义观测和动作空间"""
        self.action_space = spaces.Discrete(self._action_encoder.num_actions)

        self.observation_space = spaces.Dict({
            "hand": spaces.Box(0, 1, shape=(NUM_CARDS,), dtype=np.float32),
            "top_card": spaces.Box(0, 1, shape=(NUM_CARDS,), dtype=np.float32),
            "discard": spaces.Box(0, 1, shape=(NUM_CARDS,), dtype=np.float32),
            "active_suit": spaces.Box(0, 1, shape=(4,), dtype=np.float32),
            "phase": spaces.Box(0, 1, shape=(4,), dtype=np.float32),
            "cards_left": spaces.Box(0, 1, shape=(3,), dtype=np.float32),
        })

    def _make_controller(self, seed: Optional[int]) -> GameController:
        config = GameConfig(seed=seed, auto_play_opponent=True, opponent_delay=0.0)
        return GameController(config, self._policy)

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        重置环境

        传入 seed 时重新建立可复现的发牌序列，否则在原序列上开新局

        Returns:
            (observation, info) 元组
        """
        super().reset(seed=seed)

        if self._controller is None or seed is not None:
            game_seed = seed if seed is not None else self._seed
            self._controller = self._make_controller(game_seed)
        else:
            self._controller.start_new_game()
        self._steps = 0

        if self.render_mode == "human":
            self.render()

        return self._build_observation(), self._build_info()

    def step(
        self,
        action: Union[int, Action],
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        执行动作

        Args:
            action: 动作索引或 Action 对象

        Returns:
            (observation, reward, terminated, truncated, info) 元组
        """
        if self._controller is None:
            raise RuntimeError("Environment not reset. Call reset() first.")

        prev_state = self._controller.state
        result = self._dispatch(self._decode_action(action))
        self._steps += 1

        obs = self._build_observation()
        info = self._build_info()
        truncated = self._max_steps is not None and self._steps >= self._max_steps

        if not result.accepted:
            info["error"] = result.reason.value
            logger.debug("Rejected action %s: %s", action, result.reason.value)
            return obs, self._reward_calculator.config.illegal_action_reward, False, truncated, info

        state = self._controller.state
        reward = self._reward_calculator.compute(state, prev_state)
        terminated = state.is_finished

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated and not terminated, info

    def _decode_action(self, action: Union[int, Action]) -> Action:
        """解码动作"""
        if isinstance(action, Action):
            return action
        if isinstance(action, (int, np.integer)):
            decoded = self._action_encoder.decode(action)
            if decoded is None:
                raise ValueError(
                    f"Invalid action index: {action}. "
                    f"Valid range: 0-{self._action_encoder.num_actions - 1}"
                )
            return decoded
        raise ValueError(f"Invalid action type: {type(action)}")

    def _dispatch(self, action: Action) -> IntentResult:
        """把动作转为控制器意图"""
        controller = self._controller
        if action.action_type == ActionType.PLAY:
            return controller.play_card(action.card)
        if action.action_type == ActionType.CHOOSE_SUIT:
            return controller.choose_suit(action.suit)
        if action.action_type == ActionType.DRAW:
            return controller.draw_card()
        return controller.pass_turn()

    def _build_observation(self) -> Dict[str, np.ndarray]:
        return self._obs_builder.build(self._controller.state).to_dict()

    def _build_info(self) -> Dict[str, Any]:
        """构建 info 字典"""
        state = self._controller.state
        legal_actions = state.get_legal_actions()

        info = {
            "phase": state.phase.value,
            "message": state.message,
            "legal_actions": legal_actions,
            "legal_action_mask": self._action_encoder.build_legal_mask(legal_actions),
            "stock_size": len(state.stock),
            "opponent_cards": len(state.opponent_hand),
            "step_count": state.step_count,
        }

        if state.is_finished:
            info["winner"] = state.winner.value

        return info

    def render(self) -> Optional[str]:
        """渲染环境"""
        if self.render_mode == "ansi" or self.render_mode == "human":
            return self._render_text()
        return None

    def _render_text(self) -> str:
        """文本渲染"""
        state = self._controller.state
        lines = []
        lines.append("=" * 50)
        lines.append(f"Phase: {state.phase.value}")
        lines.append(f"Top card: {state.top_card}  Active suit: {state.active_suit.symbol}")
        lines.append(f"Stock: {len(state.stock)}  Opponent cards: {len(state.opponent_hand)}")
        lines.append(f"Hand: {cards_to_str(state.player_hand)} ({len(state.player_hand)})")
        lines.append(state.message)

        if state.is_finished:
            lines.append(f"Winner: {state.winner.value}")

        lines.append("=" * 50)

        output = "\n".join(lines)
        if self.render_mode == "human":
            print(output)
        return output

    @property
    def state(self) -> Optional[GameState]:
        """获取当前状态 (用于调试)"""
        return self._controller.state if self._controller is not None else None

    def get_legal_actions(self) -> List[Action]:
        """获取当前合法动作"""
        if self._controller is None:
            return []
        return self._controller.state.get_legal_actions()

    def sample_action(self) -> Action:
        """随机采样一个合法动作"""
        legal_actions = self.get_legal_actions()
        if not legal_actions:
            raise ValueError("No legal actions available")
        idx = self.np_random.integers(len(legal_actions))
        return legal_actions[idx]


def make_env(env_id: str = "CrazyEights-v0", **kwargs) -> CrazyEightsEnv:
    """
    工厂函数：创建环境

    Args:
        env_id: 环境 ID
        **kwargs: 环境参数

    Returns:
        CrazyEightsEnv 实例
    """
    return CrazyEightsEnv(**kwargs)
