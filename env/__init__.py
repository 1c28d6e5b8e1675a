"""
Environment Layer - Gymnasium 兼容环境

Modules:
    crazy_eights_env: 主环境类 (人类玩家座位)
    observation: 观测空间构建与动作编码
    reward: 奖励函数
"""
from .crazy_eights_env import (
    CrazyEightsEnv,
    make_env,
)

from .observation import (
    Observation,
    ObservationBuilder,
    ActionEncoder,
    get_action_encoder,
    NUM_ACTIONS,
)

from .reward import (
    RewardType,
    RewardConfig,
    RewardCalculator,
    create_reward_calculator,
)

__all__ = [
    # env
    "CrazyEightsEnv",
    "make_env",
    # observation
    "Observation",
    "ObservationBuilder",
    "ActionEncoder",
    "get_action_encoder",
    "NUM_ACTIONS",
    # reward
    "RewardType",
    "RewardConfig",
    "RewardCalculator",
    "create_reward_calculator",
]
