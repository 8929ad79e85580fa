"""
计数环境

确定性的调试环境：观测为 reset 以来的步数，每步奖励 +1，
固定步数后结束。用于验证向量化环境和采集器的边界行为。
"""

import numpy as np
from gymnasium import spaces

from envs.base_env import BaseEnv, Step


class CounterEnv(BaseEnv[float, int]):
    """
    计数环境

    - reset 后观测为 0.0
    - 每步观测 +1.0，奖励 1.0，忽略动作内容
    - 第 max_steps 步返回 done=True
    """

    def __init__(self, max_steps: int = 5, n_actions: int = 2):
        if max_steps <= 0:
            raise ValueError("max_steps 必须为正整数")
        self.max_steps = max_steps
        self.obs = 0.0
        self.count = 0
        self.action_space = spaces.Discrete(n_actions)
        self.observation_space = spaces.Box(0.0, float(max_steps), shape=(), dtype=np.float32)

    def reset(self) -> float:
        self.obs = 0.0
        self.count = 0
        return self.obs

    def step(self, action: int) -> Step:
        self.count += 1
        self.obs += 1.0
        done = self.count >= self.max_steps
        return Step(self.obs, 1.0, done, None)

    def get_env_name(self) -> str:
        return 'Counter'
