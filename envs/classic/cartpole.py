"""
CartPole 环境

经典倒立摆控制任务，使用显式欧拉积分，2 个离散动作。
"""

import math
from typing import Optional

import numpy as np
from gymnasium import spaces

from envs.base_env import BaseEnv, EnvironmentFailure, Step


class CartPoleEnv(BaseEnv[np.ndarray, int]):
    """
    CartPole 环境

    任务说明：
    - 小车在一维轨道上移动，车上铰接一根杆
    - 每存活一步奖励 +1
    - 杆倾角超过 12 度、小车越过 ±2.4 或达到最大步数时结束

    动作空间（2 个动作）：
    - 0: 向左施力
    - 1: 向右施力

    观测: [x, x_dot, theta, theta_dot]
    """

    GRAVITY = 9.8
    MASS_CART = 1.0
    MASS_POLE = 0.1
    TOTAL_MASS = MASS_CART + MASS_POLE
    LENGTH = 0.5                        # 杆长的一半
    POLE_MASS_LENGTH = MASS_POLE * LENGTH
    FORCE_MAG = 10.0
    TAU = 0.02                          # 积分步长 (秒)

    X_THRESHOLD = 2.4
    THETA_THRESHOLD = 0.209             # 约 12 度

    def __init__(self, max_steps: int = 500, init_noise: float = 0.0,
                 seed: Optional[int] = None):
        """
        Args:
            max_steps: 单个 episode 最大步数
            init_noise: reset 时状态的均匀扰动幅度，0 表示总是从零状态开始
            seed: 扰动使用的随机种子
        """
        if max_steps <= 0:
            raise ValueError("max_steps 必须为正整数")

        self.max_steps = max_steps
        self.init_noise = init_noise
        self._rng = np.random.default_rng(seed)

        self.state = np.zeros(4, dtype=np.float64)
        self.current_step = 0

        high = np.array([self.X_THRESHOLD * 2, np.inf, self.THETA_THRESHOLD * 2, np.inf],
                        dtype=np.float32)
        self.action_space = spaces.Discrete(2)
        self.observation_space = spaces.Box(-high, high, dtype=np.float32)

    def reset(self) -> np.ndarray:
        if self.init_noise > 0:
            self.state = self._rng.uniform(-self.init_noise, self.init_noise, size=4)
        else:
            self.state = np.zeros(4, dtype=np.float64)
        self.current_step = 0
        return self._get_obs()

    def step(self, action: int) -> Step:
        self.current_step += 1

        x, x_dot, theta, theta_dot = self.state
        force = self.FORCE_MAG if int(action) == 1 else -self.FORCE_MAG

        cos_theta = math.cos(theta)
        sin_theta = math.sin(theta)

        # 运动方程
        temp = (force + self.POLE_MASS_LENGTH * theta_dot ** 2 * sin_theta) / self.TOTAL_MASS
        theta_acc = (self.GRAVITY * sin_theta - cos_theta * temp) / (
            self.LENGTH * (4.0 / 3.0 - self.MASS_POLE * cos_theta ** 2 / self.TOTAL_MASS)
        )
        x_acc = temp - self.POLE_MASS_LENGTH * theta_acc * cos_theta / self.TOTAL_MASS

        # 欧拉积分
        x = x + self.TAU * x_dot
        x_dot = x_dot + self.TAU * x_acc
        theta = theta + self.TAU * theta_dot
        theta_dot = theta_dot + self.TAU * theta_acc
        self.state = np.array([x, x_dot, theta, theta_dot], dtype=np.float64)

        if not np.all(np.isfinite(self.state)):
            raise EnvironmentFailure(f"CartPole 状态出现非有限值: {self.state}")

        done = bool(
            abs(x) > self.X_THRESHOLD
            or abs(theta) > self.THETA_THRESHOLD
            or self.current_step >= self.max_steps
        )
        return Step(self._get_obs(), 1.0, done, None)

    def _get_obs(self) -> np.ndarray:
        return self.state.astype(np.float32)

    def get_env_name(self) -> str:
        return 'CartPole'
