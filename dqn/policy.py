"""
策略接口

所有策略只需提供两种能力：
- forward: 批量观测 -> 等长的动作列表
- learn: 用一个 Batch 更新参数（只产生副作用）
"""

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, Sequence

import numpy as np

from .batch import ActT, Batch, ObsT


class BasePolicy(ABC, Generic[ObsT, ActT]):

    @abstractmethod
    def forward(self, obs: Sequence[ObsT]) -> List[ActT]:
        """为每个观测选择一个动作，输出顺序与输入一致"""

    @abstractmethod
    def learn(self, batch: Batch) -> None:
        """用采样得到的 Batch 执行一次学习更新"""


class RandomPolicy(BasePolicy):
    """均匀随机策略，不学习"""

    def __init__(self, n_actions: int, rng: Optional[np.random.Generator] = None):
        if n_actions <= 0:
            raise ValueError("n_actions 必须为正整数")
        self.n_actions = n_actions
        self.rng = rng if rng is not None else np.random.default_rng()

    def forward(self, obs):
        return [int(a) for a in self.rng.integers(0, self.n_actions, size=len(obs))]

    def learn(self, batch):
        pass
