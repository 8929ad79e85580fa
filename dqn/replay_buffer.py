"""
经验回放缓冲区 (Experience Replay Buffer)

固定容量的环形缓冲区：
- 未满时追加，满后从游标位置覆盖最旧的数据
- 采样在有效前缀 [0, size) 内均匀、无放回
- 采样结果是深拷贝，调用方不会拿到缓冲区内部的引用
"""

import copy
from typing import Any, Generic, List, Optional

import numpy as np

from .batch import ActT, Batch, ObsT, Transition


class InsufficientDataError(ValueError):
    """请求的采样数量超过缓冲区当前存储量"""


class ReplayBuffer(Generic[ObsT, ActT]):
    """
    经验回放缓冲区

    按字段分别存储 (obs, act, rew, done, obs_next)，容量在构造时固定。
    """

    def __init__(self, capacity: int, rng: Optional[np.random.Generator] = None):
        """
        Args:
            capacity: 缓冲区容量（经验条数）
            rng: 采样使用的随机数生成器，默认新建一个
        """
        if capacity <= 0:
            raise ValueError("capacity 必须为正整数")

        self._capacity = capacity
        self.rng = rng if rng is not None else np.random.default_rng()

        self.obs: List[Any] = []
        self.act: List[Any] = []
        self.rew = np.zeros(capacity, dtype=np.float64)
        self.done = np.zeros(capacity, dtype=np.bool_)
        self.obs_next: List[Any] = []

        self.index = 0      # 下一个写入位置
        self.size = 0       # 当前有效数据量

    @property
    def capacity(self) -> int:
        return self._capacity

    def add(self, obs: ObsT, act: ActT, rew: float, done: bool, obs_next: ObsT):
        """
        存储单条经验

        Args:
            obs: 当前观测
            act: 动作
            rew: 奖励
            done: 是否终止
            obs_next: 下一观测
        """
        # 写入副本，调用方之后修改自己的数组不影响已存储的经验
        obs = copy.deepcopy(obs)
        act = copy.deepcopy(act)
        obs_next = copy.deepcopy(obs_next)

        if self.size < self._capacity:
            self.obs.append(obs)
            self.act.append(act)
            self.obs_next.append(obs_next)
            self.size += 1
        else:
            self.obs[self.index] = obs
            self.act[self.index] = act
            self.obs_next[self.index] = obs_next
        self.rew[self.index] = rew
        self.done[self.index] = done

        # 更新游标（循环）
        self.index = (self.index + 1) % self._capacity

    def push(self, transition: Transition):
        """存储一条 Transition"""
        self.add(transition.obs, transition.act, transition.rew,
                 transition.done, transition.obs_next)

    def can_sample(self, batch_size: int) -> bool:
        return self.size >= batch_size

    def sample(self, batch_size: int) -> Batch:
        """
        均匀无放回地随机采样 mini-batch

        Args:
            batch_size: 采样数量

        Returns:
            深拷贝后的 Batch

        Raises:
            InsufficientDataError: batch_size 超过当前存储量（不会自动截断）
        """
        if batch_size < 0:
            raise ValueError("batch_size 不能为负数")
        if batch_size > self.size:
            raise InsufficientDataError(
                f"可用样本不足: 需要 {batch_size}，当前只有 {self.size}"
            )

        indices = self.rng.choice(self.size, size=batch_size, replace=False)

        return Batch(
            obs=[copy.deepcopy(self.obs[i]) for i in indices],
            act=[copy.deepcopy(self.act[i]) for i in indices],
            rew=[float(self.rew[i]) for i in indices],
            done=[bool(self.done[i]) for i in indices],
            obs_next=[copy.deepcopy(self.obs_next[i]) for i in indices],
        )

    def is_empty(self) -> bool:
        return self.size == 0

    def __len__(self) -> int:
        return self.size
