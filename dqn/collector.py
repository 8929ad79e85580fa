"""
采集器 (Collector)

编排交互循环：
策略选动作 -> 向量化环境步进 -> 写入经验回放 -> 统计 episode 回报
并在缓冲区数据足够时触发一次学习。
"""

import logging
from typing import Generic, List, Optional

from envs.vec_env import DummyVecEnv

from .batch import ActT, ObsT
from .policy import BasePolicy
from .replay_buffer import ReplayBuffer

logger = logging.getLogger(__name__)


class Collector(Generic[ObsT, ActT]):
    """
    采集器

    持有每个槽位的当前观测和进行中的 episode 回报。
    这些状态只在 collect() 之间可见，不对外暴露引用。
    """

    def __init__(self, env: DummyVecEnv, policy: BasePolicy,
                 buffer: Optional[ReplayBuffer] = None,
                 store_terminal_obs: bool = False):
        """
        Args:
            env: 向量化环境
            policy: 策略
            buffer: 经验回放缓冲区，None 表示只交互不存储
            store_terminal_obs: done 时是否把真实终止观测（而非重置后的观测）
                写入 obs_next
        """
        self.env = env
        self.policy = policy
        self.buffer = buffer
        self.store_terminal_obs = store_terminal_obs

        self.total_steps = 0
        self.total_episodes = 0
        self.reset()

    def reset(self):
        """重置所有环境并清零进行中的 episode 回报"""
        self._current_obs = list(self.env.reset())
        self._episode_returns = [0.0] * len(self.env)

    def collect(self, n_steps: int) -> List[float]:
        """
        采集至少 n_steps 条经验

        每次向量化步进产生 n_envs 条经验，不会在一次步进中途停止，
        所以实际数量是 n_envs 的倍数，最多比 n_steps 多 n_envs - 1 条。

        Returns:
            本次调用中结束的 episode 回报，按步进 / 槽位顺序排列
        """
        n_envs = len(self.env)
        steps_collected = 0
        completed_returns = []

        while steps_collected < n_steps:
            # 1. 批量选择动作
            actions = self.policy.forward(self._current_obs)

            # 2. 环境步进（done 的实例已自动重置）
            results = self.env.step(actions)

            for i, result in enumerate(results):
                # 3. 存储经验
                if self.buffer is not None:
                    obs_next = result.obs
                    if self.store_terminal_obs and result.done:
                        obs_next = result.terminal_obs
                    self.buffer.add(self._current_obs[i], actions[i], result.reward,
                                    result.done, obs_next)

                # 4. 更新 episode 回报
                self._episode_returns[i] += result.reward
                if result.done:
                    completed_returns.append(self._episode_returns[i])
                    self._episode_returns[i] = 0.0

                # 5. 更新当前观测
                self._current_obs[i] = result.obs

            steps_collected += n_envs

        self.total_steps += steps_collected
        self.total_episodes += len(completed_returns)
        return completed_returns

    def train_step(self, batch_size: int) -> bool:
        """
        从缓冲区采样一个 batch 并学习一次

        缓冲区数据不足时直接跳过（预热阶段的正常情况）。

        Returns:
            是否执行了学习更新
        """
        if batch_size <= 0:
            raise ValueError("batch_size 必须为正整数")
        if self.buffer is None or len(self.buffer) < batch_size:
            logger.debug("缓冲区数据不足，跳过学习 (batch_size=%d)", batch_size)
            return False

        batch = self.buffer.sample(batch_size)
        self.policy.learn(batch)
        return True

    def buffer_len(self) -> Optional[int]:
        return len(self.buffer) if self.buffer is not None else None
