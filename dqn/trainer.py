"""
训练器 (Trainer)

epoch 循环：每个 epoch 先采集 step_per_epoch 步，再执行若干次学习更新。
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np
import torch
from tqdm import tqdm

from envs import DummyVecEnv, make_env

from .agent import DQNPolicy
from .collector import Collector
from .config import TrainConfig
from .replay_buffer import ReplayBuffer

logger = logging.getLogger(__name__)


@dataclass
class EpochStats:
    """单个 epoch 的统计信息"""
    epoch: int
    n_episodes: int
    mean_return: Optional[float]    # 本 epoch 没有结束的 episode 时为 None
    steps: int
    updates: int
    loss: Optional[float] = None


class Trainer:
    """
    epoch 训练循环

    只负责编排 Collector 的调用，不包含环境或模型逻辑。
    """

    def __init__(self, collector: Collector, max_epochs: int, step_per_epoch: int,
                 batch_size: int, warmup_steps: int = 10, update_per_epoch: int = 1,
                 progress: bool = True,
                 epoch_callback: Optional[Callable[[EpochStats], None]] = None):
        """
        Args:
            collector: 采集器
            max_epochs: epoch 数
            step_per_epoch: 每个 epoch 采集的步数
            batch_size: 学习时的采样批大小
            warmup_steps: 训练开始前预先采集的步数
            update_per_epoch: 每个 epoch 调用 train_step 的次数
            progress: 是否显示 tqdm 进度条
            epoch_callback: 每个 epoch 结束时回调
        """
        self.collector = collector
        self.max_epochs = max_epochs
        self.step_per_epoch = step_per_epoch
        self.batch_size = batch_size
        self.warmup_steps = warmup_steps
        self.update_per_epoch = update_per_epoch
        self.progress = progress
        self.epoch_callback = epoch_callback

    @classmethod
    def from_config(cls, config: TrainConfig, **kwargs) -> 'Trainer':
        return cls(
            build_collector(config),
            max_epochs=config.max_epochs,
            step_per_epoch=config.step_per_epoch,
            batch_size=config.batch_size,
            warmup_steps=config.warmup_steps,
            update_per_epoch=config.update_per_epoch,
            **kwargs,
        )

    def train(self) -> List[EpochStats]:
        """
        执行训练

        Returns:
            每个 epoch 的统计信息
        """
        if self.warmup_steps > 0:
            logger.info("预先采集 %d 步经验...", self.warmup_steps)
            self.collector.collect(self.warmup_steps)

        history = []
        pbar = tqdm(range(1, self.max_epochs + 1), desc="Training", disable=not self.progress)

        for epoch in pbar:
            steps_before = self.collector.total_steps
            returns = self.collector.collect(self.step_per_epoch)

            updates = 0
            for _ in range(self.update_per_epoch):
                if self.collector.train_step(self.batch_size):
                    updates += 1

            stats = EpochStats(
                epoch=epoch,
                n_episodes=len(returns),
                mean_return=float(np.mean(returns)) if returns else None,
                steps=self.collector.total_steps - steps_before,
                updates=updates,
                loss=getattr(self.collector.policy, 'last_loss', None) if updates > 0 else None,
            )
            history.append(stats)

            if stats.mean_return is not None:
                pbar.set_postfix(avg_return=f"{stats.mean_return:.2f}", episodes=stats.n_episodes)
            logger.info("Epoch %d: episodes=%d, avg return=%s, updates=%d",
                        epoch, stats.n_episodes, stats.mean_return, updates)

            if self.epoch_callback is not None:
                self.epoch_callback(stats)

        pbar.close()
        return history


def set_seed(seed: int):
    """设置 numpy / torch 全局随机种子"""
    np.random.seed(seed)
    torch.manual_seed(seed)


def _env_kwargs(config: TrainConfig, slot: int) -> dict:
    """第 slot 个环境的构造参数；每个槽位使用不同的种子"""
    seed = config.seed + slot if config.seed is not None else None
    if config.env_name.startswith('gym:'):
        return {'max_episode_steps': config.max_episode_steps, 'seed': seed}
    kwargs = {'max_steps': config.max_episode_steps}
    if config.env_name == 'CartPole':
        kwargs['seed'] = seed
    return kwargs


def build_collector(config: TrainConfig) -> Collector:
    """
    根据配置创建向量化环境、DQN 策略、经验回放和采集器
    """
    if config.seed is not None:
        set_seed(config.seed)
    rng = np.random.default_rng(config.seed)

    envs = [make_env(config.env_name, **_env_kwargs(config, i)) for i in range(config.n_envs)]
    vec_env = DummyVecEnv(envs)

    probe = envs[0]
    obs_dim = int(np.prod(probe.observation_space.shape))
    n_actions = probe.get_action_space()

    policy = DQNPolicy(
        obs_dim=obs_dim,
        n_actions=n_actions,
        gamma=config.gamma,
        epsilon=config.epsilon,
        target_update_freq=config.target_update_freq,
        learning_rate=config.learning_rate,
        hidden_dim=config.hidden_dim,
        grad_clip=config.grad_clip,
        device=config.device,
        rng=rng,
    )
    buffer = ReplayBuffer(config.replay_capacity, rng=rng)
    return Collector(vec_env, policy, buffer)
