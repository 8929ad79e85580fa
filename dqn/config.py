"""
训练配置

所有超参数在构造时固定，运行中不可修改。
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class TrainConfig:
    """DQN 训练配置"""

    # 环境参数
    env_name: str = 'CartPole'
    n_envs: int = 1                         # 并行环境数量
    max_episode_steps: int = 500            # 单个 episode 最大步数

    # 经验回放
    replay_capacity: int = 10_000           # 经验回放容量
    batch_size: int = 32                    # 训练批大小

    # DQN 超参数
    gamma: float = 0.99                     # 折扣因子
    epsilon: float = 0.1                    # 探索率
    learning_rate: float = 1e-3             # 学习率
    hidden_dim: int = 64
    target_update_freq: int = 100           # 目标网络同步周期 (学习次数)
    grad_clip: Optional[float] = None       # 梯度裁剪阈值

    # 训练循环
    step_per_epoch: int = 1000              # 每个 epoch 采集的步数
    max_epochs: int = 10                    # epoch 数
    warmup_steps: int = 10                  # 训练前预先采集的步数
    update_per_epoch: int = 1               # 每个 epoch 的学习次数

    seed: Optional[int] = None
    device: str = 'cpu'

    def __post_init__(self):
        positive = ('n_envs', 'max_episode_steps', 'replay_capacity', 'batch_size',
                    'hidden_dim', 'target_update_freq', 'step_per_epoch', 'max_epochs')
        for name in positive:
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} 必须为正整数: {getattr(self, name)}")
        if self.warmup_steps < 0:
            raise ValueError(f"warmup_steps 不能为负数: {self.warmup_steps}")
        if self.update_per_epoch < 0:
            raise ValueError(f"update_per_epoch 不能为负数: {self.update_per_epoch}")
        if not 0.0 <= self.gamma <= 1.0:
            raise ValueError(f"gamma 必须在 [0, 1] 内: {self.gamma}")
        if not 0.0 <= self.epsilon <= 1.0:
            raise ValueError(f"epsilon 必须在 [0, 1] 内: {self.epsilon}")
        if self.learning_rate <= 0:
            raise ValueError(f"learning_rate 必须为正数: {self.learning_rate}")
        if self.grad_clip is not None and self.grad_clip <= 0:
            raise ValueError(f"grad_clip 必须为正数: {self.grad_clip}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
