"""
DQN 策略 (Nature DQN 2015)

实现 2015 Nature 论文的关键改进：
- Target Network: 独立的目标网络计算 TD 目标
- 定期硬同步: 每隔固定的学习次数将主网络参数完整复制到目标网络
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np
import torch
import torch.nn as nn
import torch.nn.functional as F
import torch.optim as optim

from .batch import Batch
from .network import QNetwork
from .policy import BasePolicy

logger = logging.getLogger(__name__)


def get_device() -> str:
    """自动检测最佳可用设备"""
    if torch.cuda.is_available():
        return 'cuda'
    elif hasattr(torch.backends, 'mps') and torch.backends.mps.is_available():
        return 'mps'  # Apple Silicon
    else:
        return 'cpu'


@dataclass(eq=False)
class DQNPolicy(BasePolicy):
    """
    Nature DQN (2015) 策略

    核心改进：使用 Target Network 稳定训练。
    超参数在构造后不应修改；update_count 只增不减。
    """

    # 环境参数
    obs_dim: int
    n_actions: int

    # 超参数
    gamma: float = 0.99                     # 折扣因子
    epsilon: float = 0.1                    # 探索率
    target_update_freq: int = 100           # 目标网络同步周期 (学习次数)
    learning_rate: float = 1e-3             # AdamW 学习率
    hidden_dim: int = 64
    grad_clip: Optional[float] = None       # 梯度裁剪阈值，None 表示不裁剪

    # 设备
    device: str = 'cpu'

    # 可注入的 Q 网络和随机源
    network: Optional[nn.Module] = None
    rng: Optional[np.random.Generator] = None

    # 内部状态
    q_network: nn.Module = field(init=False)
    target_network: nn.Module = field(init=False)
    optimizer: optim.Optimizer = field(init=False)
    update_count: int = field(init=False, default=0)
    last_loss: Optional[float] = field(init=False, default=None)

    def __post_init__(self):
        """初始化网络、目标网络和优化器"""
        if not 0.0 <= self.gamma <= 1.0:
            raise ValueError(f"gamma 必须在 [0, 1] 内: {self.gamma}")
        if not 0.0 <= self.epsilon <= 1.0:
            raise ValueError(f"epsilon 必须在 [0, 1] 内: {self.epsilon}")
        if self.target_update_freq <= 0:
            raise ValueError("target_update_freq 必须为正整数")
        if self.n_actions <= 0:
            raise ValueError("n_actions 必须为正整数")

        # 主 Q-Network
        if self.network is None:
            self.network = QNetwork(self.obs_dim, self.n_actions, self.hidden_dim)
        self.q_network = self.network.to(self.device)

        # Target Network (结构相同，参数独立)
        self.target_network = copy.deepcopy(self.q_network)
        self.target_network.requires_grad_(False)
        self.target_network.eval()  # 目标网络不需要梯度

        self.optimizer = optim.AdamW(self.q_network.parameters(), lr=self.learning_rate)

        if self.rng is None:
            self.rng = np.random.default_rng()
        self.update_count = 0
        self.last_loss = None

    def sync_target_network(self):
        """将主网络参数同步到目标网络"""
        self.target_network.load_state_dict(self.q_network.state_dict())
        logger.debug("目标网络已同步 (update_count=%d)", self.update_count)

    def _to_tensor(self, obs: Sequence) -> torch.Tensor:
        # 标量观测也展平成 (batch, obs_dim)
        array = np.asarray(obs, dtype=np.float32).reshape(len(obs), -1)
        return torch.from_numpy(array).to(self.device)

    def forward(self, obs: Sequence) -> List[int]:
        """
        使用 epsilon-greedy 策略批量选择动作

        Args:
            obs: 观测序列

        Returns:
            动作索引列表，与输入等长
        """
        n = len(obs)
        if n == 0:
            return []

        with torch.no_grad():
            q_values = self.q_network(self._to_tensor(obs))
            # 并列最大值时 argmax 取第一个
            greedy_actions = q_values.argmax(dim=1).cpu().numpy()

        # 每个观测独立抽样是否探索
        explore = self.rng.random(n) < self.epsilon
        random_actions = self.rng.integers(0, self.n_actions, size=n)
        actions = np.where(explore, random_actions, greedy_actions)
        return [int(a) for a in actions]

    def compute_q_target(self, batch: Batch) -> torch.Tensor:
        """
        计算 TD 目标 y = r + γ * (1 - done) * max_a' Q_target(s', a')

        终止转移的 bootstrap 项为 0。
        """
        rewards = torch.as_tensor(np.asarray(batch.rew, dtype=np.float32), device=self.device)
        dones = torch.as_tensor(np.asarray(batch.done, dtype=np.float32), device=self.device)

        with torch.no_grad():
            next_q = self.target_network(self._to_tensor(batch.obs_next))  # 使用目标网络
            max_next_q = next_q.max(dim=1)[0]
            return rewards + self.gamma * (1.0 - dones) * max_next_q

    def learn(self, batch: Batch) -> None:
        """
        执行一次学习更新

        同步检查在更新之前进行，所以第一次调用 (update_count == 0) 一定会同步。

        Raises:
            FloatingPointError: 损失出现非有限值
        """
        if self.update_count % self.target_update_freq == 0:
            self.sync_target_network()

        try:
            actions = torch.as_tensor(np.asarray(batch.act, dtype=np.int64), device=self.device)
            target_q = self.compute_q_target(batch)

            # 当前 Q 值: Q(s, a)
            current_q = self.q_network(self._to_tensor(batch.obs))
            current_q = current_q.gather(1, actions.unsqueeze(1)).squeeze(1)

            loss = F.mse_loss(current_q, target_q.detach())
            if not torch.isfinite(loss):
                raise FloatingPointError(f"DQN 损失出现非有限值: {loss.item()}")

            self.optimizer.zero_grad()
            loss.backward()
            if self.grad_clip is not None:
                nn.utils.clip_grad_norm_(self.q_network.parameters(), self.grad_clip)
            self.optimizer.step()

            self.last_loss = loss.item()
        finally:
            self.update_count += 1
