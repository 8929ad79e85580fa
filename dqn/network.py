"""
Q-Network 定义

用于低维向量观测的全连接网络：
- 输入: (batch, obs_dim)
- FC1: hidden_dim 个神经元, ReLU
- FC2: hidden_dim 个神经元, ReLU
- 输出: n_actions 个 Q 值
"""

import torch
import torch.nn as nn
import torch.nn.functional as F


class QNetwork(nn.Module):
    """
    MLP Q-Network

    输入形状: (batch_size, obs_dim)
    输出形状: (batch_size, n_actions)
    """

    def __init__(self, obs_dim: int, n_actions: int, hidden_dim: int = 64):
        super(QNetwork, self).__init__()

        self.fc1 = nn.Linear(obs_dim, hidden_dim)
        self.fc2 = nn.Linear(hidden_dim, hidden_dim)
        self.fc3 = nn.Linear(hidden_dim, n_actions)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        """
        前向传播

        Args:
            x: 输入状态，形状 (batch, obs_dim)

        Returns:
            各动作的 Q 值，形状 (batch, n_actions)
        """
        x = F.relu(self.fc1(x))
        x = F.relu(self.fc2(x))
        return self.fc3(x)

