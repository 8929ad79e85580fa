"""
DQN 模块 (Nature DQN 2015)

包含经验回放、策略、采集器和训练器等组件。
核心改进：Target Network
"""

from .batch import Batch, Transition
from .replay_buffer import InsufficientDataError, ReplayBuffer
from .network import QNetwork
from .policy import BasePolicy, RandomPolicy
from .agent import DQNPolicy, get_device
from .collector import Collector
from .config import TrainConfig
from .trainer import EpochStats, Trainer, build_collector

__all__ = [
    'Batch',
    'Transition',
    'InsufficientDataError',
    'ReplayBuffer',
    'QNetwork',
    'BasePolicy',
    'RandomPolicy',
    'DQNPolicy',
    'get_device',
    'Collector',
    'TrainConfig',
    'EpochStats',
    'Trainer',
    'build_collector',
]
