"""
经典控制环境注册模块

管理所有可用的内置环境类。
"""

from envs.classic.cartpole import CartPoleEnv
from envs.classic.counter import CounterEnv


# 环境注册表：环境名称 -> 环境类
ENV_REGISTRY = {
    'CartPole': CartPoleEnv,
    'Counter': CounterEnv,
}


__all__ = ['ENV_REGISTRY', 'CartPoleEnv', 'CounterEnv']
