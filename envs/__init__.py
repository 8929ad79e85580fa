"""
环境模块

提供统一的单实例环境接口、内置控制环境、Gymnasium 适配器和向量化环境。
"""

from envs.base_env import BaseEnv, EnvironmentFailure, Step
from envs.wrappers import GymEnv
from envs.classic import ENV_REGISTRY, CartPoleEnv, CounterEnv
from envs.vec_env import ArityMismatchError, DummyVecEnv, VecStepResult


def make_env(env_name: str, **kwargs) -> BaseEnv:
    """
    工厂函数：创建指定环境实例

    Args:
        env_name: 内置环境名称，如 'CartPole'；或 'gym:<id>' 形式的 Gymnasium 环境
        kwargs: 透传给环境构造函数的参数

    Returns:
        环境实例

    Raises:
        ValueError: 不支持的环境名称

    Example:
        >>> env = make_env('CartPole', max_steps=200)
        >>> obs = env.reset()
        >>> obs, reward, done, info = env.step(0)
    """
    if env_name.startswith('gym:'):
        return GymEnv(env_name[len('gym:'):], **kwargs)

    if env_name not in ENV_REGISTRY:
        available = ', '.join(ENV_REGISTRY.keys())
        raise ValueError(f"不支持的环境: {env_name}。可用环境: {available}, gym:<id>")

    return ENV_REGISTRY[env_name](**kwargs)


__all__ = [
    'make_env',
    'BaseEnv',
    'EnvironmentFailure',
    'Step',
    'GymEnv',
    'CartPoleEnv',
    'CounterEnv',
    'ENV_REGISTRY',
    'ArityMismatchError',
    'DummyVecEnv',
    'VecStepResult',
]
