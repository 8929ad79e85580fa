"""
向量化环境 (Vectorized Environment)

把 N 个环境实例封装成一个批量接口，同步步进，
任一实例结束时在同一次调用中自动重置。
"""

import logging
from typing import Any, Callable, Dict, Generic, List, NamedTuple, Optional, Sequence

from envs.base_env import ActT, BaseEnv, ObsT

logger = logging.getLogger(__name__)


class ArityMismatchError(ValueError):
    """动作数量与环境实例数量不一致"""


class VecStepResult(NamedTuple):
    """
    单个环境槽位的步进结果

    Attributes:
        obs: 步进后的观测；若 done，则为自动重置后的初始观测
        reward: 即时奖励
        done: 是否结束
        info: 环境附加信息
        terminal_obs: done 时的真实终止观测，否则为 None
    """
    obs: Any
    reward: float
    done: bool
    info: Optional[Dict[str, Any]]
    terminal_obs: Any = None


class DummyVecEnv(Generic[ObsT, ActT]):
    """
    单进程向量化环境

    按构造顺序依次运行多个环境。每个实例的状态相互独立。
    """

    def __init__(self, envs: Sequence[BaseEnv]):
        """
        Args:
            envs: 环境实例列表，顺序即槽位顺序
        """
        if len(envs) == 0:
            raise ValueError("envs 不能为空")
        self.envs: List[BaseEnv] = list(envs)
        self.n_envs = len(self.envs)

    @classmethod
    def from_fns(cls, env_fns: Sequence[Callable[[], BaseEnv]]) -> 'DummyVecEnv':
        """由环境创建函数列表构造"""
        return cls([fn() for fn in env_fns])

    def step(self, actions: Sequence[ActT]) -> List[VecStepResult]:
        """
        同步执行动作

        Args:
            actions: 每个槽位一个动作，长度必须等于 n_envs

        Returns:
            每个槽位一个 VecStepResult，顺序与构造顺序一致

        Raises:
            ArityMismatchError: 动作数量不匹配
            EnvironmentFailure: 任一实例不可恢复的错误（原样向上传播）
        """
        if len(actions) != self.n_envs:
            raise ArityMismatchError(
                f"动作数量 ({len(actions)}) 必须等于环境数量 ({self.n_envs})"
            )

        results = []
        for i, (env, action) in enumerate(zip(self.envs, actions)):
            obs, reward, done, info = env.step(action)
            terminal_obs = None
            if done:
                # 自动重置：返回重置后的观测，终止观测单独保留
                terminal_obs = obs
                obs = env.reset()
                info = dict(info) if info else {}
                info['terminal_observation'] = terminal_obs
                logger.debug("环境 %d 结束并自动重置", i)
            results.append(VecStepResult(obs, float(reward), bool(done), info, terminal_obs))

        return results

    def reset(self) -> List[ObsT]:
        """重置所有环境，按槽位顺序返回初始观测"""
        return [env.reset() for env in self.envs]

    def close(self):
        for env in self.envs:
            if hasattr(env, 'close'):
                env.close()

    def __len__(self) -> int:
        return self.n_envs
