"""
环境抽象基类

定义训练循环所需的单实例环境接口：reset / step。
具体的物理仿真由子类实现，训练核心只依赖这里的约定。
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, NamedTuple, Optional, TypeVar

ObsT = TypeVar('ObsT')
ActT = TypeVar('ActT')


class EnvironmentFailure(RuntimeError):
    """环境 reset/step 发生不可恢复的错误（不会被自动重启）"""


class Step(NamedTuple):
    """
    单步结果

    可以像 gym 旧版 API 一样解包: obs, reward, done, info = env.step(a)
    """
    obs: Any
    reward: float
    done: bool
    info: Optional[Dict[str, Any]] = None


class BaseEnv(ABC, Generic[ObsT, ActT]):
    """
    单实例环境的抽象基类

    所有环境必须实现 reset 和 step。
    """

    @abstractmethod
    def reset(self) -> ObsT:
        """
        重置环境到初始状态

        Returns:
            初始观测

        Raises:
            EnvironmentFailure: 仿真出现不可恢复错误
        """

    @abstractmethod
    def step(self, action: ActT) -> Step:
        """
        执行动作并返回环境反馈

        Args:
            action: 动作

        Returns:
            Step(obs, reward, done, info)

        Raises:
            EnvironmentFailure: 仿真出现不可恢复错误
        """

    def get_action_space(self) -> int:
        """获取离散动作数量"""
        return int(self.action_space.n)

    def close(self) -> None:
        """释放环境资源"""
