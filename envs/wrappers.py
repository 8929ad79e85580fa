"""
环境包装器

将 Gymnasium 环境适配为训练核心使用的 reset/step 接口。
"""

from typing import Any, Optional

import gymnasium as gym

from envs.base_env import BaseEnv, EnvironmentFailure, Step


class GymEnv(BaseEnv):
    """
    Gymnasium 环境适配器

    - reset 只返回观测（丢弃 info）
    - step 把 terminated / truncated 合并为 done
    """

    def __init__(self, env_id: str, seed: Optional[int] = None, **make_kwargs):
        """
        Args:
            env_id: Gymnasium 注册名，如 'CartPole-v1'
            seed: 首次 reset 使用的随机种子
            make_kwargs: 透传给 gym.make 的参数
        """
        self.env_id = env_id
        self._seed = seed
        try:
            self._env = gym.make(env_id, **make_kwargs)
        except gym.error.Error as e:
            raise EnvironmentFailure(f"无法创建 Gymnasium 环境 {env_id}: {e}") from e

        # gymnasium 兼容属性
        self.metadata = self._env.metadata
        self.action_space = self._env.action_space
        self.observation_space = self._env.observation_space

    def reset(self) -> Any:
        # 只在第一次 reset 时使用种子，之后由环境内部随机源推进
        obs, _ = self._env.reset(seed=self._seed)
        self._seed = None
        return obs

    def step(self, action: Any) -> Step:
        obs, reward, terminated, truncated, info = self._env.step(action)
        done = bool(terminated or truncated)
        info = dict(info)
        if truncated and not terminated:
            info['truncated'] = True
        return Step(obs, float(reward), done, info)

    def close(self) -> None:
        self._env.close()

    @property
    def unwrapped(self):
        """获取底层未包装的环境"""
        return self._env.unwrapped
