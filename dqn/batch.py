"""
数据结构

包含单步经验 Transition 和批量数据 Batch。
"""

from dataclasses import dataclass
from typing import Any, Generic, List, TypeVar

ObsT = TypeVar('ObsT')
ActT = TypeVar('ActT')


@dataclass(frozen=True)
class Transition(Generic[ObsT, ActT]):
    """
    单步经验数据

    Attributes:
        obs: 当前观测
        act: 执行的动作
        rew: 奖励
        done: 是否终止
        obs_next: 下一观测
    """
    obs: ObsT
    act: ActT
    rew: float
    done: bool
    obs_next: ObsT


@dataclass
class Batch(Generic[ObsT, ActT]):
    """
    批量经验数据

    五个等长的并行序列，下标 i 在各序列中对应同一条经验。
    """
    obs: List[ObsT]
    act: List[ActT]
    rew: List[float]
    done: List[bool]
    obs_next: List[ObsT]

    def __post_init__(self):
        lengths = {len(self.obs), len(self.act), len(self.rew),
                   len(self.done), len(self.obs_next)}
        if len(lengths) != 1:
            raise ValueError(
                "Batch 各字段长度必须一致: "
                f"obs={len(self.obs)}, act={len(self.act)}, rew={len(self.rew)}, "
                f"done={len(self.done)}, obs_next={len(self.obs_next)}"
            )

    @classmethod
    def from_transitions(cls, transitions: List[Transition]) -> 'Batch':
        return cls(
            obs=[t.obs for t in transitions],
            act=[t.act for t in transitions],
            rew=[t.rew for t in transitions],
            done=[t.done for t in transitions],
            obs_next=[t.obs_next for t in transitions],
        )

    def __getitem__(self, index: int) -> Transition:
        return Transition(self.obs[index], self.act[index], self.rew[index],
                          self.done[index], self.obs_next[index])

    def __len__(self) -> int:
        return len(self.obs)
