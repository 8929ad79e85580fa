import numpy as np
import pytest

from dqn.batch import Batch, Transition
from dqn.replay_buffer import InsufficientDataError, ReplayBuffer


def fill(buffer, n):
    # obs 记录插入序号，用来检查覆盖顺序
    for i in range(n):
        buffer.add(i, i % 2, float(i), i % 3 == 0, i + 1)


def stored_tags(buffer):
    return sorted(buffer.sample(len(buffer)).obs)


def test_len_before_full(rng):
    buf = ReplayBuffer(10, rng=rng)
    assert len(buf) == 0
    assert buf.is_empty()
    fill(buf, 7)
    assert len(buf) == 7
    assert stored_tags(buf) == list(range(7))


def test_len_capped_and_keeps_most_recent(rng):
    buf = ReplayBuffer(10, rng=rng)
    fill(buf, 23)
    assert len(buf) == 10
    assert buf.capacity == 10
    assert stored_tags(buf) == list(range(13, 23))


def test_overwrite_order_follows_cursor(rng):
    buf = ReplayBuffer(3, rng=rng)
    fill(buf, 4)
    # 第 4 条覆盖了槽位 0
    assert buf.obs == [3, 1, 2]
    assert buf.index == 1
    assert buf.rew[0] == 3.0


def test_sample_distinct_and_aligned(rng):
    buf = ReplayBuffer(50, rng=rng)
    fill(buf, 30)
    for _ in range(20):
        batch = buf.sample(12)
        assert len(batch) == 12
        assert len(set(batch.obs)) == 12
        for i in range(12):
            tag = batch.obs[i]
            assert 0 <= tag < 30
            assert batch.act[i] == tag % 2
            assert batch.rew[i] == float(tag)
            assert batch.done[i] == (tag % 3 == 0)
            assert batch.obs_next[i] == tag + 1


def test_sample_too_many_raises_and_keeps_state(rng):
    buf = ReplayBuffer(10, rng=rng)
    fill(buf, 4)
    before = (list(buf.obs), buf.index, buf.size)
    with pytest.raises(InsufficientDataError):
        buf.sample(5)
    assert (list(buf.obs), buf.index, buf.size) == before
    assert not buf.can_sample(5)
    assert buf.can_sample(4)


def test_sample_returns_copies(rng):
    buf = ReplayBuffer(4, rng=rng)
    obs = np.zeros(3)
    buf.add(obs, 0, 1.0, False, np.ones(3))
    batch = buf.sample(1)
    batch.obs[0][:] = 7.0
    batch.obs_next[0][:] = 7.0
    assert np.all(buf.obs[0] == 0.0)
    assert np.all(buf.obs_next[0] == 1.0)


def test_push_transition(rng):
    buf = ReplayBuffer(2, rng=rng)
    buf.push(Transition(obs=1.0, act=1, rew=0.5, done=True, obs_next=2.0))
    batch = buf.sample(1)
    assert batch[0] == Transition(1.0, 1, 0.5, True, 2.0)


def test_invalid_capacity():
    with pytest.raises(ValueError):
        ReplayBuffer(0)


def test_batch_rejects_mismatched_lengths():
    with pytest.raises(ValueError):
        Batch(obs=[1, 2], act=[0], rew=[1.0, 1.0], done=[False, False], obs_next=[2, 3])


def test_batch_from_transitions():
    ts = [Transition(i, 0, 1.0, False, i + 1) for i in range(3)]
    batch = Batch.from_transitions(ts)
    assert batch.obs == [0, 1, 2]
    assert batch.obs_next == [1, 2, 3]
    assert len(batch) == 3


def test_add_stores_copies(rng):
    buf = ReplayBuffer(4, rng=rng)
    obs = np.zeros(3)
    buf.add(obs, 0, 1.0, False, obs)
    # 调用方复用并修改同一个数组
    obs[:] = 9.0
    batch = buf.sample(1)
    assert np.all(batch.obs[0] == 0.0)
    assert np.all(batch.obs_next[0] == 0.0)
