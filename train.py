"""
DQN 训练脚本

在 CartPole（或任意 Gymnasium 离散动作环境）上训练 Nature DQN：
1. 多环境同步采样（DummyVecEnv，自动重置）
2. 环形经验回放 + 均匀采样
3. Target Network 定期硬同步
"""

import argparse
import logging
import time

import matplotlib.pyplot as plt
import numpy as np
from tqdm import tqdm

from dqn import TrainConfig, Trainer


def plot_training_curves(history, path='training_curves_dqn.png', show=False):
    """绘制每个 epoch 的平均回报和损失"""
    epochs = [s.epoch for s in history]
    returns = [s.mean_return if s.mean_return is not None else np.nan for s in history]
    losses = [s.loss if s.loss is not None else np.nan for s in history]

    fig, axes = plt.subplots(1, 2, figsize=(14, 5))

    ax = axes[0]
    ax.plot(epochs, returns, marker='o')
    ax.set_xlabel('Epoch')
    ax.set_ylabel('Return')
    ax.set_title('Average Episode Return')
    ax.grid(True, alpha=0.3)

    ax = axes[1]
    ax.plot(epochs, losses)
    ax.set_xlabel('Epoch')
    ax.set_ylabel('MSE Loss')
    ax.set_title('TD Loss')
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(path, dpi=150)
    if show:
        plt.show()
    plt.close(fig)


def log_epoch(stats):
    avg = f"{stats.mean_return:.2f}" if stats.mean_return is not None else "n/a"
    loss = f"{stats.loss:.4f}" if stats.loss is not None else "n/a"
    tqdm.write(
        f"Epoch {stats.epoch}: Avg Return: {avg} | Episodes: {stats.n_episodes} | "
        f"Updates: {stats.updates} | Loss: {loss}"
    )


def train(config: TrainConfig, plot: bool = False):
    """主训练循环"""
    start_time = time.time()

    trainer = Trainer.from_config(config, epoch_callback=log_epoch)
    policy = trainer.collector.policy
    print(f"环境: {config.env_name} x {config.n_envs}")
    print(f"Q-Network 参数量: {sum(p.numel() for p in policy.q_network.parameters()):,}")
    print("-" * 60)

    print(f"\n开始训练 DQN...")
    history = trainer.train()
    trainer.collector.env.close()

    if plot:
        print("\n绘制训练曲线...")
        plot_training_curves(history)

    finished = [s.mean_return for s in history if s.mean_return is not None]
    print(f"\n训练完成!")
    print(f"总步数: {trainer.collector.total_steps:,}")
    print(f"总 episode 数: {trainer.collector.total_episodes}")
    print(f"总更新次数: {policy.update_count}")
    if finished:
        print(f"最佳 epoch 平均回报: {max(finished):.1f}")
    print(f"总耗时: {time.time() - start_time:.1f} 秒")
    return history


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='DQN Training')

    # 环境参数
    parser.add_argument('--env', type=str, default='CartPole', help="环境名称或 gym:<id>")
    parser.add_argument('--n_envs', type=int, default=1, help='并行环境数量')
    parser.add_argument('--max_episode_steps', type=int, default=1000, help='单个 episode 最大步数')

    # DQN 超参数
    parser.add_argument('--replay_capacity', type=int, default=10_000, help='经验回放容量')
    parser.add_argument('--batch_size', type=int, default=32, help='批次大小')
    parser.add_argument('--gamma', type=float, default=0.99, help='折扣因子')
    parser.add_argument('--epsilon', type=float, default=0.1, help='探索率')
    parser.add_argument('--lr', type=float, default=1e-3, help='学习率')
    parser.add_argument('--hidden_dim', type=int, default=64, help='隐藏层宽度')
    parser.add_argument('--target_update_freq', type=int, default=100, help='目标网络同步周期')
    parser.add_argument('--grad_clip', type=float, default=None, help='梯度裁剪阈值')

    # 训练参数
    parser.add_argument('--max_epochs', type=int, default=1000, help='epoch 数')
    parser.add_argument('--step_per_epoch', type=int, default=10, help='每个 epoch 采集步数')
    parser.add_argument('--warmup_steps', type=int, default=10, help='预热采集步数')
    parser.add_argument('--update_per_epoch', type=int, default=1, help='每个 epoch 的学习次数')
    parser.add_argument('--seed', type=int, default=None, help='随机种子')
    parser.add_argument('--device', type=str, default='cpu', help='计算设备')

    # 日志参数
    parser.add_argument('--plot', action='store_true', help='训练结束后保存训练曲线')
    parser.add_argument('--log_level', type=str, default='WARNING', help='logging 级别')

    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> TrainConfig:
    return TrainConfig(
        env_name=args.env,
        n_envs=args.n_envs,
        max_episode_steps=args.max_episode_steps,
        replay_capacity=args.replay_capacity,
        batch_size=args.batch_size,
        gamma=args.gamma,
        epsilon=args.epsilon,
        learning_rate=args.lr,
        hidden_dim=args.hidden_dim,
        target_update_freq=args.target_update_freq,
        grad_clip=args.grad_clip,
        step_per_epoch=args.step_per_epoch,
        max_epochs=args.max_epochs,
        warmup_steps=args.warmup_steps,
        update_per_epoch=args.update_per_epoch,
        seed=args.seed,
        device=args.device,
    )


if __name__ == '__main__':
    args = parse_args()
    logging.basicConfig(level=args.log_level.upper(),
                        format='%(asctime)s %(name)s %(levelname)s: %(message)s')
    config = config_from_args(args)

    # 打印配置
    print("=" * 60)
    print("DQN 训练配置")
    print("=" * 60)
    for key, value in config.to_dict().items():
        print(f"  {key}: {value}")
    print("=" * 60)

    train(config, plot=args.plot)
