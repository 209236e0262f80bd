"""
Training script for the shooter environment using Stable-Baselines3
Supports PPO, DQN, and SAC algorithms with per-episode game metrics.

Usage:
    python -m rl.train --algo ppo --rules shield --reward survival
"""

import os
import argparse
from typing import Dict, Optional

from stable_baselines3 import PPO, DQN, SAC
from stable_baselines3.common.vec_env import DummyVecEnv, VecNormalize
from stable_baselines3.common.callbacks import CheckpointCallback, EvalCallback
from stable_baselines3.common.monitor import Monitor

from shooter import ShooterEnv
from rl.configs.shooter_config import ENV_CONFIG, ALGO_CONFIGS, REWARD_CONFIGS, TRAINING_CONFIG
from rl.metrics_callback import MetricsCallback, TensorboardMetricsCallback
from rl.wrappers import MultiDiscreteToBoxWrapper, MultiDiscreteToDiscreteWrapper


ALGORITHMS = {
    "ppo": PPO,
    "dqn": DQN,
    "sac": SAC,
}


def make_env(rules: str = "health", reward_config: Optional[Dict[str, float]] = None,
             render_mode: Optional[str] = None, seed: Optional[int] = None,
             wrap_for_sac: bool = False, wrap_for_dqn: bool = False):
    """Factory function to create the environment"""
    def _init():
        env = ShooterEnv(
            **dict(ENV_CONFIG, rules=rules),
            render_mode=render_mode,
            reward_config=reward_config,
        )
        if wrap_for_sac:
            env = MultiDiscreteToBoxWrapper(env)
        elif wrap_for_dqn:
            env = MultiDiscreteToDiscreteWrapper(env)
        env = Monitor(env)
        if seed is not None:
            env.reset(seed=seed)
        return env
    return _init


def train(
    algo: str = "ppo",
    rules: str = "health",
    reward: str = "baseline",
    total_timesteps: Optional[int] = None,
    n_envs: int = 4,
    save_dir: Optional[str] = None,
    log_dir: Optional[str] = None,
    tensorboard_log: Optional[str] = None,
):
    """Train one agent on the shooter environment"""
    if algo not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm: {algo}")
    if reward not in REWARD_CONFIGS:
        raise ValueError(f"Unknown reward config: {reward}")

    if total_timesteps is None:
        total_timesteps = TRAINING_CONFIG["total_timesteps"]

    run_name = f"{algo}_{rules}_{reward}"
    save_dir = save_dir or os.path.join(TRAINING_CONFIG["model_dir"], run_name)
    log_dir = log_dir or os.path.join(TRAINING_CONFIG["log_dir"], run_name)
    tensorboard_log = tensorboard_log or os.path.join(TRAINING_CONFIG["tensorboard_log"], run_name)

    os.makedirs(save_dir, exist_ok=True)
    os.makedirs(log_dir, exist_ok=True)

    reward_config = REWARD_CONFIGS[reward]
    wrap = {"wrap_for_sac": algo == "sac", "wrap_for_dqn": algo == "dqn"}
    # only PPO benefits from parallel rollouts here
    if algo != "ppo":
        n_envs = 1

    print(f"\n{'='*60}")
    print(f"Training {algo.upper()} for {total_timesteps:,} timesteps...")
    print(f"Rules: {rules} | Reward: {reward} | Envs: {n_envs}")
    print(f"{'='*60}\n")

    env = DummyVecEnv([make_env(rules, reward_config, seed=i, **wrap) for i in range(n_envs)])
    eval_env = DummyVecEnv([make_env(rules, reward_config, seed=100, **wrap)])

    if algo == "ppo":
        # Normalize observations and rewards
        env = VecNormalize(env, norm_obs=True, norm_reward=True)
        eval_env = VecNormalize(eval_env, norm_obs=True, norm_reward=False, training=False)

    checkpoint_callback = CheckpointCallback(
        save_freq=max(1, TRAINING_CONFIG["save_freq"] // n_envs),
        save_path=save_dir,
        name_prefix=f"{algo}_shooter",
    )

    eval_callback = EvalCallback(
        eval_env,
        best_model_save_path=save_dir,
        log_path=log_dir,
        eval_freq=max(1, TRAINING_CONFIG["eval_freq"] // n_envs),
        deterministic=True,
        render=False,
    )

    metrics_callback = MetricsCallback(
        log_dir=log_dir,
        algo_name=algo,
        verbose=1,
    )

    tb_callback = TensorboardMetricsCallback(verbose=0)

    model = ALGORITHMS[algo](
        env=env,
        tensorboard_log=tensorboard_log,
        **ALGO_CONFIGS[algo]
    )

    model.learn(
        total_timesteps=total_timesteps,
        callback=[checkpoint_callback, eval_callback, metrics_callback, tb_callback],
    )

    final_path = os.path.join(save_dir, f"{algo}_shooter_final")
    model.save(final_path)
    if isinstance(env, VecNormalize):
        env.save(os.path.join(save_dir, "vec_normalize.pkl"))

    print(f"\n{'='*60}")
    print(f"{algo.upper()} Training complete! Model saved to {final_path}")
    summary = metrics_callback.get_summary()
    if summary:
        print(f"Mean Reward: {summary['mean_reward']:.2f} ± {summary['std_reward']:.2f}")
        print(f"Mean Score: {summary['mean_score']:.1f}")
        print(f"Total Episodes: {summary['total_episodes']}")
    print(f"{'='*60}\n")

    return model, metrics_callback


def main():
    parser = argparse.ArgumentParser(description="Train RL agent on shooter environment")
    parser.add_argument(
        "--algo",
        type=str,
        default="ppo",
        choices=["ppo", "dqn", "sac", "all"],
        help="RL algorithm to use (default: ppo)",
    )
    parser.add_argument(
        "--rules",
        type=str,
        default=ENV_CONFIG["rules"],
        choices=["health", "shield"],
        help=f"Game rule set (default: {ENV_CONFIG['rules']})",
    )
    parser.add_argument(
        "--reward",
        type=str,
        default="baseline",
        choices=sorted(REWARD_CONFIGS),
        help="Reward shaping preset (default: baseline)",
    )
    parser.add_argument(
        "--timesteps",
        type=int,
        default=None,
        help=f"Total timesteps to train (default: {TRAINING_CONFIG['total_timesteps']})",
    )
    parser.add_argument(
        "--n-envs",
        type=int,
        default=4,
        help="Number of parallel environments for PPO (default: 4)",
    )

    args = parser.parse_args()

    algos = ["dqn", "ppo", "sac"] if args.algo == "all" else [args.algo]
    if len(algos) > 1:
        print("Training all algorithms sequentially...")
    for algo in algos:
        train(
            algo=algo,
            rules=args.rules,
            reward=args.reward,
            total_timesteps=args.timesteps,
            n_envs=args.n_envs,
        )


if __name__ == "__main__":
    main()
