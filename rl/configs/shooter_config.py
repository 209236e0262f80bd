"""
Training configuration for the arcade shooter environment
Environment settings, reward shaping presets and algorithm hyperparameters
"""

# Environment parameters
ENV_CONFIG = {
    # "render_mode": None,  # Don't render during training
    "rules": "health",
    "width": 800,
    "height": 600,
    "max_steps": 3600,  # 60 seconds at 60 FPS
    "k_enemies": 5,
    "shoot_cooldown_steps": 8,
}

# ==============================================================================
# REWARD SHAPING CONFIGURATIONS
# ==============================================================================

# BASELINE: balanced, matches the env defaults
REWARD_CONFIG_BASELINE = {
    "name": "baseline",
    "description": "Balanced reward shaping",
    "R_KILL": 1.0,       # Enemy destroyed
    "R_HIT": 0.2,        # Bullet landed
    "R_DAMAGE": 1.0,     # Contact with an enemy
    "R_SHIELD": 0.2,     # Hit absorbed by the shield
    "R_SHOT": 0.01,      # Bullet fired (encourage efficiency)
    "R_TIME": 0.001,     # Small time penalty
    "R_DEATH": 5.0,      # Game over
}

# SURVIVAL: dodge first, shoot second
REWARD_CONFIG_SURVIVAL = {
    "name": "survival",
    "description": "Higher damage/death penalties, lower combat rewards",
    "R_KILL": 0.5,
    "R_HIT": 0.1,
    "R_DAMAGE": 3.0,
    "R_SHIELD": 0.5,
    "R_SHOT": 0.02,
    "R_TIME": 0.0,
    "R_DEATH": 10.0,
}

# AGGRESSIVE: clear the screen, accept risk
REWARD_CONFIG_AGGRESSIVE = {
    "name": "aggressive",
    "description": "Higher combat rewards, lower penalties",
    "R_KILL": 2.0,
    "R_HIT": 0.5,
    "R_DAMAGE": 0.5,
    "R_SHIELD": 0.1,
    "R_SHOT": 0.005,
    "R_TIME": 0.002,
    "R_DEATH": 3.0,
}

REWARD_CONFIGS = {
    "baseline": REWARD_CONFIG_BASELINE,
    "survival": REWARD_CONFIG_SURVIVAL,
    "aggressive": REWARD_CONFIG_AGGRESSIVE,
}

# ==============================================================================
# ALGORITHM HYPERPARAMETERS
# ==============================================================================

PPO_CONFIG = {
    "policy": "MlpPolicy",
    "learning_rate": 3e-4,
    "n_steps": 1024,
    "batch_size": 256,
    "n_epochs": 10,
    "gamma": 0.99,
    "gae_lambda": 0.95,
    "clip_range": 0.2,
    "ent_coef": 0.01,
    "vf_coef": 0.5,
    "max_grad_norm": 0.5,
    "verbose": 1,
}

DQN_CONFIG = {
    "policy": "MlpPolicy",
    "learning_rate": 1e-4,
    "buffer_size": 100_000,
    "learning_starts": 1000,
    "batch_size": 128,
    "tau": 1.0,
    "gamma": 0.99,
    "train_freq": 4,
    "gradient_steps": 1,
    "target_update_interval": 1000,
    "exploration_fraction": 0.1,
    "exploration_initial_eps": 1.0,
    "exploration_final_eps": 0.05,
    "verbose": 1,
}

# SAC runs through the MultiDiscrete -> Box wrapper
SAC_CONFIG = {
    "policy": "MlpPolicy",
    "learning_rate": 3e-4,
    "buffer_size": 100_000,
    "learning_starts": 1000,
    "batch_size": 256,
    "tau": 0.005,
    "gamma": 0.99,
    "train_freq": 1,
    "gradient_steps": 1,
    "ent_coef": "auto",
    "target_entropy": "auto",
    "verbose": 1,
}

ALGO_CONFIGS = {
    "ppo": PPO_CONFIG,
    "dqn": DQN_CONFIG,
    "sac": SAC_CONFIG,
}

# ==============================================================================
# TRAINING SETTINGS
# ==============================================================================

TRAINING_CONFIG = {
    "total_timesteps": 500_000,
    "save_freq": 10_000,
    "eval_freq": 5_000,
    "log_dir": "./logs",
    "model_dir": "./models",
    "tensorboard_log": "./tensorboard_logs",
}
