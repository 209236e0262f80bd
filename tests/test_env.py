import numpy as np
import pytest
from gymnasium.utils.env_checker import check_env

from shooter import ShooterEnv
from shooter.entities import Enemy
from rl.wrappers import MultiDiscreteToBoxWrapper, MultiDiscreteToDiscreteWrapper

STAY, UP, DOWN, LEFT, RIGHT = range(5)


@pytest.mark.parametrize("rules", ["health", "shield"])
def test_env_passes_gymnasium_checks(rules):
    check_env(ShooterEnv(rules=rules))


def test_reset_observation():
    env = ShooterEnv(k_enemies=3)
    obs, info = env.reset(seed=0)
    assert obs.shape == (8 + 3 * 4,)
    assert obs.dtype == np.float32
    assert env.observation_space.contains(obs)
    assert info["score"] == 0
    assert info["health"] == 100


def test_fire_respects_cooldown():
    env = ShooterEnv(shoot_cooldown_steps=3)
    env.reset(seed=0)
    _, _, _, _, info = env.step([STAY, 1, 0])
    assert info["shots_fired"] == 1
    _, _, _, _, info = env.step([STAY, 1, 0])
    assert info["shots_fired"] == 1
    for _ in range(3):
        _, _, _, _, info = env.step([STAY, 1, 0])
    assert info["shots_fired"] == 2


def test_moving_right():
    env = ShooterEnv()
    env.reset(seed=0)
    _, _, _, _, _ = env.step([RIGHT, 0, 0])
    assert env.state.player.x == 380


def test_leak_terminates_shield_game():
    env = ShooterEnv(rules="shield")
    env.reset(seed=0)
    env.state.enemies.append(Enemy(x=0, y=599, width=30, height=30, speed=3, color="yellow"))
    _, reward, terminated, truncated, info = env.step([STAY, 0, 0])
    assert terminated and not truncated
    assert info["game_over"]
    assert reward < -env.rewards["R_DEATH"] + 0.01


def test_shield_action():
    env = ShooterEnv(rules="shield")
    env.reset(seed=0)
    obs, _, _, _, info = env.step([STAY, 0, 1])
    assert info["shield"] == "active"
    assert obs[5] == 1.0


def test_truncation():
    env = ShooterEnv(max_steps=5)
    env.reset(seed=0)
    for _ in range(4):
        _, _, terminated, truncated, _ = env.step([STAY, 0, 0])
        assert not (terminated or truncated)
    _, _, terminated, truncated, _ = env.step([STAY, 0, 0])
    assert truncated and not terminated


def test_same_seed_same_trajectory():
    def rollout():
        env = ShooterEnv(rules="shield")
        env.reset(seed=5)
        env.action_space.seed(5)
        observations = []
        for _ in range(300):
            obs, _, terminated, truncated, _ = env.step(env.action_space.sample())
            observations.append(obs)
            if terminated or truncated:
                break
        return np.stack(observations)

    np.testing.assert_array_equal(rollout(), rollout())


def test_rgb_array_render():
    env = ShooterEnv(render_mode="rgb_array")
    env.reset(seed=0)
    frame = env.render()
    assert frame.shape == (600, 800, 3)


def test_reward_config_overrides_defaults():
    env = ShooterEnv(reward_config={"name": "custom", "R_DEATH": 42.0})
    assert env.rewards["R_DEATH"] == 42.0
    assert "name" not in env.rewards


def test_discrete_wrapper_decodes_flat_actions():
    env = MultiDiscreteToDiscreteWrapper(ShooterEnv())
    assert env.action_space.n == 20
    assert list(env.action(0)) == [0, 0, 0]
    assert list(env.action(7)) == [1, 1, 1]
    assert list(env.action(19)) == [4, 1, 1]


def test_box_wrapper_discretizes_continuous_actions():
    env = MultiDiscreteToBoxWrapper(ShooterEnv())
    assert env.action_space.shape == (3,)
    assert list(env.action(np.array([-1.0, -1.0, -1.0]))) == [0, 0, 0]
    assert list(env.action(np.array([1.0, 1.0, 1.0]))) == [4, 1, 1]
