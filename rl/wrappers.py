"""
Action-space wrappers so algorithms without MultiDiscrete support can
drive ShooterEnv.
"""

import numpy as np
import gymnasium as gym
from gymnasium import spaces


class MultiDiscreteToBoxWrapper(gym.ActionWrapper):
    """
    Wrapper to convert MultiDiscrete action space to Box for SAC.
    SAC outputs continuous actions which are then discretized.
    """

    def __init__(self, env):
        super().__init__(env)
        self._nvec = env.action_space.nvec
        self.n_actions = len(self._nvec)
        self.action_space = spaces.Box(
            low=-1.0,
            high=1.0,
            shape=(self.n_actions,),
            dtype=np.float32
        )

    def action(self, action):
        """Map each component of [-1, 1] onto [0, n-1]"""
        discrete_action = []
        for a, n in zip(action, self._nvec):
            scaled = (a + 1) / 2
            idx = int(np.clip(scaled * n, 0, n - 1))
            discrete_action.append(idx)
        return np.array(discrete_action, dtype=np.int64)


class MultiDiscreteToDiscreteWrapper(gym.ActionWrapper):
    """
    Wrapper to convert MultiDiscrete action space to Discrete for DQN.
    Flattens MultiDiscrete([5, 2, 2]) to Discrete(20).
    """

    def __init__(self, env):
        super().__init__(env)
        self._nvec = env.action_space.nvec
        self.n_total = int(np.prod(self._nvec))
        self.action_space = spaces.Discrete(self.n_total)

    def action(self, action):
        """Decode a flat index into one index per sub-action"""
        indices = []
        remaining = int(action)
        for n in reversed(self._nvec):
            indices.append(remaining % n)
            remaining //= n
        return np.array(list(reversed(indices)), dtype=np.int64)
