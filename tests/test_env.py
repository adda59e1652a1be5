import gymnasium as gym
import numpy as np

import color_lines_rl.env  # noqa: F401
from color_lines_rl.env.color_lines_env import ColorLinesEnv
from color_lines_rl.env.wrappers import FlattenDiscreteActionWrapper, ResampleInvalidActionWrapper


def test_reset_observation_and_mask():
    env = ColorLinesEnv()
    obs, info = env.reset(seed=0)
    assert obs["grid"].shape == (9, 9)
    assert int(np.count_nonzero(obs["grid"])) == 3
    assert obs["next_colors"].shape == (3,)
    assert env.observation_space.contains(obs)
    mask = info["action_mask"]
    assert mask.shape == (9, 9, 9, 9)
    assert int(mask.sum()) == len(info["valid_actions"])
    for fr, fc, tr, tc in info["valid_actions"]:
        assert obs["grid"][fr, fc] != 0
        assert obs["grid"][tr, tc] == 0


def test_valid_step_moves_a_marker():
    env = ColorLinesEnv()
    obs, info = env.reset(seed=1)
    fr, fc, tr, tc = info["valid_actions"][0]
    color = obs["grid"][fr, fc]
    obs, reward, terminated, truncated, info = env.step((fr, fc, tr, tc))
    assert "invalid" not in info["reward_components"]
    assert info["outcome"]["moved"]
    assert obs["grid"][tr, tc] == color
    assert not terminated and not truncated


def test_invalid_step_is_penalized_without_change():
    env = ColorLinesEnv(invalid_action_penalty=-0.5)
    obs, _ = env.reset(seed=2)
    empty = np.argwhere(obs["grid"] == 0)
    (r1, c1), (r2, c2) = empty[0], empty[1]
    new_obs, reward, terminated, _, info = env.step((r1, c1, r2, c2))
    assert reward == -0.5
    assert np.array_equal(new_obs["grid"], obs["grid"])
    assert not terminated


def test_registered_env_runs():
    env = gym.make("ColorLines-9x9-v0")
    obs, info = env.reset(seed=3)
    obs, reward, terminated, truncated, info = env.step(info["valid_actions"][0])
    assert "score" in info
    env.close()


def test_rgb_render():
    env = ColorLinesEnv(render_mode="rgb_array")
    env.reset(seed=4)
    img = env.render()
    assert img.shape == (9 * 12, 9 * 12, 3)
    assert img.dtype == np.uint8


def test_flatten_wrapper_roundtrips_index_order():
    env = FlattenDiscreteActionWrapper(ColorLinesEnv())
    _, info = env.reset(seed=5)
    assert env.action_space.n == 9 ** 4
    move = info["valid_actions"][0]
    idx = int(np.ravel_multi_index(move, (9, 9, 9, 9)))
    assert tuple(env.action(idx)) == move
    mask = env.get_action_mask()
    assert mask.shape == (9 ** 4,)
    assert mask[idx]


def test_resample_wrapper_replaces_invalid_actions():
    env = ResampleInvalidActionWrapper(FlattenDiscreteActionWrapper(ColorLinesEnv()))
    env.reset(seed=6)
    mask = env.get_action_mask()
    invalid = int(np.flatnonzero(~mask)[0])
    _, _, _, _, info = env.step(invalid)
    assert "invalid" not in info["reward_components"]


def test_info_mask_and_valid_actions_agree_after_steps():
    env = ColorLinesEnv()
    _, info = env.reset(seed=7)
    for _ in range(5):
        mask = info["action_mask"]
        assert set(map(tuple, np.argwhere(mask))) == set(info["valid_actions"])
        _, _, terminated, _, info = env.step(info["valid_actions"][-1])
        if terminated:
            break
