"""Gymnasium environments for Falling Blocks."""

from __future__ import annotations

from gymnasium.envs.registration import register

from .falling_blocks_env import ACTIONS, FallingBlocksEnv

# Register the default 10x20 environment
register(
    id="FallingBlocks-10x20-v0",
    entry_point="falling_blocks.env.falling_blocks_env:FallingBlocksEnv",
)

__all__ = ["ACTIONS", "FallingBlocksEnv"]
