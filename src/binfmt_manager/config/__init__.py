"""Configuration — Pydantic models for binfmt-manager settings."""

from __future__ import annotations

import enum
import json
import os
from typing import Any

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field


class FailurePolicy(enum.StrEnum):
    """What a batch command (reload, unregister-all) does when an item fails."""

    ABORT = "abort"  # stop at the first failure and raise it
    CONTINUE = "continue"  # attempt every item, report failures at the end


class ManagerConfig(BaseModel):
    """Top-level binfmt-manager configuration."""

    binfmt_root: str = Field(
        default="/proc/sys/fs/binfmt_misc",
        description="Mount point of the binfmt_misc filesystem",
    )
    config_dir: str = Field(
        default="/etc/binfmt.d", description="Directory of binfmt definition files"
    )
    kernel_module: str = Field(
        default="binfmt_misc",
        description="Kernel module loaded before mounting the filesystem",
    )
    failure_policy: FailurePolicy = Field(
        default=FailurePolicy.ABORT,
        description="Batch behaviour when a single entry fails",
    )
    debug: bool = Field(default=False, description="Report each file during reload")

    @classmethod
    def load(cls, config_path: str | None = None) -> ManagerConfig:
        """Load config from file, env vars, or defaults.

        Priority: env vars > config file > defaults.

        Env vars:
            BINFMT_MANAGER_ROOT            - binfmt_misc mount point
            BINFMT_MANAGER_CONFIG_DIR      - definition directory
            BINFMT_MANAGER_MODULE          - kernel module name
            BINFMT_MANAGER_FAILURE_POLICY  - "abort" or "continue"
            DEBUG                          - any non-empty value enables debug output
        """
        # A .env in the working directory fills in unset variables only.
        load_dotenv(find_dotenv(usecwd=True), override=False)

        config_data: dict[str, Any] = {}

        if config_path and os.path.exists(config_path):
            with open(config_path) as f:
                config_data = json.load(f)

        env_map = {
            "BINFMT_MANAGER_ROOT": "binfmt_root",
            "BINFMT_MANAGER_CONFIG_DIR": "config_dir",
            "BINFMT_MANAGER_MODULE": "kernel_module",
        }
        for env_var, key in env_map.items():
            value = os.environ.get(env_var)
            if value:
                config_data[key] = value

        env_policy = os.environ.get("BINFMT_MANAGER_FAILURE_POLICY")
        if env_policy:
            config_data["failure_policy"] = env_policy.lower()

        if os.environ.get("DEBUG"):
            config_data["debug"] = True

        return cls.model_validate(config_data)
