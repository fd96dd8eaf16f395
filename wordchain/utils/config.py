#!/usr/bin/env python3
"""
Chain Configuration Module

Loads the settings a Chain is built from (context depth, case folding, output
length cap and random seed) from YAML files in the project's ``configs``
directory. An environment-specific file (``chain_<environment>.yaml``) wins
over the shared ``chain.yaml``; anything missing falls back to built-in
defaults.
"""

import os
import logging

import yaml

DEFAULTS = {
    "max_depth": 2,
    "ignore_case": False,
    "max_length": 100,
    "seed": None,
}


class ChainConfig:
    """
    Immutable-by-convention bag of Chain construction settings.
    """

    def __init__(self, max_depth=DEFAULTS["max_depth"], ignore_case=DEFAULTS["ignore_case"],
                 max_length=DEFAULTS["max_length"], seed=DEFAULTS["seed"], source=None):
        if not isinstance(ignore_case, bool):
            raise ValueError(f"ignore_case must be true or false, got {ignore_case!r}")

        self.max_depth = int(max_depth)
        self.ignore_case = ignore_case
        self.max_length = int(max_length)
        self.seed = seed
        self.source = source

    @classmethod
    def from_dict(cls, values, source=None):
        """
        Build a config from a mapping. Unknown keys and keys left empty
        (None) are ignored, so the defaults apply to them.

        Args:
            values (dict): Raw configuration values
            source (str, optional): Where the values came from

        Returns:
            ChainConfig: The resulting configuration
        """
        merged = dict(DEFAULTS)
        merged.update({k: v for k, v in (values or {}).items() if k in DEFAULTS and v is not None})
        return cls(source=source, **merged)

    def merged_with(self, **overrides):
        """Return a copy with every non-None override applied."""
        values = self.to_dict()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ChainConfig(source=self.source, **values)

    def to_dict(self):
        return {
            "max_depth": self.max_depth,
            "ignore_case": self.ignore_case,
            "max_length": self.max_length,
            "seed": self.seed,
        }

    def __repr__(self):
        return f"ChainConfig({self.to_dict()!r}, source={self.source!r})"


def find_config_dir(start_dir=None):
    """
    Walk up from ``start_dir`` until a ``configs`` directory is found.

    Args:
        start_dir (str, optional): Directory to start from (defaults to this module's)

    Returns:
        str or None: Absolute path to the configs directory, or None
    """
    current = os.path.abspath(start_dir or os.path.dirname(os.path.abspath(__file__)))

    while True:
        candidate = os.path.join(current, "configs")
        if os.path.isdir(candidate):
            return candidate
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent


def _read_yaml(path, logger):
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Error loading chain config from {path}: {e}")
        return None

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Chain config at {path} is not a mapping, ignoring it")
        return None
    return data


def load_chain_config(environment="development", config_path=None, config_dir=None, logger=None):
    """
    Load the chain configuration for an environment.

    Args:
        environment (str): Environment name ('development', 'test', 'production')
        config_path (str, optional): Explicit YAML file, skips discovery
        config_dir (str, optional): Directory holding chain*.yaml files
        logger (logging.Logger, optional): Logger for config events

    Returns:
        ChainConfig: Loaded configuration (defaults when nothing is found)
    """
    logger = logger or logging.getLogger(__name__)

    if config_path is not None:
        candidates = [config_path]
    else:
        config_dir = config_dir or find_config_dir()
        if config_dir is None:
            logger.info("No configs directory found, using default chain config")
            return ChainConfig.from_dict({})
        candidates = [
            os.path.join(config_dir, f"chain_{environment}.yaml"),
            os.path.join(config_dir, "chain.yaml"),
        ]

    for path in candidates:
        if not os.path.exists(path):
            continue
        values = _read_yaml(path, logger)
        if values is None:
            continue
        try:
            config = ChainConfig.from_dict(values, source=path)
        except (TypeError, ValueError) as e:
            logger.warning(f"Invalid chain config values in {path}: {e}")
            continue

        logger.info("Chain config loaded", extra={
            "metrics": {
                "config_path": path,
                "environment": environment,
            }
        })
        return config

    logger.info("No chain config file found, using defaults", extra={
        "metrics": {"environment": environment}
    })
    return ChainConfig.from_dict({})
