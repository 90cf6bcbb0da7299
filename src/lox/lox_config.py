"""
Provides `LoxConfig`, the settings shared by the Lox REPL and command line.

Settings:
    prompt (str): Prompt shown by the REPL. Defaults to ">>> ".
    mode (str): What to print for each expression:
        "eval" prints its value, "ast" its prefix rendering, "json" its tree as JSON.
    verbose (bool): Echo tokens and trees before evaluating.

Sources, later ones overriding earlier ones:
    1. Built-in defaults.
    2. A JSON file, either passed explicitly or named by the LOX_CONFIG
       environment variable.
    3. Command-line flags (applied by `lox_cli`).

Example JSON:
    {
        "prompt": "lox> ",
        "mode": "ast",
        "verbose": true
    }
"""

import json
import os
from typing import Any

MODES = ("eval", "ast", "json")
ENV_VAR = "LOX_CONFIG"


class ConfigError(Exception):
    """Raised when a configuration source is unreadable or invalid.

    Attributes:
        problems (list[str]): One entry per rejected key or value.
    """

    def __init__(self, message: str, problems: list[str] | None = None):
        super().__init__(message)
        self.problems = problems or []


class LoxConfig:
    """Holds REPL and CLI settings.

    Attributes:
        prompt (str): REPL prompt.
        mode (str): One of `MODES`.
        verbose (bool): Whether to echo tokens and trees.
    """

    def __init__(
        self, prompt: str = ">>> ", mode: str = "eval", verbose: bool = False
    ) -> None:
        self.prompt = prompt
        self.mode = mode
        self.verbose = verbose
        self.configure({"prompt": prompt, "mode": mode, "verbose": verbose})

    def __repr__(self) -> str:
        return (
            f"LoxConfig(prompt={self.prompt!r}, mode={self.mode!r}, "
            f"verbose={self.verbose!r})"
        )

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, LoxConfig)
            and self.prompt == other.prompt
            and self.mode == other.mode
            and self.verbose == other.verbose
        )

    def configure(self, mapping: dict[str, Any]) -> None:
        """Validates and applies a partial settings mapping.

        Nothing is applied unless every key and value is valid.

        Raises:
            ConfigError: Listing every unknown key or badly typed value.
        """
        problems: list[str] = []
        for key, value in mapping.items():
            if key == "prompt":
                if not isinstance(value, str):
                    problems.append(f"'prompt' must be a string, got {value!r}")
            elif key == "mode":
                if value not in MODES:
                    problems.append(f"'mode' must be one of {MODES}, got {value!r}")
            elif key == "verbose":
                if not isinstance(value, bool):
                    problems.append(f"'verbose' must be a boolean, got {value!r}")
            else:
                problems.append(f"unknown setting {key!r}")
        if problems:
            raise ConfigError("Invalid configuration", problems)

        for key, value in mapping.items():
            setattr(self, key, value)

    def summary(self) -> dict[str, Any]:
        return {"prompt": self.prompt, "mode": self.mode, "verbose": self.verbose}

    @classmethod
    def from_json(cls, path: str) -> "LoxConfig":
        """
        Loads settings from a JSON file on top of the defaults.

        Raises:
            ConfigError: If the file cannot be read, is not a JSON object, or
                holds invalid settings.
        """
        try:
            with open(path, encoding="utf-8") as f:
                raw_cfg = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to load config from {path}: {e}") from e

        if not isinstance(raw_cfg, dict):
            raise ConfigError(f"Config file {path} must contain a JSON object")

        config = cls()
        config.configure(raw_cfg)
        return config

    @classmethod
    def from_env(cls) -> "LoxConfig":
        """Loads the file named by LOX_CONFIG, or returns the defaults when unset."""
        path = os.getenv(ENV_VAR)
        if not path:
            return cls()
        return cls.from_json(path)


__all__ = ["ConfigError", "ENV_VAR", "LoxConfig", "MODES"]
