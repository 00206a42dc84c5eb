"""
Configuration management for DataCurator.

Holds default split and k-fold settings, loaded from YAML.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from datacurator.exceptions import ConfigFileError
from datacurator.splitting.kfold import KFoldConfig
from datacurator.splitting.strategies import SplitConfig


@dataclass
class SplitDefaults:
    """Default percentage split settings."""

    train_percent: float = 70.0
    val_percent: float = 20.0
    test_percent: float = 10.0
    train_name: str = "training"
    val_name: str = "validation"
    test_name: str = "test"
    shuffle: bool = True
    stratify_by: str | None = None


@dataclass
class KFoldDefaults:
    """Default k-fold settings."""

    folds: int = 5
    prefix: str = "fold"
    shuffle: bool = True
    stratify_by: str | None = None


@dataclass
class CuratorConfig:
    """
    Main configuration for DataCurator.

    Attributes:
        split: Defaults for percentage splits
        kfold: Defaults for k-fold generation
        seed: Fixed random seed; None draws a fresh seed per operation
        verbose: Enable verbose output
    """

    split: SplitDefaults = field(default_factory=SplitDefaults)
    kfold: KFoldDefaults = field(default_factory=KFoldDefaults)
    seed: int | None = None
    verbose: bool = False

    @classmethod
    def from_yaml(cls, path: Path | str) -> CuratorConfig:
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            return cls()

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigFileError(str(path), str(e)) from e

        if not isinstance(data, dict):
            raise ConfigFileError(str(path), "top level must be a mapping")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CuratorConfig:
        """Create configuration from a dictionary."""
        split_data = data.get("split", {}) or {}
        split = SplitDefaults(
            train_percent=float(split_data.get("train_percent", 70.0)),
            val_percent=float(split_data.get("val_percent", 20.0)),
            test_percent=float(split_data.get("test_percent", 10.0)),
            train_name=split_data.get("train_name", "training"),
            val_name=split_data.get("val_name", "validation"),
            test_name=split_data.get("test_name", "test"),
            shuffle=bool(split_data.get("shuffle", True)),
            stratify_by=split_data.get("stratify_by"),
        )

        kfold_data = data.get("kfold", {}) or {}
        kfold = KFoldDefaults(
            folds=int(kfold_data.get("folds", 5)),
            prefix=kfold_data.get("prefix", "fold"),
            shuffle=bool(kfold_data.get("shuffle", True)),
            stratify_by=kfold_data.get("stratify_by"),
        )

        return cls(
            split=split,
            kfold=kfold,
            seed=data.get("seed"),
            verbose=data.get("verbose", False),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "split": {
                "train_percent": self.split.train_percent,
                "val_percent": self.split.val_percent,
                "test_percent": self.split.test_percent,
                "train_name": self.split.train_name,
                "val_name": self.split.val_name,
                "test_name": self.split.test_name,
                "shuffle": self.split.shuffle,
                "stratify_by": self.split.stratify_by,
            },
            "kfold": {
                "folds": self.kfold.folds,
                "prefix": self.kfold.prefix,
                "shuffle": self.kfold.shuffle,
                "stratify_by": self.kfold.stratify_by,
            },
            "seed": self.seed,
            "verbose": self.verbose,
        }

    def to_yaml(self) -> str:
        """Export configuration to YAML string."""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def split_config(self, **overrides: Any) -> SplitConfig:
        """Build a SplitConfig from the defaults, with optional overrides."""
        values: dict[str, Any] = {
            "train_percent": self.split.train_percent,
            "val_percent": self.split.val_percent,
            "test_percent": self.split.test_percent,
            "train_name": self.split.train_name,
            "val_name": self.split.val_name,
            "test_name": self.split.test_name,
            "shuffle": self.split.shuffle,
            "stratify_by": self.split.stratify_by,
            "seed": self.seed,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return SplitConfig(**values)

    def kfold_config(self, **overrides: Any) -> KFoldConfig:
        """Build a KFoldConfig from the defaults, with optional overrides."""
        values: dict[str, Any] = {
            "folds": self.kfold.folds,
            "prefix": self.kfold.prefix,
            "shuffle": self.kfold.shuffle,
            "stratify_by": self.kfold.stratify_by,
            "seed": self.seed,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return KFoldConfig(**values)

    @classmethod
    def default_config_path(cls) -> Path:
        """Get the default configuration file path."""
        # Check for config in current directory first
        local_config = Path.cwd() / "datacurator.yaml"
        if local_config.exists():
            return local_config

        return Path.home() / ".datacurator" / "config.yaml"

    @classmethod
    def load_default(cls) -> CuratorConfig:
        """Load configuration from default location."""
        return cls.from_yaml(cls.default_config_path())
