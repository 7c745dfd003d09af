"""Configuration management for the phyloprimer toolkit."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

import yaml

from .exceptions import ConfigurationError
from .primers.search import PrimerSearchEngine


@dataclass
class ToolkitConfig:
    """Toolkit configuration settings."""

    min_sequence_length: int = 5
    desired_tm: float = 60.0
    max_tm_diff: float = 3.0
    pair_count: int = 5
    min_product_length: Optional[int] = None
    min_primer_length: int = 18
    max_primer_length: int = 30
    search_window: int = 2000
    min_gc: float = 40.0
    max_gc: float = 60.0
    checkpoint_interval: int = 100
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.min_sequence_length < 1:
            raise ConfigurationError(
                f"Invalid min_sequence_length: {self.min_sequence_length}",
                parameter="min_sequence_length",
            )

        if self.desired_tm <= 0 or self.desired_tm > 100:
            raise ConfigurationError(f"Invalid desired_tm: {self.desired_tm}", parameter="desired_tm")

        if self.max_tm_diff < 0:
            raise ConfigurationError(f"Invalid max_tm_diff: {self.max_tm_diff}", parameter="max_tm_diff")

        if self.pair_count <= 0:
            raise ConfigurationError(f"Invalid pair_count: {self.pair_count}", parameter="pair_count")

        if self.min_product_length is not None and self.min_product_length < 0:
            raise ConfigurationError(
                f"Invalid min_product_length: {self.min_product_length}",
                parameter="min_product_length",
            )

        if not 0 < self.min_primer_length <= self.max_primer_length:
            raise ConfigurationError(
                f"Invalid primer length range: {self.min_primer_length}-{self.max_primer_length}",
                parameter="min_primer_length",
            )

        if self.search_window <= 0:
            raise ConfigurationError(f"Invalid search_window: {self.search_window}", parameter="search_window")

        if not 0 <= self.min_gc <= self.max_gc <= 100:
            raise ConfigurationError(
                f"Invalid GC range: {self.min_gc}-{self.max_gc}",
                parameter="min_gc",
            )

        if self.checkpoint_interval <= 0:
            raise ConfigurationError(
                f"Invalid checkpoint_interval: {self.checkpoint_interval}",
                parameter="checkpoint_interval",
            )

        if not isinstance(self.log_level, str):
            raise ConfigurationError(f"Invalid log_level: {self.log_level!r}", parameter="log_level")
        self.log_level = self.log_level.upper()
        if self.log_level not in ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigurationError(f"Invalid log_level: {self.log_level}", parameter="log_level")

    @classmethod
    def from_yaml(cls, yaml_file: Path) -> "ToolkitConfig":
        """Load configuration from YAML file."""
        yaml_file = Path(yaml_file)
        if not yaml_file.exists():
            raise ConfigurationError(f"Config file not found: {yaml_file}")

        try:
            with open(yaml_file, 'r') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML config: {e}", config_file=str(yaml_file))

        if not isinstance(data, dict):
            raise ConfigurationError("Expected a mapping at the top level", config_file=str(yaml_file))

        try:
            return cls(**data)
        except TypeError as e:
            raise ConfigurationError(f"Invalid config parameters: {e}", config_file=str(yaml_file))

    @classmethod
    def from_args(cls, args: dict, base: Optional["ToolkitConfig"] = None) -> "ToolkitConfig":
        """Create configuration from command-line arguments.

        Arguments that were not given keep the value from ``base`` (or the
        defaults).
        """
        # Map command-line argument names to config field names
        arg_mapping = {
            'min_length': 'min_sequence_length',
            'tm': 'desired_tm',
            'tm_diff': 'max_tm_diff',
            'pairs': 'pair_count',
            'min_product': 'min_product_length',
            'log_level': 'log_level',
        }

        config_args = asdict(base) if base is not None else {}
        for arg_name, config_name in arg_mapping.items():
            if arg_name in args and args[arg_name] is not None:
                config_args[config_name] = args[arg_name]

        return cls(**config_args)

    def create_engine(self) -> PrimerSearchEngine:
        """Build a primer search engine with these settings."""
        return PrimerSearchEngine(
            min_primer_length=self.min_primer_length,
            max_primer_length=self.max_primer_length,
            search_window=self.search_window,
            min_gc=self.min_gc,
            max_gc=self.max_gc,
            checkpoint_interval=self.checkpoint_interval,
        )
