"""Processor configuration.

Settings can be passed as keyword arguments, as a mapping, or loaded from a YAML file.
A YAML file may hold the settings at top level or under a ``processor:`` section:

    processor:
      strict: true
      parallel: true
      max_workers: 4
"""

import logging
import os
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessorConfig:
    """Options controlling how a join tree is processed.

    Attributes:
        strict: Fail instead of silently skipping. Unknown projection names raise
            UnknownAttributeError instead of being dropped.
        reduce: Run the bottom-up and top-down semi-join passes before joining.
        parallel: Process independent subtrees of the bottom-up and join phases on a
            thread pool, one tree level at a time.
        max_workers: Thread pool size when ``parallel`` is set; None lets
            ``concurrent.futures`` pick.
        in_place: Reassign the relations of the caller's tree. By default the
            processor works on a copy and the input tree is left untouched, even
            when a later phase fails.
    """

    strict: bool = False
    reduce: bool = True
    parallel: bool = False
    max_workers: Optional[int] = None
    in_place: bool = False

    def __post_init__(self):
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProcessorConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown processor config keys: {unknown}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: str) -> "ProcessorConfig":
        """Load settings from a YAML file.

        Raises:
            FileNotFoundError: If ``path`` does not exist
            ValueError: If the file holds something other than a mapping, or unknown keys
        """
        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file {path} not found")

        with open(path, "r") as f:
            data = yaml.safe_load(f)

        if not data:
            logger.warning(f"Empty config file {path}. Using default configuration.")
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")

        section = data.get("processor", data)
        if not isinstance(section, dict):
            raise ValueError(f"'processor' section in {path} must be a mapping")

        config = cls.from_dict(section)
        logger.info(f"Loaded processor configuration from {path}")
        return config
