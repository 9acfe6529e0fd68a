"""Configuration loader with Pydantic validation for the Skew module.

This module provides type-safe configuration loading from YAML files using
Pydantic models for validation and default values.
"""

import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from src.utils.constants import (
    DEFAULT_MIN_REFINEMENT_DELTA,
    DEFAULT_SEARCH_REDUCTION,
    DEFAULT_SWEEP_DELTA,
    DEFAULT_SWEEP_RANGE,
    DEFAULT_SWEEP_REDUCTION,
    MIN_ALLOWED_CONFIDENCE,
    MIN_DESKEW_ANGLE,
    MIN_VALID_MAXSCORE,
    MINSCORE_THRESHOLD_CONSTANT,
    VALID_REDUCTIONS,
)
from src.utils.io import load_yaml

logger = logging.getLogger(__name__)

# Default configuration path (relative to this file)
DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"


class SearchConfig(BaseModel):
    """Angle search configuration.

    Attributes:
        sweep_reduction: Reduction factor of the sweep image (1, 2, 4 or 8)
        search_reduction: Reduction factor of the refinement image
            (1, 2, 4 or 8; must not exceed sweep_reduction)
        sweep_center: Angle about which the sweep is performed (degrees)
        sweep_range: Half the full sweep range, about sweep_center (degrees)
        sweep_delta: Angle increment of the sweep (degrees)
        min_refinement_delta: Smallest step of the interval halving (degrees)
    """

    sweep_reduction: int = DEFAULT_SWEEP_REDUCTION
    search_reduction: int = DEFAULT_SEARCH_REDUCTION
    sweep_center: float = 0.0
    sweep_range: float = Field(default=DEFAULT_SWEEP_RANGE, gt=0.0)
    sweep_delta: float = Field(default=DEFAULT_SWEEP_DELTA, gt=0.0)
    min_refinement_delta: float = Field(default=DEFAULT_MIN_REFINEMENT_DELTA, gt=0.0)

    @field_validator("sweep_reduction", "search_reduction")
    @classmethod
    def _validate_reduction(cls, v: int) -> int:
        if v not in VALID_REDUCTIONS:
            raise ValueError(f"reduction must be in {{1,2,4,8}}, got {v}")
        return v

    @model_validator(mode="after")
    def _validate_search_not_coarser(self) -> "SearchConfig":
        if self.search_reduction > self.sweep_reduction:
            raise ValueError(
                f"search_reduction ({self.search_reduction}) must not exceed "
                f"sweep_reduction ({self.sweep_reduction})"
            )
        return self

    @property
    def range_left(self) -> float:
        """Lowest swept angle (degrees)."""
        return self.sweep_center - self.sweep_range


class DecisionConfig(BaseModel):
    """Thresholds deciding whether a measured angle is trusted and applied.

    Attributes:
        min_deskew_angle: Smaller angles are left uncorrected (degrees)
        min_allowed_confidence: Minimum confidence required to rotate
        min_valid_max_score: Peak scores below this give zero confidence
        min_score_threshold_constant: Multiplied by width^2 * height of the
            search image to get the minimum meaningful min score
    """

    min_deskew_angle: float = Field(default=MIN_DESKEW_ANGLE, ge=0.0)
    min_allowed_confidence: float = Field(default=MIN_ALLOWED_CONFIDENCE, ge=0.0)
    min_valid_max_score: float = Field(default=MIN_VALID_MAXSCORE, ge=0.0)
    min_score_threshold_constant: float = Field(
        default=MINSCORE_THRESHOLD_CONSTANT, ge=0.0
    )


class ExecutionConfig(BaseModel):
    """Execution configuration.

    Attributes:
        sweep_workers: Worker threads for sweep samples (1 = serial)
    """

    sweep_workers: int = Field(default=1, ge=1)


class DebugConfig(BaseModel):
    """Diagnostic output configuration.

    Attributes:
        log_scores: Log every sample score at DEBUG level
        plot_dir: Directory for score-vs-angle plots (None = no plots)
    """

    log_scores: bool = False
    plot_dir: Optional[Path] = None


class SkewConfig(BaseModel):
    """Complete skew module configuration.

    Attributes:
        search: Angle search parameters
        decision: Confidence and deskew thresholds
        execution: Execution options
        debug: Diagnostic output options
    """

    search: SearchConfig = Field(default_factory=SearchConfig)
    decision: DecisionConfig = Field(default_factory=DecisionConfig)
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    debug: DebugConfig = Field(default_factory=DebugConfig)


def load_config(config_path: Path = DEFAULT_CONFIG_PATH) -> SkewConfig:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated SkewConfig object with all settings

    Raises:
        FileNotFoundError: If config file does not exist
        yaml.YAMLError: If YAML parsing fails
        pydantic.ValidationError: If configuration validation fails

    Example:
        >>> config = load_config(Path("src/skew/config.yaml"))
        >>> print(config.search.sweep_reduction)
        4
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.debug(f"Loading skew config from {config_path}")
    raw_config = load_yaml(config_path) or {}

    config = SkewConfig(**raw_config)
    logger.info("Successfully loaded skew configuration")
    return config


def get_default_config() -> SkewConfig:
    """Get default configuration from bundled config.yaml file.

    Returns:
        SkewConfig object loaded from src/skew/config.yaml

    Example:
        >>> config = get_default_config()
        >>> print(config.decision.min_allowed_confidence)
        3.0
    """
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    else:
        # Fallback to hardcoded defaults if config file is missing
        return SkewConfig()
