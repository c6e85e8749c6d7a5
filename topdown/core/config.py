"""
Configuration management for the top-down pose pipeline

Central configuration system supporting:
- Dataclass-based configs
- YAML file loading
- Environment variable overrides
"""

import os
import yaml
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import List, Optional, Dict, Any, Tuple

from .constants import (
    INPUT_WIDTH,
    INPUT_HEIGHT,
    HEATMAP_WIDTH,
    HEATMAP_HEIGHT,
    PIXEL_STD,
    PADDING,
    IMAGENET_MEAN,
    IMAGENET_STD,
    KEYPOINT_SCHEMAS,
)
from .exceptions import ConfigError


@dataclass
class PreprocessConfig:
    """Configuration for crop, resize and normalization"""
    input_width: int = INPUT_WIDTH
    input_height: int = INPUT_HEIGHT
    pixel_std: float = PIXEL_STD
    padding: float = PADDING
    mean: Tuple[float, float, float] = IMAGENET_MEAN
    std: Tuple[float, float, float] = IMAGENET_STD

    def __post_init__(self):
        """Validate configuration"""
        if self.input_width < 1 or self.input_height < 1:
            raise ConfigError("input_width and input_height must be >= 1")
        if self.pixel_std <= 0:
            raise ConfigError("pixel_std must be > 0")
        if self.padding <= 0:
            raise ConfigError("padding must be > 0")
        self.mean = tuple(float(m) for m in self.mean)
        self.std = tuple(float(s) for s in self.std)
        if len(self.mean) != 3 or len(self.std) != 3:
            raise ConfigError("mean and std must have exactly 3 values (R, G, B)")
        if any(s <= 0 for s in self.std):
            raise ConfigError("std values must be > 0")

    @property
    def aspect_ratio(self) -> float:
        """Target width / height of the network input"""
        return self.input_width / self.input_height


@dataclass
class DecodeConfig:
    """Configuration for heatmap decoding"""
    heatmap_width: int = HEATMAP_WIDTH
    heatmap_height: int = HEATMAP_HEIGHT
    num_keypoints: int = 17
    keypoint_schema: str = "coco"  # coco, guru

    def __post_init__(self):
        """Validate configuration"""
        if self.heatmap_width < 1 or self.heatmap_height < 1:
            raise ConfigError("heatmap_width and heatmap_height must be >= 1")
        if self.num_keypoints < 1:
            raise ConfigError("num_keypoints must be >= 1")
        if self.keypoint_schema not in KEYPOINT_SCHEMAS:
            raise ConfigError(
                f"keypoint_schema must be one of {list(KEYPOINT_SCHEMAS)}"
            )
        schema_size = len(KEYPOINT_SCHEMAS[self.keypoint_schema])
        if self.num_keypoints != schema_size:
            raise ConfigError(
                f"num_keypoints={self.num_keypoints} does not match the "
                f"{self.keypoint_schema!r} joint table ({schema_size} joints)"
            )

    @property
    def joint_names(self) -> List[str]:
        """Joint names for the configured schema"""
        return KEYPOINT_SCHEMAS[self.keypoint_schema]


@dataclass
class SessionConfig:
    """Configuration for the ONNX inference session"""
    model_path: str = "vipnas.onnx"
    providers: List[str] = field(default_factory=lambda: ["CPUExecutionProvider"])
    intra_op_num_threads: int = 0  # 0 = runtime default
    input_name: str = "input"
    output_name: str = "output"

    def __post_init__(self):
        """Validate configuration"""
        if self.intra_op_num_threads < 0:
            raise ConfigError("intra_op_num_threads must be >= 0")


@dataclass
class TopDownConfig:
    """Master configuration class combining all subconfigs"""
    preprocess: PreprocessConfig = field(default_factory=PreprocessConfig)
    decode: DecodeConfig = field(default_factory=DecodeConfig)
    session: SessionConfig = field(default_factory=SessionConfig)

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "TopDownConfig":
        """
        Load configuration from YAML file

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            TopDownConfig instance

        Raises:
            FileNotFoundError: If YAML file not found
            ConfigError: If YAML format or a value is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        try:
            with open(yaml_path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML format in {yaml_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Top-level YAML in {yaml_path} must be a mapping")

        try:
            return cls(
                preprocess=PreprocessConfig(**data.get('preprocess', {})),
                decode=DecodeConfig(**data.get('decode', {})),
                session=SessionConfig(**data.get('session', {})),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(
                f"Unknown configuration key or wrong value type in {yaml_path}: {e}"
            )

    @classmethod
    def from_env(cls, base_config: Optional["TopDownConfig"] = None) -> "TopDownConfig":
        """
        Create config from environment variables

        Supports environment variables:
        - TOPDOWN_INPUT_WIDTH
        - TOPDOWN_INPUT_HEIGHT
        - TOPDOWN_PADDING
        - TOPDOWN_MODEL_PATH
        - TOPDOWN_NUM_THREADS
        - TOPDOWN_KEYPOINT_SCHEMA (also sets num_keypoints to the schema size)

        Args:
            base_config: Base configuration to override (default: new config)

        Returns:
            TopDownConfig instance with environment overrides
        """
        config = cls() if base_config is None else base_config

        try:
            preprocess = asdict(config.preprocess)
            if 'TOPDOWN_INPUT_WIDTH' in os.environ:
                preprocess['input_width'] = int(os.environ['TOPDOWN_INPUT_WIDTH'])
            if 'TOPDOWN_INPUT_HEIGHT' in os.environ:
                preprocess['input_height'] = int(os.environ['TOPDOWN_INPUT_HEIGHT'])
            if 'TOPDOWN_PADDING' in os.environ:
                preprocess['padding'] = float(os.environ['TOPDOWN_PADDING'])

            decode = asdict(config.decode)
            if 'TOPDOWN_KEYPOINT_SCHEMA' in os.environ:
                schema = os.environ['TOPDOWN_KEYPOINT_SCHEMA']
                if schema not in KEYPOINT_SCHEMAS:
                    raise ConfigError(
                        f"TOPDOWN_KEYPOINT_SCHEMA must be one of {list(KEYPOINT_SCHEMAS)}"
                    )
                # The joint count follows the schema's joint table
                decode['keypoint_schema'] = schema
                decode['num_keypoints'] = len(KEYPOINT_SCHEMAS[schema])

            session = asdict(config.session)
            if 'TOPDOWN_MODEL_PATH' in os.environ:
                session['model_path'] = os.environ['TOPDOWN_MODEL_PATH']
            if 'TOPDOWN_NUM_THREADS' in os.environ:
                session['intra_op_num_threads'] = int(os.environ['TOPDOWN_NUM_THREADS'])
        except ValueError as e:
            raise ConfigError(f"Invalid environment override: {e}")

        # Rebuild so every override goes through __post_init__ validation
        return cls(
            preprocess=PreprocessConfig(**preprocess),
            decode=DecodeConfig(**decode),
            session=SessionConfig(**session),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary"""
        data = asdict(self)
        data['preprocess']['mean'] = list(self.preprocess.mean)
        data['preprocess']['std'] = list(self.preprocess.std)
        return data

    def to_yaml(self, yaml_path: str) -> None:
        """
        Save configuration to YAML file

        Args:
            yaml_path: Path to save YAML configuration
        """
        yaml_path = Path(yaml_path)
        yaml_path.parent.mkdir(parents=True, exist_ok=True)

        with open(yaml_path, 'w') as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def __str__(self) -> str:
        """String representation of config"""
        return yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False)
