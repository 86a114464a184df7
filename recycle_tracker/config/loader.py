"""
Configuration management and loading.

Handles tracker settings loaded from a YAML file.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from ..core.impact import DEFAULT_IMPACT_WEIGHT, IMPACT_RULES, ImpactRule, contains
from ..storage.db import DEFAULT_DB_PATH

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class StatsConfig:
    """Statistics and impact scoring settings."""
    recent_limit: int = 20
    default_weight: Decimal = DEFAULT_IMPACT_WEIGHT
    impact_rules: Tuple[ImpactRule, ...] = IMPACT_RULES

    def __post_init__(self):
        """Validate values are non-negative."""
        if self.recent_limit <= 0:
            raise ValueError("recent_limit must be > 0")
        if self.default_weight < 0:
            raise ValueError("default_weight cannot be negative")


@dataclass(frozen=True)
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    log_dir: Optional[str] = None

    def __post_init__(self):
        """Validate level name."""
        if self.level not in VALID_LOG_LEVELS:
            raise ValueError(f"logging level must be one of: {sorted(VALID_LOG_LEVELS)}")


@dataclass(frozen=True)
class TrackerConfig:
    """Complete tracker configuration."""
    db_path: str = DEFAULT_DB_PATH
    require_known_user: bool = True
    leaderboard_limit: int = 10
    stats: StatsConfig = field(default_factory=StatsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        """Validate leaderboard limit is positive."""
        if self.leaderboard_limit <= 0:
            raise ValueError("leaderboard limit must be > 0")


def default_config() -> TrackerConfig:
    """Configuration used when no file is given."""
    return TrackerConfig()


def load_tracker_config(path: str) -> TrackerConfig:
    """Load and validate tracker configuration from YAML file.

    Strict validation ensures no silent misconfigurations, e.g. a typo in
    an impact rule key silently falling back to the default weight.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated TrackerConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Tracker config file not found: {path}")

    # Load YAML content
    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if raw_config is None:
        return default_config()
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a dictionary")

    # Validate top-level structure
    allowed_top_keys = {'storage', 'ledger', 'stats', 'leaderboard', 'logging'}
    unknown_keys = set(raw_config.keys()) - allowed_top_keys
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")

    storage = _section(raw_config, 'storage', {'db_path'})
    ledger = _section(raw_config, 'ledger', {'require_known_user'})
    stats = _section(raw_config, 'stats', {'recent_limit', 'default_weight', 'impact_rules'})
    leaderboard = _section(raw_config, 'leaderboard', {'limit'})
    logging_data = _section(raw_config, 'logging', {'level', 'log_dir'})

    db_path = storage.get('db_path', DEFAULT_DB_PATH)
    if not isinstance(db_path, str) or not db_path:
        raise ValueError("'storage.db_path' must be a non-empty string")

    require_known_user = ledger.get('require_known_user', True)
    if not isinstance(require_known_user, bool):
        raise ValueError("'ledger.require_known_user' must be true or false")

    leaderboard_limit = _positive_int(leaderboard.get('limit', 10), 'leaderboard.limit')

    stats_config = StatsConfig(
        recent_limit=_positive_int(stats.get('recent_limit', 20), 'stats.recent_limit'),
        default_weight=_weight(stats.get('default_weight', DEFAULT_IMPACT_WEIGHT), 'stats.default_weight'),
        impact_rules=_parse_impact_rules(stats['impact_rules']) if 'impact_rules' in stats else IMPACT_RULES,
    )

    level = logging_data.get('level', 'INFO')
    if not isinstance(level, str):
        raise ValueError("'logging.level' must be a string")
    log_dir = logging_data.get('log_dir')
    if log_dir is not None and not isinstance(log_dir, str):
        raise ValueError("'logging.log_dir' must be a string")

    return TrackerConfig(
        db_path=db_path,
        require_known_user=require_known_user,
        leaderboard_limit=leaderboard_limit,
        stats=stats_config,
        logging=LoggingConfig(level=level.upper(), log_dir=log_dir),
    )


def _section(raw_config: Dict, name: str, allowed_keys: set) -> Dict[str, Any]:
    """Return a validated sub-dictionary (empty if the section is absent)."""
    data = raw_config.get(name)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"'{name}' must be a dictionary")
    unknown_keys = set(data.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown {name} keys: {unknown_keys}")
    return data


def _positive_int(value: Any, path: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"'{path}' must be an integer > 0")
    return value


def _weight(value: Any, path: str) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise ValueError(f"'{path}' must be a number")
    try:
        weight = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"'{path}' must be a number")
    if not weight.is_finite() or weight < 0:
        raise ValueError(f"'{path}' must be >= 0")
    return weight


def _parse_impact_rules(data: Any) -> Tuple[ImpactRule, ...]:
    """Parse the ordered impact rule list.

    Args:
        data: List of {contains, weight} mappings, in priority order

    Returns:
        Tuple of ImpactRule in the same order

    Raises:
        ValueError: If the list or any rule is invalid
    """
    if not isinstance(data, list):
        raise ValueError("'stats.impact_rules' must be a list")

    rules = []
    for index, rule_data in enumerate(data):
        path = f"stats.impact_rules[{index}]"
        if not isinstance(rule_data, dict):
            raise ValueError(f"'{path}' must be a dictionary")

        allowed_keys = {'contains', 'weight'}
        unknown_keys = set(rule_data.keys()) - allowed_keys
        if unknown_keys:
            raise ValueError(f"Unknown keys in {path}: {unknown_keys}")

        keyword = rule_data.get('contains')
        if not isinstance(keyword, str) or not keyword.strip():
            raise ValueError(f"Missing required 'contains' in {path}")
        if 'weight' not in rule_data:
            raise ValueError(f"Missing required 'weight' in {path}")

        rules.append(contains(keyword.strip(), _weight(rule_data['weight'], f"{path}.weight")))

    return tuple(rules)
