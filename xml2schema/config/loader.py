import yaml
import os
import re
from dataclasses import dataclass, field
from typing import Optional, Dict, Any

from xml2schema.core.exceptions import ConfigError
from xml2schema.core.naming import STRATEGIES
from xml2schema.models.relations import RelationKind


def _substitute_env_vars(value: Any) -> Any:
    """Substitute ${VAR} patterns with environment variables."""
    if isinstance(value, str):
        pattern = r'\$\{([^}]+)\}'
        matches = re.findall(pattern, value)
        for var_name in matches:
            env_value = os.environ.get(var_name, "")
            value = value.replace(f"${{{var_name}}}", env_value)
        return value
    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_substitute_env_vars(v) for v in value]
    return value


@dataclass
class SourceConfig:
    """Configuration for a source connector."""
    type: str  # Connector type: "local"
    config: Dict[str, Any] = field(default_factory=dict)  # Connector-specific config


@dataclass
class DestinationConfig:
    """Configuration for a destination connector."""
    type: str  # Connector type: "jsonl"
    config: Dict[str, Any] = field(default_factory=dict)  # Connector-specific config


@dataclass
class ScannerConfig:
    """Settings for the structural scan."""
    detect_booleans: bool = False  # Classify true/false leaf text as Boolean


@dataclass
class NamingConfig:
    """How container elements (plural wrappers) are recognised.

    Aliases are consulted first, then the strategy rule.
    """
    strategy: str = "english"  # "english" or "none"
    aliases: Dict[str, str] = field(default_factory=dict)  # plural -> singular


@dataclass
class AnalysisConfig:
    """Which relationships to detect and how many documents to analyse at once."""
    relationships: list[RelationKind] = field(default_factory=lambda: list(RelationKind))
    workers: int = 1


@dataclass
class Config:
    """Main configuration object.

    Every section is optional; a config file with only a source path is
    valid.
    """
    scanner: ScannerConfig = field(default_factory=ScannerConfig)
    naming: NamingConfig = field(default_factory=NamingConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    source: Optional[SourceConfig] = None
    destination: Optional[DestinationConfig] = None

    def get_source_config(self) -> SourceConfig:
        """Get effective source config (configured or the local default)."""
        if self.source:
            return self.source
        return SourceConfig(type="local", config={"path": DEFAULT_SOURCES_PATH})

    def get_destination_config(self) -> DestinationConfig:
        """Get effective destination config (configured or the JSONL default)."""
        if self.destination:
            return self.destination
        return DestinationConfig(type="jsonl", config={"path": DEFAULT_OUTPUT_PATH})


DEFAULT_CONFIG_PATH = "xml2schema.yml"
DEFAULT_SOURCES_PATH = "sources/"
DEFAULT_OUTPUT_PATH = "outputs/schema.jsonl"

DEFAULT_CONFIG = """# xml2schema Configuration

source:
  type: local
  path: sources/

destination:
  type: jsonl
  path: outputs/schema.jsonl

scanner:
  detect_booleans: false

naming:
  strategy: english   # english | none
  aliases: {}         # e.g. people: person

analysis:
  relationships:
    - one_to_many
    - many_to_many
    - hierarchical
  workers: 1
"""


def load_config(path: str = DEFAULT_CONFIG_PATH) -> Config:
    """Loads configuration from a YAML file.

    Args:
        path: Path to the config file

    Returns:
        Parsed Config object

    Raises:
        ConfigError: If config file is missing, invalid YAML, or has invalid values
    """
    if not os.path.exists(path):
        raise ConfigError(
            f"Configuration file not found: {path}\n"
            f"Run 'xml2schema init' to create a new project."
        )

    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML in {path}:\n{e}"
        )

    if data is None:
        raise ConfigError(f"Config file {path} is empty.")

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at the top level.")

    # Substitute environment variables
    data = _substitute_env_vars(data)

    return Config(
        scanner=_parse_scanner(data.get("scanner")),
        naming=_parse_naming(data.get("naming")),
        analysis=_parse_analysis(data.get("analysis")),
        source=_parse_connector_config(data.get("source"), SourceConfig),
        destination=_parse_connector_config(data.get("destination"), DestinationConfig),
    )


def _section(data: Any, name: str) -> dict:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"'{name}' must be a dictionary.")
    return data


def _parse_scanner(data: Any) -> ScannerConfig:
    data = _section(data, "scanner")
    detect_booleans = data.get("detect_booleans", False)
    if not isinstance(detect_booleans, bool):
        raise ConfigError("'scanner.detect_booleans' must be true or false.")
    return ScannerConfig(detect_booleans=detect_booleans)


def _parse_naming(data: Any) -> NamingConfig:
    data = _section(data, "naming")

    strategy = data.get("strategy", "english")
    if strategy not in STRATEGIES:
        valid = ", ".join(sorted(STRATEGIES))
        raise ConfigError(
            f"Invalid naming strategy '{strategy}'. Valid options: {valid}"
        )

    aliases = data.get("aliases") or {}
    if not isinstance(aliases, dict):
        raise ConfigError(
            "'naming.aliases' must map plural names to singular names.\n"
            "Example:\n\n"
            "naming:\n"
            "  aliases:\n"
            "    people: person"
        )

    return NamingConfig(
        strategy=strategy,
        aliases={str(k): str(v) for k, v in aliases.items()},
    )


def _parse_analysis(data: Any) -> AnalysisConfig:
    data = _section(data, "analysis")

    kinds_data = data.get("relationships")
    if kinds_data is None:
        kinds = list(RelationKind)
    else:
        if not isinstance(kinds_data, list):
            raise ConfigError("'analysis.relationships' must be a list.")
        kinds = []
        for kind in kinds_data:
            try:
                kinds.append(RelationKind(kind))
            except ValueError:
                valid = ", ".join(k.value for k in RelationKind)
                raise ConfigError(
                    f"Invalid relationship kind '{kind}'. Valid options: {valid}"
                )

    workers = data.get("workers", 1)
    if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
        raise ConfigError("'analysis.workers' must be a positive integer.")

    return AnalysisConfig(relationships=kinds, workers=workers)


def _expand_env_vars(value: Any) -> Any:
    """Expand environment variables in string values.

    Supports ${VAR} and $VAR syntax.
    """
    if not isinstance(value, str):
        return value

    pattern = r'\$\{([^}]+)\}'

    def replace(match):
        var_name = match.group(1)
        return os.environ.get(var_name, match.group(0))

    expanded = re.sub(pattern, replace, value)

    # Also support $VAR at start of string (simple case)
    if expanded.startswith('$') and not expanded.startswith('${'):
        var_name = expanded[1:].split()[0] if ' ' in expanded else expanded[1:]
        env_value = os.environ.get(var_name)
        if env_value:
            return env_value

    return expanded


def _parse_connector_config(data: Optional[dict], config_class: type):
    """Parse a source or destination connector config."""
    if data is None:
        return None

    if not isinstance(data, dict):
        raise ConfigError("Connector config must be a dictionary.")

    conn_type = data.get("type")
    if not conn_type:
        raise ConfigError("Connector config requires 'type' field.")

    # Everything except 'type' goes into config, with env var expansion
    config = {k: _expand_env_vars(v) for k, v in data.items() if k != "type"}

    return config_class(type=conn_type, config=config)
