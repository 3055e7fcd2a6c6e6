"""Plugin pipeline construction for isomorphic apps.

The pipeline is the ordered list of plugin units that generate configuration
for an isomorphic app. It only exists in compilation mode; in every other mode
no unit is described or constructed.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from infra_components.core.config import InfrastructureMode
from infra_components.plugins.registry import PluginRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PluginConfig:
    """Construction record handed to a plugin unit.

    Attributes:
        parser_mode: Parser mode of the host runtime.
        build_path: Directory for the final bundles.
        config_file_path: Path of the configuration file being compiled.
        assets_path: Directory for client assets.
        stage: Deployment stage.
    """

    parser_mode: Optional[str] = None
    build_path: Optional[str] = None
    config_file_path: Optional[str] = None
    assets_path: Optional[str] = None
    stage: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert record to dictionary, omitting unset fields."""
        return {key: value for key, value in asdict(self).items() if value is not None}


@dataclass(frozen=True)
class PluginSpec:
    """A plugin unit described by name and construction record."""

    name: str
    config: PluginConfig

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "config": self.config.to_dict()}


@dataclass(frozen=True)
class BuildContext:
    """Values shared by all units of one pipeline."""

    parser_mode: Optional[str] = None
    build_path: Optional[str] = None
    config_file_path: Optional[str] = None
    assets_path: Optional[str] = None
    stage: Optional[str] = None


# Unit name and the BuildContext fields it receives. Order is significant:
# later units may rely on configuration registered by earlier ones.
PLUGIN_FIELDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("isomorphic", ("parser_mode", "build_path", "config_file_path")),
    ("datalayer", ("parser_mode", "build_path", "config_file_path")),
    ("webapp", ("parser_mode", "build_path", "config_file_path", "assets_path")),
    ("service", ()),
    ("storage", ("build_path", "parser_mode")),
    ("environment", ("stage", "parser_mode")),
    ("identity", ()),
    ("authentication", ()),
)

PLUGIN_ORDER: Tuple[str, ...] = tuple(name for name, _ in PLUGIN_FIELDS)


def is_compilation(mode: Optional[Union[str, InfrastructureMode]]) -> bool:
    """Check whether a mode permits plugin construction."""
    return mode is not None and mode == InfrastructureMode.COMPILATION


def build_plugin_pipeline(
    mode: Optional[Union[str, InfrastructureMode]],
    context: BuildContext,
    registry: Optional[PluginRegistry] = None,
) -> List[Any]:
    """Build the ordered plugin pipeline.

    Outside compilation mode the result is empty and neither the specs nor
    the registry are touched.

    Args:
        mode: Infrastructure mode of the host runtime.
        context: Shared build context.
        registry: If given, units are constructed through it.

    Returns:
        PluginSpec records in pipeline order, or the constructed units when a
        registry is given.

    Raises:
        KeyError: If a registry is given and lacks a constructor for a unit.
    """
    if not is_compilation(mode):
        logger.debug(f"No plugins in mode {mode!r}")
        return []

    specs = [
        PluginSpec(name, PluginConfig(**{key: getattr(context, key) for key in keys}))
        for name, keys in PLUGIN_FIELDS
    ]
    logger.debug(f"Plugin pipeline: {' -> '.join(spec.name for spec in specs)}")

    if registry is None:
        return specs
    return registry.construct_all(specs)


@dataclass(frozen=True)
class PipelineFactory:
    """Deferred plugin pipeline of one isomorphic app.

    Holds what composition knows (mode and paths); the host supplies the
    config path, stage and parser mode when it decides to build.

    Attributes:
        mode: Infrastructure mode captured at composition time.
        build_path: Directory for the final bundles.
        assets_path: Directory for client assets.
    """

    mode: Optional[Union[str, InfrastructureMode]] = None
    build_path: Optional[str] = None
    assets_path: Optional[str] = None

    def request(
        self,
        config_path: Optional[str],
        stage: Optional[str] = None,
        parser_mode: Optional[str] = None,
    ) -> BuildContext:
        """Describe the build context a call would use, without building."""
        return BuildContext(
            parser_mode=parser_mode,
            build_path=self.build_path,
            config_file_path=config_path,
            assets_path=self.assets_path,
            stage=stage,
        )

    def __call__(
        self,
        config_path: Optional[str],
        stage: Optional[str] = None,
        parser_mode: Optional[str] = None,
        registry: Optional[PluginRegistry] = None,
    ) -> List[Any]:
        return build_plugin_pipeline(self.mode, self.request(config_path, stage, parser_mode), registry)
