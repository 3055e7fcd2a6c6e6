"""Plugin pipeline for infra-components.

This module describes the ordered plugin units of an isomorphic app and
constructs them through a registry of host-supplied constructors.
"""

from infra_components.plugins.pipeline import (
    PLUGIN_ORDER,
    BuildContext,
    PipelineFactory,
    PluginConfig,
    PluginSpec,
    build_plugin_pipeline,
    is_compilation,
)
from infra_components.plugins.registry import PluginRegistry

__all__ = [
    "PLUGIN_ORDER",
    "BuildContext",
    "PipelineFactory",
    "PluginConfig",
    "PluginSpec",
    "PluginRegistry",
    "build_plugin_pipeline",
    "is_compilation",
]
