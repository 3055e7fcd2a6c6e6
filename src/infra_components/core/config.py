"""Configuration classes for isomorphic app composition.

This module defines the user-facing argument record of an isomorphic app and
the infrastructure modes the host runtime can run in.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

logger = logging.getLogger(__name__)


class InfrastructureMode(str, Enum):
    """Runtime modes of the host.

    Plugins are only ever constructed in COMPILATION mode.
    """

    COMPILATION = "COMPILATION"
    SYNTHESIS = "SYNTHESIS"
    DEPLOYMENT = "DEPLOYMENT"
    RUNTIME = "RUNTIME"


# camelCase keys accepted from configuration files
_KEY_ALIASES = {
    "stackName": "stack_name",
    "buildPath": "build_path",
    "assetsPath": "assets_path",
    "infrastructureMode": "infrastructure_mode",
    "iamRoleStatements": "iam_role_statements",
}

_KNOWN_KEYS = {
    "stack_name",
    "build_path",
    "assets_path",
    "region",
    "infrastructure_mode",
    "iam_role_statements",
    "children",
}


@dataclass
class IsomorphicArgs:
    """Arguments an isomorphic app receives from the user.

    Attributes:
        stack_name: Name of the CloudFormation stack; becomes the instance id.
        build_path: Local, relative directory for the final bundles.
        assets_path: Relative directory for assets (e.g. the client bundle).
        region: Cloud region, threaded through uninterpreted.
        infrastructure_mode: Mode of the host runtime, if known.
        iam_role_statements: Additional IAM permission statements.
        children: Child nodes of the app.
        extra: Further user arguments, kept in the argument layer as given.
    """

    stack_name: str
    build_path: Optional[str] = None
    assets_path: Optional[str] = None
    region: Optional[str] = None
    infrastructure_mode: Optional[Union[str, InfrastructureMode]] = None
    iam_role_statements: List[Dict[str, Any]] = field(default_factory=list)
    children: List[Any] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate arguments."""
        if not self.stack_name or not isinstance(self.stack_name, str):
            raise ValueError("stack_name must be a non-empty string")

        if isinstance(self.infrastructure_mode, str) and not isinstance(self.infrastructure_mode, InfrastructureMode):
            try:
                self.infrastructure_mode = InfrastructureMode(self.infrastructure_mode)
            except ValueError:
                # unknown modes stay plain strings; they never permit plugin construction
                logger.debug(f"Unknown infrastructure_mode {self.infrastructure_mode!r}, no plugins will be built")

        collisions = _KNOWN_KEYS.intersection(self.extra)
        if collisions:
            raise ValueError(f"extra must not redefine argument fields: {sorted(collisions)}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert arguments to the flat argument layer.

        Keys in ``extra`` are flattened next to the named fields.
        """
        result = {
            "stack_name": self.stack_name,
            "build_path": self.build_path,
            "assets_path": self.assets_path,
            "region": self.region,
            "infrastructure_mode": self.infrastructure_mode,
            "iam_role_statements": self.iam_role_statements,
            "children": self.children,
        }
        result.update(self.extra)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IsomorphicArgs":
        """Create arguments from a dictionary.

        Accepts snake_case keys and the camelCase keys of the JavaScript
        configuration format. Unknown keys are kept in ``extra``.
        """
        normalized = {_KEY_ALIASES.get(key, key): value for key, value in data.items()}
        if "stack_name" not in normalized:
            raise ValueError("Isomorphic app arguments require stack_name")

        return cls(
            stack_name=normalized["stack_name"],
            build_path=normalized.get("build_path"),
            assets_path=normalized.get("assets_path"),
            region=normalized.get("region"),
            infrastructure_mode=normalized.get("infrastructure_mode"),
            iam_role_statements=normalized.get("iam_role_statements") or [],
            children=normalized.get("children") or [],
            extra={key: value for key, value in normalized.items() if key not in _KNOWN_KEYS},
        )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "IsomorphicArgs":
        """Load arguments from a JSON or YAML file.

        Args:
            path: Path to the file (.json or .yaml/.yml).

        Returns:
            Loaded arguments.

        Raises:
            ValueError: If the file format is unsupported or the content is not a mapping.
        """
        path = Path(path)
        suffix = path.suffix.lower()

        with open(path, "r", encoding="utf-8") as f:
            if suffix == ".json":
                data = json.load(f)
            elif suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                raise ValueError(f"Unsupported file format: {suffix}. Use .json, .yaml, or .yml")

        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping in {path}, got {type(data).__name__}")
        return cls.from_dict(data)

    def to_json(self, indent: int = 2) -> str:
        """Convert arguments (without children) to a JSON string."""
        data = self.to_dict()
        data.pop("children")
        if isinstance(self.infrastructure_mode, InfrastructureMode):
            data["infrastructure_mode"] = self.infrastructure_mode.value
        return json.dumps(data, indent=indent)

    def to_yaml(self) -> str:
        """Convert arguments (without children) to a YAML string."""
        return yaml.safe_dump(json.loads(self.to_json()), default_flow_style=False, sort_keys=False)
