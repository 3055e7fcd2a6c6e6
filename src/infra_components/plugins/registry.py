"""Registry of plugin unit constructors.

Plugin units are opaque to this package. The host registers one constructor
per unit name; the registry only calls it with the unit's construction record
and hands back whatever it returns.
"""

import importlib
import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List

if TYPE_CHECKING:
    from infra_components.plugins.pipeline import PluginConfig, PluginSpec

logger = logging.getLogger(__name__)

PluginConstructor = Callable[["PluginConfig"], Any]


class PluginRegistry:
    """Registry mapping plugin unit names to their constructors.

    Attributes:
        _constructors: Dictionary mapping unit names to constructor callables
    """

    def __init__(self):
        """Initialize an empty plugin registry."""
        self._constructors: Dict[str, PluginConstructor] = {}
        logger.debug("Initialized PluginRegistry")

    def register(self, name: str, constructor: PluginConstructor) -> None:
        """Register a constructor for a plugin unit.

        Args:
            name: Unit name (one of the pipeline's unit names)
            constructor: Callable taking a PluginConfig and returning the unit

        Raises:
            TypeError: If constructor is not callable
        """
        if not callable(constructor):
            raise TypeError(f"Constructor for plugin '{name}' is not callable")

        if name in self._constructors:
            logger.warning(f"Plugin '{name}' already registered, overwriting")

        self._constructors[name] = constructor
        logger.info(f"Registered plugin constructor: {name}")

    def load_constructor(self, name: str, module_path: str, attr_name: str) -> PluginConstructor:
        """Dynamically load and register a constructor from a module.

        Args:
            name: Unit name to register the constructor under
            module_path: Python module path (e.g., "my_package.plugins")
            attr_name: Name of the constructor (class or function) in the module

        Returns:
            The loaded constructor

        Raises:
            ImportError: If module cannot be imported
            AttributeError: If attribute not found in module
            TypeError: If attribute is not callable
        """
        logger.debug(f"Loading plugin constructor: {attr_name} from {module_path}")

        try:
            module = importlib.import_module(module_path)
            constructor = getattr(module, attr_name)
        except ImportError as e:
            logger.error(f"Failed to import module {module_path}: {e}")
            raise
        except AttributeError as e:
            logger.error(f"Constructor {attr_name} not found in {module_path}: {e}")
            raise

        self.register(name, constructor)
        return constructor

    def get(self, name: str) -> PluginConstructor:
        """Get a registered constructor by name.

        Raises:
            KeyError: If no constructor is registered under name
        """
        try:
            return self._constructors[name]
        except KeyError:
            raise KeyError(f"No constructor registered for plugin '{name}'") from None

    def __contains__(self, name: str) -> bool:
        return name in self._constructors

    def list_units(self) -> List[str]:
        """List registered unit names in registration order."""
        return list(self._constructors)

    def construct(self, spec: "PluginSpec") -> Any:
        """Construct one plugin unit from its spec."""
        unit = self.get(spec.name)(spec.config)
        logger.debug(f"Constructed plugin unit: {spec.name}")
        return unit

    def construct_all(self, specs: Iterable["PluginSpec"]) -> List[Any]:
        """Construct plugin units in the order of their specs.

        Raises:
            KeyError: If any unit has no registered constructor; nothing is
                constructed in that case
        """
        specs = list(specs)
        missing = [spec.name for spec in specs if spec.name not in self._constructors]
        if missing:
            raise KeyError(f"No constructor registered for plugin(s): {missing}")

        return [self.construct(spec) for spec in specs]
