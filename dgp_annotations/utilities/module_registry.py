from dataclasses import dataclass
from typing import Any, Dict, List, Type, TypeVar

T = TypeVar("T")


@dataclass
class ModuleRegistryEntry:
    module_class: Type[T]
    tags: Dict[str, Any]


class ModuleRegistry:
    def __init__(self, *required_params: str):
        self._modules: Dict[str, ModuleRegistryEntry] = {}
        self._required_params: List[str] = list(required_params)

    def keys(self):
        return self._modules.keys()

    def items(self):
        return self._modules.items()

    def __getitem__(self, item):
        return self._modules[item]

    def __contains__(self, item) -> bool:
        return item in self._modules

    def get_tag(self, module: Type[T], tag: str) -> Any:
        return self._modules[module.__name__].tags[tag]

    def find_module(self, **tags: Any) -> Type[T]:
        """
        Returns the registered class whose tags contain all given key/value pairs.

        Raises:
            KeyError: If no registered class matches.
        """
        for entry in self._modules.values():
            if all(k in entry.tags and entry.tags[k] == v for k, v in tags.items()):
                return entry.module_class
        raise KeyError(f"No module registered with tags {tags}.")

    def register_module(self, **kwargs: Any):
        def decorator(module: T):
            module_name = module.__name__
            if module_name in self._modules:
                raise ValueError(f"Cannot register module {module_name}, already exists.")
            self._modules[module.__name__] = ModuleRegistryEntry(module_class=module, tags={})
            entry = self._modules[module_name]
            entry.tags.update(kwargs)
            for param in self._required_params:
                if param not in entry.tags:
                    raise ValueError(f"Mandatory parameter '{param}' is missing for module '{module_name}'.")

            return module

        return decorator
