"""
RenderRegistry — Named custom render functions

Fields can ask for custom rendering with a `render=<name>` token. The
registry resolving those names is an explicit object handed to the
Introspector and ValueFormatter, so two pipelines never share state.

    registry = RenderRegistry()
    registry.register("bytes", lambda value, spec: f"{value / 1024:.1f} KiB")
    formatter = ValueFormatter(registry=registry)
"""

from typing import Any, Callable, Dict, Iterator, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .model import FieldSpec


RenderFunc = Callable[[Any, "FieldSpec"], str]


class RenderRegistry:
    """Mapping of render-function names to callables."""

    def __init__(self, functions: Optional[Dict[str, RenderFunc]] = None):
        self._functions: Dict[str, RenderFunc] = dict(functions or {})

    def register(self, name: str, fn: RenderFunc) -> None:
        """
        Register (or replace) a render function.

        Raises:
            ValueError: If name is empty or fn is not callable
        """
        if not name:
            raise ValueError("Render function name must not be empty")
        if not callable(fn):
            raise ValueError(f"Render function '{name}' is not callable")
        self._functions[name] = fn

    def unregister(self, name: str) -> None:
        self._functions.pop(name, None)

    def get(self, name: Optional[str]) -> Optional[RenderFunc]:
        if not name:
            return None
        return self._functions.get(name)

    def copy(self) -> "RenderRegistry":
        return RenderRegistry(self._functions)

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __iter__(self) -> Iterator[str]:
        return iter(self._functions)

    def __len__(self) -> int:
        return len(self._functions)
