"""
Application modules for the Fincheck server.

A module is a named unit of the application definition: it contributes
routes and named schemas, may import other modules, and may run an async
initialization hook while the runtime is created. The root module and
everything it imports form the application graph resolved at startup.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Union

from fincheck.exceptions import StartupError
from fincheck.server.registry import Route

if TYPE_CHECKING:
    from fincheck.server.app import FincheckApplication

logger = logging.getLogger("fincheck.server")

InitHook = Callable[["FincheckApplication"], Awaitable[None]]


@dataclass
class Module:
    """
    Application module definition.

    Attributes:
        name: Unique module name. Also the auto-tag for its operations.
        routes: Routes contributed by the module.
        imports: Modules this module depends on, either as Module objects
            or by name.
        schemas: Named JSON schemas contributed to the descriptor.
        description: Human-readable description, used for its tag.
        on_init: Async hook run once while the runtime is created.
    """

    name: str
    routes: list[Route] = field(default_factory=list)
    imports: list[Union["Module", str]] = field(default_factory=list)
    schemas: dict[str, dict[str, Any]] = field(default_factory=dict)
    description: str = ""
    on_init: InitHook | None = None


def resolve_modules(root: Module) -> list[Module]:
    """
    Resolve the module graph reachable from the root module.

    Imports given by name are looked up among the modules reachable by
    object reference.

    Args:
        root: The root application module.

    Returns:
        Modules in dependency order: every module appears after all of
        the modules it imports, and the root comes last.

    Raises:
        StartupError: If a name is defined twice, an import cannot be
            resolved, or the imports form a cycle.
    """
    catalog: dict[str, Module] = {}
    pending = [root]
    while pending:
        module = pending.pop()
        known = catalog.get(module.name)
        if known is module:
            continue
        if known is not None:
            raise StartupError(
                f"Module name defined more than once: {module.name}",
                details={"module": module.name},
            )
        catalog[module.name] = module
        pending.extend(m for m in module.imports if isinstance(m, Module))

    ordered: list[Module] = []
    done: set[str] = set()
    visiting: list[str] = []

    def visit(module: Module) -> None:
        if module.name in done:
            return
        if module.name in visiting:
            cycle = visiting[visiting.index(module.name):] + [module.name]
            raise StartupError(
                f"Cyclic module imports: {' -> '.join(cycle)}",
                details={"cycle": cycle},
            )
        visiting.append(module.name)
        for dependency in module.imports:
            name = dependency.name if isinstance(dependency, Module) else dependency
            if name not in catalog:
                raise StartupError(
                    f"Module {module.name} imports unknown module: {name}",
                    details={"module": module.name, "import": name},
                )
            visit(catalog[name])
        visiting.pop()
        done.add(module.name)
        ordered.append(module)

    visit(root)
    logger.debug(f"Resolved modules: {', '.join(m.name for m in ordered)}")
    return ordered
