"""Private module-loading boundaries."""

import builtins
import importlib.machinery
import importlib.util
import os
import threading
import types
from collections.abc import Iterable
from collections.abc import Mapping

from loguru import logger

from reflectbridge.reflect import load_type


class ModuleBoundary:
    """Load modules from a search path into a private module table.

    Modules loaded through a boundary are executed once per boundary and are
    never registered in ``sys.modules``. Classes they define are therefore
    distinct from classes of the same name loaded anywhere else. Import
    statements executed inside boundary modules resolve names found on the
    search path inside the same boundary and defer everything else to the
    regular import system.
    """

    _search_paths: list[str]
    _modules: dict[str, types.ModuleType]
    _lock: threading.RLock
    _builtins: dict[str, object]

    def __init__(self, search_paths: Iterable[str | os.PathLike[str]]) -> None:
        """Initialize a boundary.

        :param search_paths: Directories searched for top-level modules and packages.
        :raises ValueError: If no search path is given.
        """
        self._search_paths = [os.fspath(entry) for entry in search_paths]
        if len(self._search_paths) == 0:
            raise ValueError("ModuleBoundary needs at least one search path")
        self._modules = {}
        self._lock = threading.RLock()
        self._builtins = dict(builtins.__dict__)
        self._builtins["__import__"] = self._import

    @property
    def search_paths(self) -> tuple[str, ...]:
        """Return the directories searched for top-level modules.

        :returns: Search path entries.
        """
        return tuple(self._search_paths)

    @property
    def module_names(self) -> tuple[str, ...]:
        """Return the names of every module loaded so far, in load order.

        :returns: Loaded module names.
        """
        with self._lock:
            return tuple(self._modules)

    def owns(self, module_name: str) -> bool:
        """Report whether a module name resolves inside this boundary.

        :param module_name: Absolute module name.
        :returns: ``True`` when the top-level package lives on the search path.
        """
        top_level: str = module_name.partition(".")[0]
        with self._lock:
            if top_level in self._modules:
                return True
        return importlib.machinery.PathFinder.find_spec(top_level, self._search_paths) is not None

    def import_module(self, module_name: str) -> types.ModuleType:
        """Import a module inside this boundary.

        Parent packages of dotted names are imported inside the boundary first.

        :param module_name: Absolute module name.
        :returns: Boundary-private module object.
        :raises ModuleNotFoundError: If the module is not found on the search path.
        """
        with self._lock:
            cached: types.ModuleType | None = self._modules.get(module_name)
            if cached is not None:
                return cached

            parent_name, _, child_name = module_name.rpartition(".")
            parent: types.ModuleType | None = None
            search: list[str] = self._search_paths
            if len(parent_name) > 0:
                parent = self.import_module(parent_name)
                # executing the parent may already have imported this module
                cached = self._modules.get(module_name)
                if cached is not None:
                    return cached
                parent_path: object = getattr(parent, "__path__", None)
                if parent_path is None:
                    raise ModuleNotFoundError(
                        f"No module named {module_name!r}; {parent_name!r} is not a package",
                        name=module_name,
                    )
                search = list(parent_path)  # type: ignore[call-overload]

            spec: importlib.machinery.ModuleSpec | None = importlib.machinery.PathFinder.find_spec(
                module_name, search
            )
            if spec is None or spec.loader is None:
                raise ModuleNotFoundError(f"No module named {module_name!r} in boundary", name=module_name)

            module: types.ModuleType = importlib.util.module_from_spec(spec)
            module.__dict__["__builtins__"] = self._builtins
            self._modules[module_name] = module
            try:
                spec.loader.exec_module(module)
            except BaseException:
                del self._modules[module_name]
                raise
            if parent is not None:
                setattr(parent, child_name, module)
            logger.debug("Loaded {} into boundary from {}", module_name, spec.origin)
            return module

    def _import(
        self,
        name: str,
        globals: Mapping[str, object] | None = None,
        locals: Mapping[str, object] | None = None,
        fromlist: tuple[str, ...] | list[str] | None = (),
        level: int = 0,
    ) -> types.ModuleType:
        """Serve ``import`` statements executed inside boundary modules.

        :param name: Imported name, as written.
        :param globals: Globals of the importing module.
        :param locals: Locals of the importing module.
        :param fromlist: Names listed after ``from ... import``.
        :param level: Number of leading dots of a relative import.
        :returns: Module the import statement binds.
        """
        absolute: str = name
        if level > 0:
            package: object = None
            if globals is not None:
                package = globals.get("__package__")
            absolute = importlib.util.resolve_name("." * level + name, package)  # type: ignore[arg-type]
        if self.owns(absolute) is False:
            return builtins.__import__(name, globals, locals, fromlist or (), level)

        module: types.ModuleType = self.import_module(absolute)
        if not fromlist:
            return self.import_module(absolute.partition(".")[0])
        if hasattr(module, "__path__") is True:
            for item in fromlist:
                if item == "*" or hasattr(module, item) is True:
                    continue
                try:
                    self.import_module(f"{absolute}.{item}")
                except ModuleNotFoundError:
                    # the from-import itself reports names that are neither attribute nor submodule
                    continue
        return module

    def load_type(self, target: str) -> type:
        """Resolve a class defined inside this boundary.

        :param target: ``module.path:Qualname`` or ``module.path.Qualname``.
        :returns: Boundary-private class.
        :raises TypeLoadingError: If the class cannot be resolved.
        """
        return load_type(target, self)

    def __repr__(self) -> str:
        return f"ModuleBoundary({self._search_paths!r})"
