"""
Part Writer Registry: discovery and execution ordering.

The registry provides:
1. Discovery of the built-in part writers from a static table
2. Registration of external part writers
3. Deterministic ordering via topological sort on ``requires``,
   ties broken by (order, name)
4. Query by name

Built-in writers are listed explicitly instead of found by walking the
package, so the set and its order never depend on the file system.
"""

import importlib
import inspect
import logging
from typing import Dict, List, Optional, Set

from odpwriter.base import PartWriter, PartWriterClass

logger = logging.getLogger(__name__)


# name -> (module, class); imported lazily on discovery
BUILTIN_PART_WRITERS = {
    "mimetype": ("odpwriter.parts.mimetype", "MimetypeWriter"),
    "content": ("odpwriter.parts.content", "ContentWriter"),
    "meta": ("odpwriter.parts.meta", "MetaWriter"),
    "settings": ("odpwriter.parts.settings", "SettingsWriter"),
    "styles": ("odpwriter.parts.styles", "StylesWriter"),
    "pictures": ("odpwriter.parts.pictures", "PicturesWriter"),
    "objects_chart": ("odpwriter.parts.objects_chart", "ObjectsChartWriter"),
    "thumbnail": ("odpwriter.parts.thumbnail", "ThumbnailWriter"),
    "manifest": ("odpwriter.parts.manifest", "ManifestWriter"),
}


def is_part_writer_class(obj) -> bool:
    """True for concrete PartWriter subclasses (not the base, not abstract helpers)."""
    return (
        isinstance(obj, type)
        and issubclass(obj, PartWriter)
        and obj is not PartWriter
        and not inspect.isabstract(obj)
    )


class PartWriterRegistry:
    """
    Discovers and orders the available part writers.

    Example:
        # Discover built-in writers
        PartWriterRegistry.discover()

        # Execution order
        for writer_cls in PartWriterRegistry.ordered():
            ...

        # Add a writer of your own
        PartWriterRegistry.register(NotesWriter)
    """

    _writers: Dict[str, PartWriterClass] = {}
    _discovered: bool = False

    @classmethod
    def discover(cls, table: Optional[Dict[str, tuple]] = None) -> int:
        """
        Import and register the writers listed in ``table``.

        Args:
            table: name -> (module, class) mapping (defaults to the built-ins)

        Returns:
            Number of writers registered by this call
        """
        if cls._discovered and table is None:
            logger.debug("Part writers already discovered, skipping")
            return len(cls._writers)

        count = 0
        if table is None:
            table = BUILTIN_PART_WRITERS

        for name, (module_path, class_name) in table.items():
            try:
                module = importlib.import_module(module_path)
            except ImportError as e:
                logger.warning(f"Failed to import {module_path}: {e}")
                continue

            writer_cls = getattr(module, class_name, None)
            if not is_part_writer_class(writer_cls):
                logger.warning(f"{module_path}.{class_name} is not a concrete part writer, skipped")
                continue
            if writer_cls.name != name:
                logger.warning(
                    f"Part writer {module_path}.{class_name} is named '{writer_cls.name}', "
                    f"expected '{name}'"
                )
            cls.register(writer_cls)
            count += 1

        cls._discovered = True
        if count == 0:
            logger.warning("No part writers discovered; saved packages will be empty")
        else:
            logger.info(f"Discovered {count} part writers")
        return count

    @classmethod
    def register(cls, writer_class: PartWriterClass) -> None:
        """
        Register a part writer class.

        Raises:
            TypeError: If writer_class is not a concrete PartWriter subclass
        """
        if not is_part_writer_class(writer_class):
            raise TypeError(f"{writer_class!r} is not a concrete PartWriter subclass")

        name = writer_class.name
        if name in cls._writers:
            existing = cls._writers[name]
            if existing is not writer_class:
                logger.warning(
                    f"Part writer '{name}' already registered "
                    f"(existing: {existing.__module__}, new: {writer_class.__module__})"
                )
            return

        cls._writers[name] = writer_class
        logger.debug(f"Registered part writer: {name} (order={writer_class.order})")

    @classmethod
    def get(cls, name: str) -> PartWriterClass:
        """
        Get a writer class by name.

        Raises:
            KeyError: If writer not found
        """
        cls._ensure_discovered()

        if name not in cls._writers:
            available = ", ".join(sorted(cls._writers.keys()))
            raise KeyError(f"Part writer '{name}' not found. Available: {available}")
        return cls._writers[name]

    @classmethod
    def list_all(cls) -> List[str]:
        """List all registered writer names (alphabetical)."""
        cls._ensure_discovered()
        return sorted(cls._writers.keys())

    @classmethod
    def get_info(cls, name: str) -> Dict:
        """Detailed info about a writer."""
        writer_class = cls.get(name)
        return {
            "name": writer_class.name,
            "version": writer_class.version,
            "order": writer_class.order,
            "description": writer_class.description,
            "requires": list(writer_class.requires),
            "parts": list(writer_class.parts),
            "module": writer_class.__module__,
        }

    @classmethod
    def ordered(cls) -> List[PartWriterClass]:
        """All registered writers in execution order."""
        cls._ensure_discovered()
        return [cls._writers[name] for name in cls.resolve_order(list(cls._writers))]

    @classmethod
    def resolve_order(cls, writer_names: List[str]) -> List[str]:
        """
        Topologically sort writers by ``requires``.

        Required writers are pulled in even if not named. Among writers
        whose requirements are met, the lowest (order, name) runs first.

        Raises:
            ValueError: If a circular dependency is detected
        """
        cls._ensure_discovered()

        # Expand with all required dependencies
        all_writers = set(writer_names)
        to_process = list(writer_names)

        while to_process:
            name = to_process.pop()
            for dep in cls.get(name).requires:
                if dep not in all_writers:
                    all_writers.add(dep)
                    to_process.append(dep)

        graph: Dict[str, Set[str]] = {name: set(cls.get(name).requires) for name in all_writers}

        def sort_key(name: str):
            return (cls._writers[name].order, name)

        # Topological sort (Kahn's algorithm)
        in_degree = {name: len(deps) for name, deps in graph.items()}
        queue = [name for name, degree in in_degree.items() if degree == 0]
        sorted_writers = []

        while queue:
            # Sort for determinism
            queue.sort(key=sort_key)
            name = queue.pop(0)
            sorted_writers.append(name)

            for other_name, deps in graph.items():
                if name in deps:
                    in_degree[other_name] -= 1
                    if in_degree[other_name] == 0:
                        queue.append(other_name)

        if len(sorted_writers) != len(all_writers):
            remaining = set(all_writers) - set(sorted_writers)
            raise ValueError(f"Circular dependency detected among: {sorted(remaining)}")

        return sorted_writers

    @classmethod
    def _ensure_discovered(cls):
        """Ensure built-in writers have been discovered."""
        if not cls._discovered:
            cls.discover()

    @classmethod
    def reset(cls):
        """Reset the registry (mainly for testing)."""
        cls._writers.clear()
        cls._discovered = False
