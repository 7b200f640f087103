"""Source tree discovery - finds candidate model classes and builds the type registry."""
import importlib
import logging
import re
import sys
from pathlib import Path
from typing import Dict, List, Optional

from swaggergen.introspection.python_types import describe_class
from swaggergen.introspection.type_descriptor import TypeRegistry

logger = logging.getLogger(__name__)

CLASS_PATTERN = re.compile(r'^class\s+([A-Za-z_]\w*)\s*[(:]', re.MULTILINE)


def module_name_for(file_path: Path, root: Path) -> str:
    """Dotted module name of ``file_path`` relative to ``root``"""
    relative = file_path.relative_to(root).with_suffix("")
    parts = list(relative.parts)
    if parts and parts[-1] == "__init__":
        parts = parts[:-1]
    return ".".join(parts)


def extract_class_names(source: str) -> List[str]:
    """Top-level class declarations found in a source file (text scan)"""
    return CLASS_PATTERN.findall(source)


def find_source_types(root: Path) -> Dict[str, str]:
    """
    Recursively scan ``root`` for Python files and map each top-level class
    name to its qualified name.

    Args:
        root: Root directory of the model sources (the import root)

    Returns:
        Dict[str, str]: class name -> qualified name (module.ClassName)
    """
    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(f"Source directory not found: {root}")

    class_map: Dict[str, str] = {}
    for file_path in sorted(root.rglob("*.py")):
        try:
            source = file_path.read_text(encoding="utf-8", errors="ignore")
        except OSError as e:
            logger.warning(f"Cannot read {file_path}: {e}")
            continue

        module_name = module_name_for(file_path, root)
        if not module_name:
            continue

        for class_name in extract_class_names(source):
            if class_name in class_map:
                logger.debug(f"Class {class_name} already found in {class_map[class_name]}")
                continue
            class_map[class_name] = f"{module_name}.{class_name}"

    logger.debug(f"class_map = {class_map}")
    return class_map


def build_registry(root: Path, registry: Optional[TypeRegistry] = None) -> TypeRegistry:
    """
    Discover the classes under ``root``, import them once and describe them.

    Types that cannot be imported or described are skipped and recorded in
    ``registry.errors``.
    """
    root = Path(root).resolve()
    registry = registry if registry is not None else TypeRegistry()
    class_map = find_source_types(root)

    # model modules are imported from the source root
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))

    for class_name, qualified_name in class_map.items():
        module_name = qualified_name.rsplit(".", 1)[0]
        try:
            module = importlib.import_module(module_name)
            cls = getattr(module, class_name)
            registry.register(describe_class(cls))
        except Exception as e:
            registry.add_error(f"Class not found: {qualified_name} ({e})")

    logger.info(f"Discovered {len(registry)} types under {root}")
    return registry
