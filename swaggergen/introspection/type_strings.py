"""Parser for textual type declarations (``List<Pet>``, ``Optional[Node]``, ``byte[]``...)."""
import re
from typing import List

from swaggergen.introspection.type_descriptor import TypeRef
from swaggergen.mapper.type_mapper import is_known_primitive

SEQUENCE_TYPE_NAMES = frozenset({
    # Java
    "List", "ArrayList", "LinkedList", "Set", "HashSet", "TreeSet", "LinkedHashSet",
    "Collection", "Iterable",
    # Python
    "list", "set", "frozenset", "tuple", "Sequence", "MutableSequence",
    "Tuple", "FrozenSet", "AbstractSet", "MutableSet",
})

JAVA_MAP_TYPE_NAMES = frozenset({"Map", "HashMap", "TreeMap", "LinkedHashMap", "SortedMap"})
PYTHON_MAP_TYPE_NAMES = frozenset({"dict", "Dict", "Mapping", "MutableMapping", "OrderedDict", "defaultdict"})

# Standard types without a package prefix that are not user models
STANDARD_TYPE_NAMES = frozenset({
    "Object", "Character", "char", "short", "Short", "byte", "UUID",
    "LocalDate", "LocalDateTime", "Instant", "Timestamp",
    "object", "Any", "date", "time", "timedelta",
})

STANDARD_PREFIXES = ("java.", "javax.", "builtins.", "typing.", "datetime.", "decimal.", "uuid.", "collections.")

TYPE_PATTERN = re.compile(r'^([\w.$]+)\s*(?:[<\[](.*)[>\]])?$')


def split_top_level(text: str, separator: str = ",") -> List[str]:
    """Split on ``separator`` ignoring separators nested in <> or []"""
    parts = []
    depth = 0
    current = []
    for char in text:
        if char in "<[":
            depth += 1
        elif char in ">]":
            depth -= 1
        if char == separator and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return parts


def is_standard_type(name: str, qualified_name: str = "") -> bool:
    """Primitive, wrapper or standard-library type (anything that is not a user model)"""
    if is_known_primitive(name) or name in STANDARD_TYPE_NAMES:
        return True
    return bool(qualified_name) and qualified_name.startswith(STANDARD_PREFIXES)


def parse_type_string(text: str, package: str = "", nested: bool = False) -> TypeRef:
    """
    Parse a declared type into a TypeRef

    Args:
        text: Declared type, e.g. "List<Pet>", "Optional[Node]", "com.x.Address"
        package: Package used to qualify unqualified user types
        nested: True when parsing a sequence element (only one level is resolved)

    Returns:
        TypeRef. Unparseable text yields a primitive TypeRef named after the text,
        which the type mapper later degrades to string.
    """
    text = str(text).strip().strip("'\"")

    # "Node | None"
    alternatives = [alt for alt in split_top_level(text, "|") if alt != "None"]
    if len(alternatives) == 1 and alternatives[0] != text:
        return parse_type_string(alternatives[0], package, nested)

    if text == "byte[]":
        return TypeRef("byte[]", "byte[]", primitive=True)

    if text.endswith("[]"):
        element = None if nested else parse_type_string(text[:-2], package, nested=True)
        return TypeRef(text, text, primitive=True, sequence=True, element=element)

    match = TYPE_PATTERN.match(text)
    if not match:
        return TypeRef(text, text, primitive=True)

    base, args_text = match.group(1), match.group(2)
    short_name = base.rsplit(".", 1)[-1]
    args = split_top_level(args_text) if args_text else []

    if short_name == "Optional" and args:
        return parse_type_string(args[0], package, nested)

    if short_name == "Union" and args:
        remaining = [arg for arg in args if arg not in ("None", "NoneType")]
        if len(remaining) == 1:
            return parse_type_string(remaining[0], package, nested)
        return TypeRef("Union", base, primitive=True)

    if short_name in SEQUENCE_TYPE_NAMES:
        element = None
        if args and not nested and args[0] != "...":
            element = parse_type_string(args[0], package, nested=True)
            if element.sequence:
                # only one level of collection nesting is resolved
                element = None
        return TypeRef(short_name, base, primitive=True, sequence=True, element=element)

    if short_name in JAVA_MAP_TYPE_NAMES:
        return TypeRef("Map", base, primitive=True)
    if short_name in PYTHON_MAP_TYPE_NAMES:
        return TypeRef("dict", base, primitive=True)

    if is_standard_type(short_name, base):
        return TypeRef(short_name, base, primitive=True)

    qualified_name = base if "." in base else (f"{package}.{base}" if package else base)
    return TypeRef(short_name, qualified_name, primitive=False)
