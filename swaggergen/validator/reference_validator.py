"""Reference validation."""
import re
from typing import Iterable, List, Mapping, Set

from swaggergen.schema.models import Model

FRAGMENT_DEFINITION_PATTERN = re.compile(r'^  ([A-Za-z_][\w.$-]*):\s*$', re.MULTILINE)


def fragment_definitions(fragment: str) -> Set[str]:
    """Model names defined by the external definitions fragment"""
    return set(FRAGMENT_DEFINITION_PATTERN.findall(fragment or ""))


class ReferenceValidator:
    """Validates that every $ref points to a written definition."""

    def __init__(self, excluded_models: Iterable[str] = (), fragment: str = ""):
        self.excluded_models = frozenset(excluded_models)
        self.fragment_models = fragment_definitions(fragment)

    def defined_models(self, models: Mapping[str, Model]) -> Set[str]:
        defined = {
            name for name, model in models.items()
            if name not in self.excluded_models and not model.is_empty() and not model.is_cycle_stub
        }
        return defined | self.fragment_models

    def validate(self, models: Mapping[str, Model], excluded_fields: Iterable[str] = ()) -> List[str]:
        """Return one error per dangling reference."""
        errors = []
        defined = self.defined_models(models)
        skipped_fields = frozenset(excluded_fields)

        for model_name in sorted(models):
            if model_name not in defined:
                continue
            for field_name, target in models[model_name].references().items():
                if field_name in skipped_fields or target in defined:
                    continue
                reason = "excluded" if target in self.excluded_models else "not defined"
                errors.append(f"Dangling reference {model_name}.{field_name} -> {target} ({reason})")

        return errors
