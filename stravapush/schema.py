"""Declarative attribute schemas exposed to the driver."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

STRING = "string"
INT64 = "int64"
LIST_NESTED = "list_nested"

# Plan modifiers
REQUIRES_REPLACE = "requires_replace"
USE_STATE_FOR_UNKNOWN = "use_state_for_unknown"


@dataclass(frozen=True)
class Attribute:
    """One attribute of a provider, resource or data source schema."""

    type: str
    description: str = ""
    required: bool = False
    optional: bool = False
    computed: bool = False
    sensitive: bool = False
    max_length: Optional[int] = None
    plan_modifiers: tuple = ()
    nested: Optional[Dict[str, "Attribute"]] = None

    def __post_init__(self):
        if not (self.required or self.optional or self.computed):
            raise ValueError("attribute must be required, optional or computed")
        if self.required and (self.optional or self.computed):
            raise ValueError("a required attribute cannot also be optional or computed")
        if self.type == LIST_NESTED and not self.nested:
            raise ValueError("list_nested attribute needs nested attributes")

    @property
    def requires_replace(self) -> bool:
        return REQUIRES_REPLACE in self.plan_modifiers


@dataclass(frozen=True)
class Schema:
    description: str
    attributes: Dict[str, Attribute] = field(default_factory=dict)

    def __getitem__(self, name: str) -> Attribute:
        return self.attributes[name]

    def __contains__(self, name: str) -> bool:
        return name in self.attributes

    def required(self) -> List[str]:
        return [n for n, a in self.attributes.items() if a.required]

    def computed(self) -> List[str]:
        return [n for n, a in self.attributes.items() if a.computed]

    def sensitive(self) -> List[str]:
        return [n for n, a in self.attributes.items() if a.sensitive]

    def replace_on_change(self) -> List[str]:
        return [n for n, a in self.attributes.items() if a.requires_replace]
