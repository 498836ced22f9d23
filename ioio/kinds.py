from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class RecordKind:
    name: str
    collection: str
    required_fields: Tuple[str, ...]
    optional_fields: Tuple[str, ...]
    # Used in response messages, e.g. "Error fetching properties"
    plural: str
    # Path segment under /api
    endpoint: str

    @property
    def title(self) -> str:
        return self.name.capitalize()


PROPERTY = RecordKind(
    name="property",
    collection="properties",
    required_fields=("name", "age", "email", "phone", "property_type", "message"),
    optional_fields=("bedrooms", "rooms"),
    plural="properties",
    endpoint="properties",
)

SERVICE = RecordKind(
    name="service",
    collection="services",
    required_fields=("name", "age", "email", "phone", "service_type", "message"),
    optional_fields=("beauty_type",),
    plural="services",
    endpoint="service",
)

KINDS: Dict[str, RecordKind] = {kind.name: kind for kind in (PROPERTY, SERVICE)}
