from typing import Any, Optional, Protocol
import json


class Serializer(Protocol):
    """Serialize/deserialize record payloads for a string-valued substrate.

    Implementations should be symmetric for structured values:
    `serialize` -> str, `deserialize` <- str.
    """

    def serialize(self, item: Any) -> Any: ...

    def deserialize(self, data: Optional[str]) -> Any: ...


class RecordSerializer:
    """Serializer using JSON for structured values.

    Mappings and sequences become JSON text; scalars are passed through
    unchanged and left for the substrate to stringify. Deserializing an
    empty or absent value yields None instead of failing.
    """

    def serialize(self, item: Any) -> Any:
        if isinstance(item, (dict, list, tuple)):
            return json.dumps(item)
        return item

    def deserialize(self, data: Optional[str]) -> Any:
        if not data:
            return None
        return json.loads(data)
