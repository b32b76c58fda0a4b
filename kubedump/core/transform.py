"""Field redaction applied to objects before they are written."""

from typing import Any, Dict

from ..errors import InvalidObjectError

MANAGED_FIELDS = "managedFields"
SECRET_KIND = "Secret"
SECRET_PAYLOAD_FIELDS = ("data", "stringData")


class ObjectTransformer:
    """Removes noisy or sensitive fields from a resource body.

    The input object is left untouched; a copy with the redactions applied is
    returned. Key order is preserved.
    """

    def __init__(self, include_managed_fields: bool = False, include_secrets: bool = False):
        self.include_managed_fields = include_managed_fields
        self.include_secrets = include_secrets

    def transform(self, obj: Dict[str, Any]) -> Dict[str, Any]:
        metadata = obj.get("metadata") if isinstance(obj, dict) else None
        if not isinstance(metadata, dict):
            raise InvalidObjectError("metadata not found in object")

        result = dict(obj)
        metadata = dict(metadata)
        result["metadata"] = metadata

        if not self.include_managed_fields:
            metadata.pop(MANAGED_FIELDS, None)

        if not self.include_secrets and result.get("kind") == SECRET_KIND:
            for field in SECRET_PAYLOAD_FIELDS:
                result.pop(field, None)

        return result
