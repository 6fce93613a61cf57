"""
Flattening of nested request fields into Stripe's bracketed form keys.

    {"metadata": {"city": "Oslo"}}  ->  {"metadata[city]": "Oslo"}
"""

from typing import Any, Mapping, MutableMapping

NESTED_FIELDS = ("metadata", "shipping")


def expand(namespace: str, fields: MutableMapping[str, Any]) -> None:
    """Replace fields[namespace] by "<namespace>[<key>]" entries, in place.

    No-op when the value is absent or not a mapping.
    """
    data = fields.get(namespace)
    if not isinstance(data, Mapping):
        return
    del fields[namespace]
    for key, value in data.items():
        fields[f"{namespace}[{key}]"] = value


def flatten(fields: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    for namespace in NESTED_FIELDS:
        expand(namespace, fields)
    return fields
