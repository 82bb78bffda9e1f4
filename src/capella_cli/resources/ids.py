"""Composite identifiers for resources owned by several parents.

Import ids look like ``organization_id=<id>,project_id=<id>,cluster_id=<id>,id=<id>``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from capella_cli.client.errors import InvalidImportError

ORGANIZATION_ID = "organization_id"
PROJECT_ID = "project_id"
CLUSTER_ID = "cluster_id"
BUCKET_ID = "bucket_id"
ID = "id"


def _example(required_keys: Sequence[str]) -> str:
    return ",".join(f"{key}=<{key}>" for key in required_keys)


def parse_composite_id(raw: str, required_keys: Sequence[str]) -> dict[str, str]:
    """Parse ``key=value`` pairs separated by commas.

    Every key in *required_keys* must be present with a non-empty value;
    unknown keys are ignored.

    Raises:
        InvalidImportError: naming the first missing key.
    """
    pairs: dict[str, str] = {}
    for part in raw.split(","):
        key, sep, value = part.partition("=")
        if sep:
            pairs[key.strip()] = value.strip()
    for key in required_keys:
        if not pairs.get(key):
            raise InvalidImportError(
                f"missing '{key}' in {raw!r}; expected format {_example(required_keys)}"
            )
    return {key: pairs[key] for key in required_keys}


def _is_composite(raw: str, keys: Sequence[str]) -> bool:
    # Bucket ids are base64 and may end in "=" padding.
    return any(part.partition("=")[0].strip() in keys for part in raw.split(",") if "=" in part)


def validate_ids(values: Mapping[str, str | None], import_key: str = ID) -> dict[str, str]:
    """Resolve the ids of a tracked resource.

    Either all ids are already known, or the *import_key* attribute holds a
    composite import id that supplies them.
    """
    keys = list(values)
    raw = values.get(import_key)
    if raw and _is_composite(raw, keys):
        return parse_composite_id(raw, keys)
    for key, value in values.items():
        if not value:
            raise InvalidImportError(
                f"missing '{key}'; import with {_example(keys)}"
            )
    return {key: value for key, value in values.items() if value}
