"""Settings helpers: comma/JSON list parsing for env-configured origin lists."""

import json
from typing import Any

from pydantic.fields import FieldInfo
from pydantic_settings import EnvSettingsSource

_ORIGIN_SCHEMES = ("http://", "https://")


def parse_origins(value: str | list[str]) -> list[str]:
    """Parse an allowed-origins setting.

    Accepts a list, a JSON array string ('["http://a"]') or a comma-separated
    string ('http://a,http://b'). Trailing slashes are dropped. An empty
    result is allowed and disables cross-origin access. Raises ValueError for
    malformed JSON or origins without an http(s) scheme.
    """
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.startswith("["):
            try:
                value = json.loads(stripped)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON array: {e}") from e
            if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
                raise ValueError("JSON value must be an array of strings")
        else:
            value = stripped.split(",")

    origins = [origin.strip().rstrip("/") for origin in value if origin.strip()]
    for origin in origins:
        if origin != "*" and not origin.startswith(_ORIGIN_SCHEMES):
            raise ValueError(f"Origin must start with http:// or https://, got {origin!r}")
    return origins


class OriginListEnvSettingsSource(EnvSettingsSource):
    """Env source that hands list-valued origin settings to the field validator as raw strings.

    Without it pydantic-settings JSON-decodes list fields first and rejects
    the comma-separated form.
    """

    list_fields = frozenset({"cors_origins"})

    def prepare_field_value(
        self,
        field_name: str,
        field: FieldInfo,
        value: Any,  # noqa: ANN401
        value_is_complex: bool,  # noqa: FBT001
    ) -> Any:  # noqa: ANN401
        if field_name in self.list_fields and isinstance(value, str):
            return value
        return super().prepare_field_value(field_name, field, value, value_is_complex)
