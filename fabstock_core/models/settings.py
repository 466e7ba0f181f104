# =============================================================================
# fabstock_core/models/settings.py
# Application settings (storage mode, Supabase endpoint, EmailJS keys)
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Mapping, Union


class StorageMode(Enum):
    """Active storage backend."""
    LOCAL = "local"
    REMOTE = "supabase"


# Attribute name -> stored JSON key
_JSON_KEYS = {
    "mode": "mode",
    "remote_url": "remoteUrl",
    "remote_key": "remoteKey",
    "email_service_id": "emailServiceId",
    "email_template_id": "emailTemplateId",
    "email_public_key": "emailPublicKey",
}
_ATTR_BY_JSON = {v: k for k, v in _JSON_KEYS.items()}


@dataclass(frozen=True)
class AppSettings:
    """
    Process-wide application settings, persisted under ``fabstock_settings``.

    Updates are shallow merges (see ``merge``) so a partial update never drops
    unrelated fields.
    """
    mode: StorageMode = StorageMode.LOCAL
    remote_url: str = ""
    remote_key: str = ""
    email_service_id: str = ""
    email_template_id: str = ""
    email_public_key: str = ""

    def has_remote_credentials(self) -> bool:
        return bool(self.remote_url.strip()) and bool(self.remote_key.strip())

    def uses_remote(self) -> bool:
        """True when the remote backend should actually be used."""
        return self.mode is StorageMode.REMOTE and self.has_remote_credentials()

    def connection_key(self) -> tuple:
        """Fields whose change requires the storage backend to be re-selected."""
        return (self.mode, self.remote_url, self.remote_key)

    def merge(self, partial: Union[AppSettings, Mapping[str, Any]]) -> AppSettings:
        """
        Return new settings with the keys present in ``partial`` overwritten.

        ``partial`` may be another ``AppSettings`` (all fields win) or a mapping
        using either attribute names or stored JSON keys.
        """
        if isinstance(partial, AppSettings):
            return partial

        updates: Dict[str, Any] = {}
        for key, value in partial.items():
            attr = _ATTR_BY_JSON.get(key, key)
            if attr not in _JSON_KEYS:
                continue
            if attr == "mode":
                value = StorageMode(value.value if isinstance(value, StorageMode) else value)
            elif value is None:
                value = ""
            updates[attr] = value
        return replace(self, **updates)

    def to_dict(self) -> Dict[str, Any]:
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            data[_JSON_KEYS[f.name]] = value.value if isinstance(value, StorageMode) else value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AppSettings:
        if not isinstance(data, Mapping):
            return cls()
        try:
            return cls().merge(data)
        except ValueError:
            # Unknown storage mode stored by hand
            return cls().merge({k: v for k, v in data.items() if k != "mode"})
