"""Resolution of the signing keystore used to build APK sets from a bundle."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..core.config import Config, config
from ..core.errors import KeystoreResolutionError
from ..core.logger import log
from ..core.models import Keystore

DEBUG_KEYSTORE_REFERENCE = "debug"

# Gradle's well-known debug signing identity
DEBUG_KEYSTORE_PASSWORD = "android"
DEBUG_KEY_ALIAS = "androiddebugkey"

# key.properties names, as used by Android Gradle signing configs
PROPERTY_FIELDS = {
    "storeFile": "path",
    "storePassword": "password",
    "keyAlias": "alias",
    "keyPassword": "alias_password",
}


def debug_keystore_path() -> Path:
    return Path.home() / ".android" / "debug.keystore"


def read_properties(path: Path) -> dict[str, str]:
    """Parse a Java ``.properties`` file (``key=value`` / ``key: value`` lines)."""
    values: dict[str, str] = {}
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line[0] in "#!":
            continue
        separators = [i for i in (line.find("="), line.find(":")) if i > 0]
        if not separators:
            values[line] = ""
            continue
        split_at = min(separators)
        values[line[:split_at].strip()] = line[split_at + 1 :].strip()
    return values


def _build(fields: dict[str, Optional[str]], source: str) -> Keystore:
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise KeystoreResolutionError(f"incomplete keystore from {source}: missing {', '.join(missing)}")

    path = Path(fields["path"]).expanduser()
    if not path.is_file():
        raise KeystoreResolutionError(f"keystore file {path} does not exist")

    return Keystore(
        path=path,
        password=fields["password"],
        alias=fields["alias"],
        alias_password=fields["alias_password"],
    )


def _settings_fields(settings: Config, path: Optional[str]) -> dict[str, Optional[str]]:
    return {
        "path": path,
        "password": settings.keystore_password,
        "alias": settings.keystore_alias,
        "alias_password": settings.keystore_alias_password,
    }


def resolve_keystore(reference: Optional[str], settings: Config = config) -> Keystore:
    """Turn a keystore reference into complete signing material.

    ``reference`` may be ``None`` (use the ``keystore_*`` settings), ``"debug"``
    (the SDK debug keystore), a ``.properties`` file, or a keystore path whose
    passwords and alias come from the settings.

    Raises:
        KeystoreResolutionError: If any of path, password, alias or alias
            password cannot be determined, or the keystore file is missing.
    """
    if reference is None:
        return _build(_settings_fields(settings, settings.keystore_path), "settings")

    if reference == DEBUG_KEYSTORE_REFERENCE:
        log.debug("Signing with the SDK debug keystore")
        return _build(
            {
                "path": str(debug_keystore_path()),
                "password": DEBUG_KEYSTORE_PASSWORD,
                "alias": DEBUG_KEY_ALIAS,
                "alias_password": DEBUG_KEYSTORE_PASSWORD,
            },
            "debug keystore",
        )

    ref_path = Path(reference).expanduser()
    if ref_path.suffix == ".properties":
        if not ref_path.is_file():
            raise KeystoreResolutionError(f"keystore properties file {ref_path} does not exist")
        properties = read_properties(ref_path)
        fields = {target: properties.get(key) for key, target in PROPERTY_FIELDS.items()}
        if fields["path"]:
            # storeFile is relative to the properties file, as in Gradle
            fields["path"] = str(ref_path.parent / Path(fields["path"]).expanduser())
        return _build(fields, str(ref_path))

    return _build(_settings_fields(settings, str(ref_path)), str(ref_path))
