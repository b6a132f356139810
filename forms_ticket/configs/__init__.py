"""Configuration package for the ticket codec.

This package provides machine-key configuration loading from YAML files.

Usage:
    from forms_ticket.configs import load_profile, list_profiles

    # List available profiles
    profiles = list_profiles()

    # Load a specific profile
    config = load_profile("example")

Every configuration is merged over ``base.yaml``, which holds the legacy
algorithm defaults (TripleDES + SHA1). Key material lives in a
``machine_key`` section:

    machine_key:
      decryption_key: "<hex>"
      validation_key: "<hex>"
      encryption_method: TripleDES
      validation_method: SHA1
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

import yaml

from forms_ticket.core.algorithms import EncryptionMethod, ValidationMethod
from forms_ticket.crypto.exceptions import ConfigurationError

CONFIGS_DIR = Path(__file__).parent
PROFILES_DIR = CONFIGS_DIR / "profiles"


@dataclass
class CodecSettings:
    """Validated codec settings.

    Attributes
    ----------
    decryption_key : str
        Cipher key as hex.
    validation_key : str
        HMAC key as hex.
    encryption_method : EncryptionMethod
        Cipher algorithm.
    validation_method : ValidationMethod
        Hash family.
    """

    decryption_key: str
    validation_key: str
    encryption_method: EncryptionMethod = EncryptionMethod.TRIPLE_DES
    validation_method: ValidationMethod = ValidationMethod.SHA1


def load_base_config() -> Dict[str, Any]:
    """Load the base configuration.

    Returns
    -------
    Dict[str, Any]
        Base configuration dictionary.
    """
    base_path = CONFIGS_DIR / "base.yaml"
    if not base_path.exists():
        return {}

    with open(base_path, "r") as f:
        return yaml.safe_load(f) or {}


def load_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a configuration file with base inheritance.

    Parameters
    ----------
    path : str or Path
        Path to a YAML file.

    Returns
    -------
    Dict[str, Any]
        Merged configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If the file doesn't exist.
    ConfigurationError
        If the file is not a YAML mapping.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config not found: {config_path}")

    with open(config_path, "r") as f:
        override = yaml.safe_load(f) or {}

    if not isinstance(override, dict):
        raise ConfigurationError(f"Config must be a mapping: {config_path}")

    return _deep_merge(load_base_config(), override)


def load_profile(name: str) -> Dict[str, Any]:
    """Load a named profile with base inheritance.

    Parameters
    ----------
    name : str
        Profile name (without .yaml extension).

    Returns
    -------
    Dict[str, Any]
        Merged configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If profile file doesn't exist.
    """
    profile_path = PROFILES_DIR / f"{name}.yaml"
    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_path}")

    return load_config_file(profile_path)


def list_profiles() -> List[str]:
    """List available profiles.

    Returns
    -------
    List[str]
        List of profile names.
    """
    if not PROFILES_DIR.exists():
        return []
    return sorted(f.stem for f in PROFILES_DIR.glob("*.yaml"))


def codec_settings(config: Mapping[str, Any]) -> CodecSettings:
    """Extract and validate codec settings from a configuration mapping.

    Parameters
    ----------
    config : Mapping[str, Any]
        Configuration with a ``machine_key`` section.

    Returns
    -------
    CodecSettings
        Validated settings.

    Raises
    ------
    ConfigurationError
        If the section or a key is missing, a key is not a string, or an
        algorithm name is not recognised.
    """
    section = config.get("machine_key") if isinstance(config, Mapping) else None
    if not isinstance(section, Mapping):
        raise ConfigurationError("Configuration has no 'machine_key' section")

    keys = {}
    for field_name in ("decryption_key", "validation_key"):
        value = section.get(field_name)
        if value is None or value == "":
            raise ConfigurationError(f"machine_key.{field_name} is missing")
        if not isinstance(value, str):
            # Unquoted all-digit hex is parsed by YAML as a number.
            raise ConfigurationError(
                f"machine_key.{field_name} must be a quoted hex string"
            )
        keys[field_name] = value

    try:
        encryption_method = EncryptionMethod.parse(
            section.get("encryption_method", EncryptionMethod.TRIPLE_DES)
        )
        validation_method = ValidationMethod.parse(
            section.get("validation_method", ValidationMethod.SHA1)
        )
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    return CodecSettings(
        decryption_key=keys["decryption_key"],
        validation_key=keys["validation_key"],
        encryption_method=encryption_method,
        validation_method=validation_method,
    )


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """Deep merge two dictionaries.

    Parameters
    ----------
    base : Dict
        Base dictionary.
    override : Dict
        Override dictionary (values take precedence).

    Returns
    -------
    Dict
        Merged dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


__all__ = [
    "CodecSettings",
    "codec_settings",
    "load_base_config",
    "load_config_file",
    "load_profile",
    "list_profiles",
    "CONFIGS_DIR",
    "PROFILES_DIR",
]
