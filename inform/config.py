"""
Inform Configuration Management

Handles loading and validation of configuration from TOML file.

Example:
    variant = "unifi"
    log_level = "DEBUG"

    [variants.old-ap]
    magic = "TNBU"
    encrypted = 1
    zlib = 0
    aead = 0
    snappy = 4
    unsupported = { "0x02" = "zlib compression" }
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from dataclasses import dataclass, field

import toml

from .packet.variants import VARIANTS, ProtocolVariant, get_variant


# Default configuration path
DEFAULT_CONFIG_PATH = Path("/etc/inform/config.toml")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_bit(value: Any) -> int:
    """Accept ints or strings such as "0x02"."""
    if isinstance(value, str):
        return int(value, 0)
    return int(value)


def variant_from_dict(name: str, data: Mapping[str, Any]) -> ProtocolVariant:
    """
    Build a ProtocolVariant from a [variants.<name>] table.

    Omitted bits default to the UniFi layout; a bit of 0 disables the
    capability.

    Raises:
        ValueError: If a value is malformed
    """
    base = get_variant(data.get("base", "unifi"))
    if "unsupported" in data:
        unsupported = tuple(
            (_parse_bit(bit), str(what))
            for bit, what in dict(data["unsupported"]).items()
        )
    else:
        unsupported = base.unsupported
    return ProtocolVariant(
        name=name,
        magic=str(data.get("magic", base.magic.decode("latin-1"))).encode("latin-1"),
        encrypted=_parse_bit(data.get("encrypted", base.encrypted)),
        aead=_parse_bit(data.get("aead", base.aead)),
        zlib=_parse_bit(data.get("zlib", base.zlib)),
        snappy=_parse_bit(data.get("snappy", base.snappy)),
        unsupported=unsupported,
    )


@dataclass
class Config:
    """
    Complete inform configuration.
    """
    # Protocol variant name used when decoding
    variant: str = "unifi"

    # Variants declared in the config file, by name
    variants: Dict[str, ProtocolVariant] = field(default_factory=dict)

    # Paths
    config_path: Path = field(default_factory=lambda: DEFAULT_CONFIG_PATH)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'Config':
        """
        Load configuration from file.

        Args:
            config_path: Path to config file (default: /etc/inform/config.toml)

        Returns:
            Loaded configuration (defaults if the file does not exist)

        Raises:
            ValueError: If the file is not valid TOML or holds bad values
        """
        path = config_path or DEFAULT_CONFIG_PATH
        config = cls()
        config.config_path = path

        if not path.exists():
            return config

        try:
            data = toml.load(path)
        except toml.TomlDecodeError as e:
            raise ValueError(f"Invalid configuration file {path}: {e}") from e

        config._apply_dict(data)
        return config

    def _apply_dict(self, data: Dict[str, Any]) -> None:
        """Apply dictionary data to config."""
        # Top-level settings
        if "variant" in data:
            self.variant = str(data["variant"])
        if "log_level" in data:
            self.log_level = str(data["log_level"]).upper()
        if "log_file" in data:
            self.log_file = Path(data["log_file"])

        # Custom variants
        if "variants" in data:
            for name, table in data["variants"].items():
                self.variants[name] = variant_from_dict(name, table)

    @property
    def registry(self) -> Dict[str, ProtocolVariant]:
        """Built-in variants overlaid with the configured ones."""
        merged = dict(VARIANTS)
        merged.update(self.variants)
        return merged

    def get_variant(self, name: Optional[str] = None) -> ProtocolVariant:
        """Resolve a variant name (default: the configured one)."""
        return get_variant(name or self.variant, self.registry)

    def validate(self) -> None:
        """
        Validate configuration.

        Raises:
            ValueError: If configuration is invalid
        """
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")

        if self.variant not in self.registry:
            raise ValueError(f"Unknown protocol variant: {self.variant}")
