"""Serialization utilities — configuration dataclass ↔ JSON-safe dict.

Handles Enum fields and nested dataclasses.  Used by the JSON
exporter to save and restore model and process configurations.
"""

from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any

from darkbrem.constants import CONFIG_SCHEMA_VERSION, DEFAULT_APRIME_LHE_ID
from darkbrem.models.config import (
    DarkBremConfig,
    DarkPhoton,
    ProcessConfig,
    ScalingMethod,
)


# =====================================================================
# Generic helpers
# =====================================================================


def _serialize_value(val: Any) -> Any:
    """Convert a value to a JSON-safe type."""
    if val is None:
        return None
    if isinstance(val, Enum):
        return val.value
    if dataclasses.is_dataclass(val) and not isinstance(val, type):
        return _dataclass_to_dict(val)
    if isinstance(val, (list, tuple)):
        return [_serialize_value(v) for v in val]
    if isinstance(val, (int, float, str, bool)):
        return val
    return str(val)


def _dataclass_to_dict(obj: Any) -> dict:
    """Recursively convert a dataclass to a JSON-safe dict."""
    result = {}
    for f in dataclasses.fields(obj):
        val = getattr(obj, f.name)
        result[f.name] = _serialize_value(val)
    return result


# =====================================================================
# Model configuration
# =====================================================================


def config_to_dict(config: DarkBremConfig) -> dict:
    """Serialize DarkBremConfig to a JSON-safe dict.

    Returns:
        Dict with schema_version embedded; the scaling method as its name.
    """
    d = _dataclass_to_dict(config)
    d["schema_version"] = CONFIG_SCHEMA_VERSION
    return d


def dict_to_config(data: dict) -> DarkBremConfig:
    """Deserialize dict to DarkBremConfig.

    Raises:
        ConfigurationError: On an unknown scaling method or a non-positive
            A′ mass.
        KeyError: If the dark photon mass is missing.
    """
    photon = data.get("dark_photon", {})
    method = data.get("method")
    return DarkBremConfig(
        dark_photon=DarkPhoton(
            mass_GeV=photon["mass_GeV"],
            lhe_id=photon.get("lhe_id", DEFAULT_APRIME_LHE_ID),
        ),
        method=ScalingMethod.from_name(method) if method is not None else ScalingMethod.FORWARD_ONLY,
        threshold_GeV=data.get("threshold_GeV", 0.0),
        epsilon=data.get("epsilon", 1.0),
        muons=data.get("muons", False),
    )


# =====================================================================
# Process configuration
# =====================================================================


def process_config_to_dict(config: ProcessConfig) -> dict:
    return _dataclass_to_dict(config)


def dict_to_process_config(data: dict) -> ProcessConfig:
    if not data:
        return ProcessConfig()
    return ProcessConfig(
        only_one_per_event=data.get("only_one_per_event", False),
        global_bias=data.get("global_bias", 1.0),
        cache_xsec=data.get("cache_xsec", True),
        always_create_new_lepton=data.get("always_create_new_lepton", True),
    )
