"""JSON configuration export/import.

Stores the model configuration (and optionally the process options) as
formatted JSON with a schema version.
"""

from __future__ import annotations

import json

from darkbrem.core.serializers import (
    config_to_dict,
    dict_to_config,
    dict_to_process_config,
    process_config_to_dict,
)
from darkbrem.models.config import DarkBremConfig, ProcessConfig


class JsonExporter:
    """JSON configuration file operations."""

    def export_config(
        self,
        config: DarkBremConfig,
        output_path: str,
        process_config: ProcessConfig | None = None,
    ) -> None:
        """Write configuration as a formatted JSON file.

        Args:
            config: Model configuration.
            output_path: Destination file path (.json).
            process_config: Process options, stored under ``"process"``.
        """
        data = config_to_dict(config)
        if process_config is not None:
            data["process"] = process_config_to_dict(process_config)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def import_config(
        self, input_path: str,
    ) -> tuple[DarkBremConfig, ProcessConfig]:
        """Read configuration from a JSON file.

        Missing process options fall back to their defaults.

        Returns:
            (model configuration, process options).
        """
        with open(input_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return dict_to_config(data), dict_to_process_config(data.get("process", {}))
