"""
Configuration module for the bathing temperature integration.

Loads configuration from JSON file and environment variables.
"""

import copy
import json
import os
from typing import Dict, Any, Optional
from pathlib import Path

from . import constants
from .date_utils import DateUtils


DEFAULT_CONFIG: Dict[str, Any] = {
    "havochvatten": {
        "base_url": constants.DEFAULT_HOV_URL,
        "timeout": constants.DEFAULT_TIMEOUT,
        "max_retries": constants.DEFAULT_MAX_RETRIES,
    },
    "context_broker": {
        "url": "",
        "identity": constants.IDENTITY_PER_LOCATION,
        "stop_on_error": False,
    },
    "lwm2m": {
        "url": "",
        "content_type": constants.SENML_CONTENT_TYPE,
        "include_record_time": False,
        "stop_on_error": False,
    },
    "processing": {
        "timezone": constants.DEFAULT_TIMEZONE,
        "location_interval": constants.DEFAULT_LOCATION_INTERVAL,
        "future_tolerance_minutes": int(constants.FUTURE_TOLERANCE.total_seconds() // 60),
    },
    "tls_skip_verify": False,
    "output": None,
}


class Config:
    """Configuration manager for the application."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to configuration JSON file. If None, uses CONFIG_FILE env var
                        or defaults to 'config.json'. Only an explicitly named file
                        is required to exist.
        """
        self._explicit_file = bool(config_file or os.getenv("CONFIG_FILE"))
        self.config_file = config_file or os.getenv("CONFIG_FILE", "config.json")
        self.config: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        self._load_config()
        self._override_from_env()
        self._validate_config()

    def _load_config(self) -> None:
        """Load configuration from JSON file on top of the defaults."""
        config_path = Path(self.config_file)
        if not config_path.exists():
            if self._explicit_file:
                raise FileNotFoundError(f"Configuration file not found: {self.config_file}")
            return

        with open(config_path, "r", encoding="utf-8") as f:
            loaded = json.load(f)

        for key, value in loaded.items():
            if isinstance(value, dict) and isinstance(self.config.get(key), dict):
                self.config[key].update(value)
            else:
                self.config[key] = value

    def _override_from_env(self) -> None:
        """Override configuration with environment variables."""
        if os.getenv("HOV_BADPLATSEN_URL"):
            self.config["havochvatten"]["base_url"] = os.getenv("HOV_BADPLATSEN_URL")

        if os.getenv("CONTEXT_BROKER_URL"):
            self.config["context_broker"]["url"] = os.getenv("CONTEXT_BROKER_URL")

        if os.getenv("LWM2M_ENDPOINT_URL"):
            self.config["lwm2m"]["url"] = os.getenv("LWM2M_ENDPOINT_URL")

        if os.getenv("OUTPUT_TYPE"):
            self.config["output"] = os.getenv("OUTPUT_TYPE")

        if os.getenv("PROCESSING_TIMEZONE"):
            self.config["processing"]["timezone"] = os.getenv("PROCESSING_TIMEZONE")

        if os.getenv("TLS_SKIP_VERIFY") is not None:
            self.config["tls_skip_verify"] = os.getenv("TLS_SKIP_VERIFY") == "1"

    def _validate_config(self) -> None:
        """Validate values that do not depend on the selected output."""
        if not self.hov_base_url:
            raise ValueError("Missing required configuration key: havochvatten.base_url")

        if self.identity_mode not in constants.IDENTITY_MODES:
            raise ValueError(
                f"Invalid context_broker.identity: {self.identity_mode} "
                f"(expected one of {', '.join(constants.IDENTITY_MODES)})"
            )

        output = self.get("output")
        if output and output not in constants.OUTPUT_TYPES:
            raise ValueError(
                f"Invalid output type: {output} "
                f"(expected one of {', '.join(constants.OUTPUT_TYPES)})"
            )

        if self.location_interval < 0:
            raise ValueError("processing.location_interval must be >= 0")

        DateUtils.parse_timezone(self.timezone)

    def resolve_output(self, output: Optional[str] = None) -> str:
        """
        Resolve which sink to publish to.

        An explicit output wins. Otherwise LwM2M is chosen when its endpoint
        is configured, then the context broker.

        Args:
            output: Output type requested by the caller

        Returns:
            Output type ('fiware' or 'lwm2m')

        Raises:
            ValueError: If no output can be resolved or its URL is missing
        """
        output = output or self.get("output")

        if not output:
            if self.lwm2m_url:
                output = constants.OUTPUT_LWM2M
            elif self.context_broker_url:
                output = constants.OUTPUT_FIWARE

        if not output:
            raise ValueError(
                "No output type selected and neither LWM2M_ENDPOINT_URL "
                "nor CONTEXT_BROKER_URL is configured"
            )

        if output not in constants.OUTPUT_TYPES:
            raise ValueError(f"Invalid output type: {output}")

        if output == constants.OUTPUT_LWM2M and not self.lwm2m_url:
            raise ValueError("No URL to lwm2m endpoint specified (LWM2M_ENDPOINT_URL)")

        if output == constants.OUTPUT_FIWARE and not self.context_broker_url:
            raise ValueError("No URL to context broker specified (CONTEXT_BROKER_URL)")

        return output

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key (supports dot notation).

        Args:
            key: Configuration key (e.g., 'havochvatten.base_url')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split(".")
        value = self.config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    @property
    def hov_base_url(self) -> str:
        """Get Havochvatten API base URL."""
        return self.get("havochvatten.base_url", "")

    @property
    def hov_timeout(self) -> int:
        """Get upstream request timeout in seconds."""
        return self.get("havochvatten.timeout", constants.DEFAULT_TIMEOUT)

    @property
    def hov_max_retries(self) -> int:
        """Get maximum upstream retry attempts."""
        return self.get("havochvatten.max_retries", constants.DEFAULT_MAX_RETRIES)

    @property
    def context_broker_url(self) -> str:
        """Get context broker URL."""
        return self.get("context_broker.url", "")

    @property
    def identity_mode(self) -> str:
        """Get entity identity granularity ('location' or 'observation')."""
        return self.get("context_broker.identity", constants.IDENTITY_PER_LOCATION)

    @property
    def context_broker_stop_on_error(self) -> bool:
        """Abort the publish batch on the first hard context broker failure."""
        return self.get("context_broker.stop_on_error", False)

    @property
    def lwm2m_url(self) -> str:
        """Get LwM2M endpoint URL."""
        return self.get("lwm2m.url", "")

    @property
    def lwm2m_content_type(self) -> str:
        """Get media type used when posting SenML packs."""
        return self.get("lwm2m.content_type", constants.SENML_CONTENT_TYPE)

    @property
    def lwm2m_include_record_time(self) -> bool:
        """Whether the value record carries its own timestamp."""
        return self.get("lwm2m.include_record_time", False)

    @property
    def lwm2m_stop_on_error(self) -> bool:
        """Abort the publish batch on the first LwM2M failure."""
        return self.get("lwm2m.stop_on_error", False)

    @property
    def verify_ssl(self) -> bool:
        """Whether downstream clients verify TLS certificates."""
        return not self.get("tls_skip_verify", False)

    @property
    def timezone(self) -> str:
        """Get timezone forecast hours are expressed in."""
        return self.get("processing.timezone", constants.DEFAULT_TIMEZONE)

    @property
    def location_interval(self) -> float:
        """Get minimum interval between location fetches in seconds."""
        return float(self.get("processing.location_interval", constants.DEFAULT_LOCATION_INTERVAL))

    @property
    def future_tolerance_minutes(self) -> int:
        """Get tolerance for forecast values dated in the near future."""
        return self.get("processing.future_tolerance_minutes", 5)

    def __repr__(self) -> str:
        """String representation of config."""
        return f"Config(file={self.config_file}, output={self.get('output')})"
