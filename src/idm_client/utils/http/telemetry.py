"""Client telemetry header construction.

Builds the base64-encoded JSON document describing the SDK and the
runtime it runs on, sent with each request when telemetry is enabled.
"""

import base64
import json
import platform
from typing import Any, Dict

from ... import __version__

TELEMETRY_HEADER = "Client-Telemetry"


class HttpTelemetry:
    """Process-wide telemetry data for outgoing requests."""

    _data: Dict[str, Any] = {}

    @classmethod
    def set_package(cls, name: str, version: str) -> None:
        cls._data["name"] = name
        cls._data["version"] = version

    @classmethod
    def set_core_package(cls) -> None:
        """Describe this package and the Python runtime."""
        cls.set_package("idm-client", __version__)
        cls.set_env_property("python", platform.python_version())

    @classmethod
    def set_env_property(cls, name: str, version: str) -> None:
        """Add a dependency or platform version to the ``env`` section."""
        env = cls._data.get("env")
        if not isinstance(env, dict):
            env = cls._data["env"] = {}
        env[name] = version

    @classmethod
    def set_environment_data(cls, data: Dict[str, str]) -> None:
        cls._data["env"] = dict(data)

    @classmethod
    def get(cls) -> Dict[str, Any]:
        if "name" not in cls._data:
            cls.set_core_package()
        return cls._data

    @classmethod
    def build(cls) -> str:
        """Return the header-formatted telemetry string."""
        payload = json.dumps(cls.get(), separators=(",", ":"))
        return base64.b64encode(payload.encode("utf-8")).decode("ascii")

    @classmethod
    def reset(cls) -> None:
        cls._data = {}
