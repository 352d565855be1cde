"""Configuration message consumed by the Krypton session runtime."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_serializer


class DatapathProtocol(Enum):
    """Datapath protocol requested from the egress."""

    DEFAULT = 0
    IPSEC = 1
    BRIDGE = 2


class ConfigMessage(BaseModel):
    """Base class for frozen configuration messages with field presence.

    A field is present when it was passed at construction time, regardless
    of its value. Absent scalar fields read as their zero value and absent
    message fields read as None.
    """

    model_config = ConfigDict(frozen=True)

    def has_field(self, name: str) -> bool:
        if name not in type(self).model_fields:
            raise ValueError(f"{type(self).__name__} has no field {name!r}")
        return name in self.model_fields_set


class Duration(ConfigMessage):
    """Span of time as whole seconds plus nanoseconds."""

    seconds: int = 0
    nanos: int = 0


class ReconnectorConfig(ConfigMessage):
    """Timing policy for re-establishing a dropped session."""

    initial_time_to_reconnect_msec: int = 0
    session_connection_deadline_msec: int = 0


class KryptonConfig(ConfigMessage):
    """Configuration used to start a Krypton session."""

    zinc_url: str = ""
    zinc_public_signing_key_url: str = ""
    brass_url: str = ""
    service_type: str = ""

    cipher_suite_key_length: int = 0
    enable_blind_signing: bool = False
    public_metadata_enabled: bool = False
    api_key: str = ""
    attach_oauth_token_as_header: bool = False

    copper_controller_address: str = ""
    copper_hostname_override: str = ""
    copper_hostname_suffix: tuple[str, ...] = ()

    datapath_protocol: DatapathProtocol = DatapathProtocol.DEFAULT
    rekey_duration: Duration | None = None
    reconnector_config: ReconnectorConfig | None = None
    ipv4_keepalive_interval: Duration | None = None
    ipv6_keepalive_interval: Duration | None = None

    safe_disconnect_enabled: bool = False
    ipv6_enabled: bool = False
    dynamic_mtu_enabled: bool = False
    integrity_attestation_enabled: bool = False
    install_crash_signal_handler: bool = False

    @field_serializer("datapath_protocol")
    def _serialize_datapath_protocol(self, protocol: DatapathProtocol) -> str:
        return protocol.name
