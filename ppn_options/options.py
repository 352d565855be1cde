"""PPN connection options and their builder."""

import logging
from datetime import timedelta
from enum import Enum
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from ppn_options import constants

logger = logging.getLogger(__name__)


class DatapathProtocol(str, Enum):
    """Datapath used to carry traffic once the session is up."""

    IPSEC = "IPSEC"
    BRIDGE = "BRIDGE"


def check_bridge_key_length(length: int) -> int:
    """Return the key length if the bridge cipher suite supports it.

    Raises:
        ValueError: If the length is not one of the allowed key lengths
    """
    if length not in constants.ALLOWED_BRIDGE_KEY_LENGTHS:
        allowed = ", ".join(str(n) for n in sorted(constants.ALLOWED_BRIDGE_KEY_LENGTHS))
        raise ValueError(
            f"Invalid bridge key length: {length} (allowed values: {allowed})"
        )
    return length


class PpnOptions(BaseModel):
    """Immutable snapshot of the options used to start a PPN connection.

    Instances are normally produced by PpnOptionsBuilder. Optional fields are
    None when they were never set, so an explicit False or zero stays
    distinguishable from "not set". Endpoint and service strings given as
    None or "" fall back to their defaults.
    """

    model_config = ConfigDict(frozen=True)

    # Settings that always carry a value
    zinc_url: str = constants.ZINC_URL
    zinc_public_signing_key_url: str = constants.ZINC_PUBLIC_SIGNING_KEY_URL
    brass_url: str = constants.BRASS_URL
    zinc_oauth_scopes: str = constants.ZINC_OAUTH_SCOPES
    zinc_service_type: str = constants.ZINC_SERVICE_TYPE
    connectivity_check_url: str = constants.CONNECTIVITY_CHECK_URL
    connectivity_check_retry_delay: timedelta = constants.CONNECTIVITY_CHECK_RETRY_DELAY
    connectivity_check_max_retries: int = constants.CONNECTIVITY_CHECK_MAX_RETRIES

    sticky_service: bool = False
    safe_disconnect_enabled: bool = False
    ipv6_enabled: bool = True
    dns_cache_enabled: bool = True
    attach_oauth_token_as_header_enabled: bool = False
    dynamic_mtu_enabled: bool = False
    integrity_attestation_enabled: bool = False
    should_install_krypton_crash_signal_handler: bool = False

    disallowed_applications: tuple[str, ...] = ()
    copper_hostname_suffix: tuple[str, ...] = ()

    # Optional settings, None when never set
    copper_controller_address: str | None = None
    copper_hostname_override: str | None = None
    bridge_key_length: int | None = None
    datapath_protocol: DatapathProtocol | None = None
    rekey_duration: timedelta | None = None
    blind_signing_enabled: bool | None = None
    reconnector_initial_time_to_reconnect: timedelta | None = None
    reconnector_session_connection_deadline: timedelta | None = None
    api_key: str | None = None
    public_metadata_enabled: bool | None = None
    ipv4_keepalive_interval: timedelta | None = None
    ipv6_keepalive_interval: timedelta | None = None

    @field_validator(
        "zinc_url",
        "zinc_public_signing_key_url",
        "brass_url",
        "zinc_oauth_scopes",
        "zinc_service_type",
        "connectivity_check_url",
        mode="before",
    )
    @classmethod
    def _default_empty_strings(cls, value: Any, info: ValidationInfo) -> Any:
        if not value and (value is None or isinstance(value, str)):
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("bridge_key_length")
    @classmethod
    def _validate_bridge_key_length(cls, value: int | None) -> int | None:
        if value is None:
            return value
        return check_bridge_key_length(value)


class PpnOptionsBuilder:
    """Accumulates option values and produces PpnOptions snapshots.

    Setters for settings that have a default silently ignore None and empty
    strings, keeping whatever value was there before. Setters for optional
    settings store the given value as is. Every setter returns the builder so
    calls can be chained.
    """

    def __init__(self):
        self._values: dict[str, Any] = {}

    def _set_non_empty(self, name: str, value: str | None) -> "PpnOptionsBuilder":
        if not value:
            logger.debug("Ignoring empty value for %s", name)
            return self
        self._values[name] = value
        return self

    def _set_if_not_none(self, name: str, value: Any) -> "PpnOptionsBuilder":
        if value is None:
            logger.debug("Ignoring null value for %s", name)
            return self
        self._values[name] = value
        return self

    def _set(self, name: str, value: Any) -> "PpnOptionsBuilder":
        self._values[name] = value
        return self

    def set_zinc_url(self, url: str | None) -> "PpnOptionsBuilder":
        return self._set_non_empty("zinc_url", url)

    def set_zinc_public_signing_key_url(self, url: str | None) -> "PpnOptionsBuilder":
        return self._set_non_empty("zinc_public_signing_key_url", url)

    def set_brass_url(self, url: str | None) -> "PpnOptionsBuilder":
        return self._set_non_empty("brass_url", url)

    def set_zinc_oauth_scopes(self, scopes: str | None) -> "PpnOptionsBuilder":
        return self._set_non_empty("zinc_oauth_scopes", scopes)

    def set_zinc_service_type(self, service_type: str | None) -> "PpnOptionsBuilder":
        return self._set_non_empty("zinc_service_type", service_type)

    def set_connectivity_check_url(self, url: str | None) -> "PpnOptionsBuilder":
        return self._set_non_empty("connectivity_check_url", url)

    def set_connectivity_check_retry_delay(
        self, delay: timedelta | None
    ) -> "PpnOptionsBuilder":
        return self._set_if_not_none("connectivity_check_retry_delay", delay)

    def set_connectivity_check_max_retries(
        self, retries: int | None
    ) -> "PpnOptionsBuilder":
        return self._set_if_not_none("connectivity_check_max_retries", retries)

    def set_copper_controller_address(self, address: str | None) -> "PpnOptionsBuilder":
        return self._set_non_empty("copper_controller_address", address)

    def set_copper_hostname_override(self, hostname: str | None) -> "PpnOptionsBuilder":
        return self._set_non_empty("copper_hostname_override", hostname)

    def set_copper_hostname_suffix(
        self, suffixes: Iterable[str] | None
    ) -> "PpnOptionsBuilder":
        if suffixes is None:
            logger.debug("Ignoring null value for copper_hostname_suffix")
            return self
        return self._set("copper_hostname_suffix", tuple(suffixes))

    def set_disallowed_applications(
        self, applications: Iterable[str] | None
    ) -> "PpnOptionsBuilder":
        if applications is None:
            logger.debug("Ignoring null value for disallowed_applications")
            return self
        return self._set("disallowed_applications", tuple(applications))

    def set_bridge_key_length(self, length: int) -> "PpnOptionsBuilder":
        """Set the bridge cipher suite key length in bits.

        Raises:
            ValueError: If the length is not 128 or 256. The builder is left
                unchanged.
        """
        return self._set("bridge_key_length", check_bridge_key_length(length))

    def set_datapath_protocol(
        self, protocol: DatapathProtocol | None
    ) -> "PpnOptionsBuilder":
        return self._set("datapath_protocol", protocol)

    def set_rekey_duration(self, duration: timedelta | None) -> "PpnOptionsBuilder":
        return self._set("rekey_duration", duration)

    def set_blind_signing_enabled(self, enabled: bool | None) -> "PpnOptionsBuilder":
        return self._set("blind_signing_enabled", enabled)

    def set_reconnector_initial_time_to_reconnect(
        self, duration: timedelta | None
    ) -> "PpnOptionsBuilder":
        return self._set("reconnector_initial_time_to_reconnect", duration)

    def set_reconnector_session_connection_deadline(
        self, duration: timedelta | None
    ) -> "PpnOptionsBuilder":
        return self._set("reconnector_session_connection_deadline", duration)

    def set_api_key(self, api_key: str | None) -> "PpnOptionsBuilder":
        return self._set("api_key", api_key)

    def set_public_metadata_enabled(self, enabled: bool | None) -> "PpnOptionsBuilder":
        return self._set("public_metadata_enabled", enabled)

    def set_ipv4_keepalive_interval(
        self, interval: timedelta | None
    ) -> "PpnOptionsBuilder":
        return self._set("ipv4_keepalive_interval", interval)

    def set_ipv6_keepalive_interval(
        self, interval: timedelta | None
    ) -> "PpnOptionsBuilder":
        return self._set("ipv6_keepalive_interval", interval)

    def set_sticky_service(self, enabled: bool | None) -> "PpnOptionsBuilder":
        return self._set_if_not_none("sticky_service", enabled)

    def set_safe_disconnect_enabled(
        self, enabled: bool | None
    ) -> "PpnOptionsBuilder":
        return self._set_if_not_none("safe_disconnect_enabled", enabled)

    def set_ipv6_enabled(self, enabled: bool | None) -> "PpnOptionsBuilder":
        return self._set_if_not_none("ipv6_enabled", enabled)

    def set_dns_cache_enabled(self, enabled: bool | None) -> "PpnOptionsBuilder":
        return self._set_if_not_none("dns_cache_enabled", enabled)

    def set_attach_oauth_token_as_header_enabled(
        self, enabled: bool | None
    ) -> "PpnOptionsBuilder":
        return self._set_if_not_none("attach_oauth_token_as_header_enabled", enabled)

    def set_dynamic_mtu_enabled(self, enabled: bool | None) -> "PpnOptionsBuilder":
        return self._set_if_not_none("dynamic_mtu_enabled", enabled)

    def set_integrity_attestation_enabled(
        self, enabled: bool | None
    ) -> "PpnOptionsBuilder":
        return self._set_if_not_none("integrity_attestation_enabled", enabled)

    def set_should_install_krypton_crash_signal_handler(
        self, enabled: bool | None
    ) -> "PpnOptionsBuilder":
        return self._set_if_not_none(
            "should_install_krypton_crash_signal_handler", enabled
        )

    def build(self) -> PpnOptions:
        """Create an immutable snapshot of the values set so far.

        Returns:
            PpnOptions: The options snapshot

        Raises:
            pydantic.ValidationError: If a stored value has the wrong type
        """
        return PpnOptions(**self._values)
