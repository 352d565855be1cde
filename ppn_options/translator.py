"""Translation of PpnOptions into the Krypton configuration message."""

import logging
from datetime import timedelta
from typing import Any

from ppn_options import constants
from ppn_options import krypton_config
from ppn_options.krypton_config import Duration, KryptonConfig, ReconnectorConfig
from ppn_options.options import DatapathProtocol, PpnOptions

logger = logging.getLogger(__name__)

_NANOS_PER_MICROSECOND = 1000
_MICROSECONDS_PER_SECOND = 1_000_000

_DATAPATH_PROTOCOLS = {
    DatapathProtocol.IPSEC: krypton_config.DatapathProtocol.IPSEC,
    DatapathProtocol.BRIDGE: krypton_config.DatapathProtocol.BRIDGE,
}


def duration_to_proto(duration: timedelta) -> Duration:
    """Convert a timedelta into a seconds and nanos Duration message.

    The conversion is exact down to the microsecond resolution of timedelta.
    For negative durations both seconds and nanos are negative (or zero).

    Args:
        duration: Duration to convert

    Returns:
        Duration: Message holding the same amount of time
    """
    micros = duration // timedelta(microseconds=1)
    sign = -1 if micros < 0 else 1
    seconds, remainder = divmod(abs(micros), _MICROSECONDS_PER_SECOND)
    return Duration(
        seconds=sign * seconds, nanos=sign * remainder * _NANOS_PER_MICROSECOND
    )


def duration_to_msec(duration: timedelta) -> int:
    """Convert a timedelta into whole milliseconds."""
    return duration // timedelta(milliseconds=1)


def _create_reconnector_config(options: PpnOptions) -> ReconnectorConfig:
    fields: dict[str, Any] = {}
    if options.reconnector_initial_time_to_reconnect is not None:
        fields["initial_time_to_reconnect_msec"] = duration_to_msec(
            options.reconnector_initial_time_to_reconnect
        )
    if options.reconnector_session_connection_deadline is not None:
        fields["session_connection_deadline_msec"] = duration_to_msec(
            options.reconnector_session_connection_deadline
        )
    return ReconnectorConfig(**fields)


def create_krypton_config(options: PpnOptions) -> KryptonConfig:
    """Build the Krypton configuration for the given options.

    Settings with a default are always copied. Optional settings are only set
    on the configuration when they were set on the options, so the presence
    of a field in the result mirrors the presence in the options. The
    reconnector sub-message is always present.

    Args:
        options: Options snapshot to translate

    Returns:
        KryptonConfig: The configuration message
    """
    copper_hostname_suffix = options.copper_hostname_suffix
    if not copper_hostname_suffix:
        logger.debug(
            "No copper hostname suffix set, using default %s",
            constants.COPPER_HOSTNAME_SUFFIX,
        )
        copper_hostname_suffix = (constants.COPPER_HOSTNAME_SUFFIX,)

    fields: dict[str, Any] = {
        "zinc_url": options.zinc_url,
        "zinc_public_signing_key_url": options.zinc_public_signing_key_url,
        "brass_url": options.brass_url,
        "service_type": options.zinc_service_type,
        "copper_hostname_suffix": copper_hostname_suffix,
        "reconnector_config": _create_reconnector_config(options),
        "safe_disconnect_enabled": options.safe_disconnect_enabled,
        "ipv6_enabled": options.ipv6_enabled,
        "dynamic_mtu_enabled": options.dynamic_mtu_enabled,
        "integrity_attestation_enabled": options.integrity_attestation_enabled,
        "attach_oauth_token_as_header": options.attach_oauth_token_as_header_enabled,
        "install_crash_signal_handler": (
            options.should_install_krypton_crash_signal_handler
        ),
    }

    if options.bridge_key_length is not None:
        fields["cipher_suite_key_length"] = options.bridge_key_length
    if options.blind_signing_enabled is not None:
        fields["enable_blind_signing"] = options.blind_signing_enabled
    if options.public_metadata_enabled is not None:
        fields["public_metadata_enabled"] = options.public_metadata_enabled
    if options.api_key is not None:
        fields["api_key"] = options.api_key
    if options.copper_controller_address is not None:
        fields["copper_controller_address"] = options.copper_controller_address
    if options.copper_hostname_override is not None:
        fields["copper_hostname_override"] = options.copper_hostname_override
    if options.datapath_protocol is not None:
        fields["datapath_protocol"] = _DATAPATH_PROTOCOLS[options.datapath_protocol]
    if options.rekey_duration is not None:
        fields["rekey_duration"] = duration_to_proto(options.rekey_duration)
    if options.ipv4_keepalive_interval is not None:
        fields["ipv4_keepalive_interval"] = duration_to_proto(
            options.ipv4_keepalive_interval
        )
    if options.ipv6_keepalive_interval is not None:
        fields["ipv6_keepalive_interval"] = duration_to_proto(
            options.ipv6_keepalive_interval
        )

    return KryptonConfig(**fields)
