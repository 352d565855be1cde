"""Shared pytest fixtures and configuration."""

import pytest
import tempfile
from datetime import timedelta
from pathlib import Path

from ppn_options.options import DatapathProtocol, PpnOptionsBuilder


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def full_options():
    """Options with every setting explicitly set."""
    return (
        PpnOptionsBuilder()
        .set_zinc_url("a")
        .set_zinc_public_signing_key_url("psk")
        .set_brass_url("b")
        .set_zinc_oauth_scopes("c")
        .set_zinc_service_type("d")
        .set_bridge_key_length(128)
        .set_datapath_protocol(DatapathProtocol.BRIDGE)
        .set_blind_signing_enabled(True)
        .set_should_install_krypton_crash_signal_handler(True)
        .set_copper_controller_address("e")
        .set_copper_hostname_override("g")
        .set_copper_hostname_suffix(["f"])
        .set_rekey_duration(timedelta(milliseconds=1005))
        .set_reconnector_initial_time_to_reconnect(timedelta(milliseconds=2))
        .set_reconnector_session_connection_deadline(timedelta(milliseconds=4))
        .set_safe_disconnect_enabled(True)
        .set_ipv6_enabled(False)
        .set_dynamic_mtu_enabled(True)
        .set_integrity_attestation_enabled(True)
        .set_api_key("apiKey")
        .set_attach_oauth_token_as_header_enabled(True)
        .set_ipv4_keepalive_interval(timedelta(milliseconds=8))
        .set_ipv6_keepalive_interval(timedelta(milliseconds=16))
        .set_public_metadata_enabled(True)
        .build()
    )


@pytest.fixture
def sample_config_yaml(temp_dir):
    """Write a sample options YAML file."""
    config_file = temp_dir / "options.yaml"
    config_file.write_text(
        "zinc_url: https://zinc.example.com/auth\n"
        "brass_url: https://brass.example.com/addegress\n"
        "zinc_service_type: test-service\n"
        "bridge_key_length: 256\n"
        "datapath_protocol: ipsec\n"
        "rekey_duration_ms: 1005\n"
        "blind_signing_enabled: false\n"
        "copper_hostname_suffix:\n"
        "  - one.example.com\n"
        "  - two.example.com\n"
    )
    return config_file
