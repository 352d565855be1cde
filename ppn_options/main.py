#!/usr/bin/env python3
"""Command line entrypoint that resolves PPN options into a Krypton config."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TypeVar, cast

import yaml
from pydantic import ValidationError

from ppn_options.loader import ConfigurationError, options_from_dict, read_config_file
from ppn_options.options import DatapathProtocol
from ppn_options.translator import create_krypton_config


class Args(argparse.Namespace):
    config: Path | None
    zinc_url: str | None
    brass_url: str | None
    service_type: str | None
    datapath_protocol: str | None
    bridge_key_length: int | None
    api_key: str | None
    log_level: str
    rich_logs: bool
    print_options: bool


logger = logging.getLogger(__name__)


def parse_args() -> Args:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Resolve PPN options and print the resulting Krypton configuration",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML file with PPN options",
    )

    # Configuration overrides (take precedence over the config file)
    parser.add_argument(
        "--zinc-url",
        help="URL of the Zinc authentication server",
    )

    parser.add_argument(
        "--brass-url",
        help="URL of the Brass egress server",
    )

    parser.add_argument(
        "--service-type",
        help="Zinc service type",
    )

    parser.add_argument(
        "--datapath-protocol",
        choices=[p.value for p in DatapathProtocol],
        help="Datapath protocol to request",
    )

    parser.add_argument(
        "--bridge-key-length",
        type=int,
        help="Bridge cipher suite key length in bits (128 or 256)",
    )

    parser.add_argument(
        "--api-key",
        help="API key sent along with authentication requests",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Set the logging level",
    )

    parser.add_argument(
        "--rich-logs",
        action="store_true",
        help="Enable rich colored logging output",
    )

    parser.add_argument(
        "--print-options",
        action="store_true",
        help="Print the resolved options instead of the Krypton configuration",
    )

    return cast(Args, parser.parse_args())


def configure_logging(log_level: str, use_rich: bool = False) -> None:
    """Configure logging with optional rich formatting.

    Logs go to stderr so that stdout only carries the printed JSON.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        use_rich: Whether to use rich colored logging
    """
    if use_rich:
        from rich.console import Console
        from rich.logging import RichHandler

        logging.basicConfig(
            level=getattr(logging, log_level),
            format="%(message)s",
            datefmt="[%X]",
            handlers=[
                RichHandler(
                    console=Console(stderr=True),
                    show_path=True,
                    show_time=True,
                    show_level=True,
                    markup=True,
                    rich_tracebacks=True,
                )
            ],
        )
    else:
        logging.basicConfig(
            level=getattr(logging, log_level),
            format="%(asctime)s [%(name)s:%(filename)s:%(lineno)d] %(levelname)s: %(message)s",
            stream=sys.stderr,
        )


T = TypeVar("T")


def first_not_none(*values: T | None) -> T | None:
    for v in values:
        if v is not None:
            return v
    return None


def main() -> int:
    """Main function."""
    args = parse_args()

    configure_logging(args.log_level, args.rich_logs)

    try:
        config_dict = {}

        if args.config:
            config_dict = read_config_file(args.config)

        overrides = {
            "zinc_url": args.zinc_url,
            "brass_url": args.brass_url,
            "zinc_service_type": args.service_type,
            "datapath_protocol": args.datapath_protocol,
            "bridge_key_length": args.bridge_key_length,
            "api_key": args.api_key,
        }
        for key, value in overrides.items():
            resolved = first_not_none(value, config_dict.get(key))
            if resolved is not None:
                config_dict[key] = resolved

        options = options_from_dict(config_dict)

        if args.print_options:
            logger.info("Printing resolved options")
            output = options.model_dump(mode="json")
        else:
            logger.info("Printing Krypton configuration")
            output = create_krypton_config(options).model_dump(
                mode="json", exclude_unset=True
            )
        print(json.dumps(output, indent=2, sort_keys=True))

    except ValidationError as e:
        logger.error(
            "Invalid options\n"
            + "\n".join(
                [
                    f"{'.'.join([str(loc) for loc in err['loc']])}: {err['msg']} (got {err['input']})"
                    for err in e.errors()
                ]
            )
        )
        return 1
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        return 1
    except ValueError as e:
        logger.error("Invalid option value: %s", e)
        return 1
    except yaml.YAMLError as e:
        logger.error("YAML parsing error in %s: %s", args.config, e)
        return 1
    except FileNotFoundError as e:
        logger.error("Configuration file not found: %s", e)
        return 1
    except Exception as e:
        logger.error("Error resolving options: %s", e, exc_info=True)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
