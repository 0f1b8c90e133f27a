"""
Main entry point for the bathing temperature integration.

Collects temperatures for the given bathing sites and publishes them to the
configured output.
"""

import logging
import signal
import sys
import threading
from datetime import timedelta
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .core import Config, setup_logger, LoggerContext, constants
from .api import HavochvattenAPI, ContextBrokerAPI, LwM2MAPI
from .processing import TemperatureReconciler
from .services import (
    TemperatureCollector,
    CollectionResult,
    EntityStorePublisher,
    TelemetryPublisher,
    Publisher,
    PublishSummary,
)


def parse_location_entry(entry: str) -> Optional[Tuple[str, Optional[str]]]:
    """
    Parse a 'CODE' or 'CODE;INTERNAL_ID' entry.

    Returns:
        (code, internal id) or None for blank lines and comments
    """
    entry = entry.strip()
    if not entry or entry.startswith("#"):
        return None

    code, _, internal_id = entry.partition(";")
    return code.strip(), internal_id.strip() or None


def read_locations(nuts_codes: Optional[str], input_file: Optional[str]) -> List[Tuple[str, Optional[str]]]:
    """
    Gather location entries from a comma separated list and/or an input file.

    Args:
        nuts_codes: Comma separated entries
        input_file: Path to a file with one entry per line

    Returns:
        List of (code, internal id) pairs in the order given
    """
    entries: List[str] = []
    if nuts_codes:
        entries.extend(nuts_codes.split(","))

    if input_file:
        with open(Path(input_file), "r", encoding="utf-8") as f:
            entries.extend(f.read().splitlines())

    locations = []
    for entry in entries:
        parsed = parse_location_entry(entry)
        if parsed is not None:
            locations.append(parsed)
    return locations


def install_signal_handlers(cancel_event: threading.Event, logger: Optional[logging.Logger] = None) -> None:
    """Set cancel_event on SIGINT and SIGTERM so a run stops between requests."""
    def _handle_shutdown(signum, frame):
        if logger is not None:
            logger.warning(f"Received {signal.Signals(signum).name}, stopping after the current request")
        cancel_event.set()

    for name in ("SIGINT", "SIGTERM"):
        if hasattr(signal, name):
            signal.signal(getattr(signal, name), _handle_shutdown)


class BathingTemperatureApp:
    """Collect bathing water temperatures and publish them downstream."""

    def __init__(self, config_file: Optional[str] = None, output: Optional[str] = None):
        """
        Initialize application.

        Args:
            config_file: Path to configuration file
            output: Output type overriding configuration ('fiware' or 'lwm2m')

        Raises:
            ValueError: If the configuration is invalid or no output can be resolved
        """
        self.config = Config(config_file)
        self.output = self.config.resolve_output(output)

        self.logger = setup_logger()
        self.logger.info("=" * 60)
        self.logger.info("Bathing Water Temperature Integration")
        self.logger.info("=" * 60)
        self.logger.info(f"Configuration: {self.config}, output: {self.output}")

        self.hov_client: Optional[HavochvattenAPI] = None
        self.collector: Optional[TemperatureCollector] = None
        self.publisher: Optional[Publisher] = None

    def initialize_components(self) -> None:
        """Initialize all application components."""
        self.logger.info("Initializing components...")

        self.hov_client = HavochvattenAPI(
            base_url=self.config.hov_base_url,
            timeout=self.config.hov_timeout,
            max_retries=self.config.hov_max_retries,
            logger=self.logger
        )

        reconciler = TemperatureReconciler(
            sample_source=self.hov_client.source,
            timezone=self.config.timezone,
            future_tolerance=timedelta(minutes=self.config.future_tolerance_minutes),
            logger=self.logger
        )

        self.collector = TemperatureCollector(
            api_client=self.hov_client,
            reconciler=reconciler,
            location_interval=self.config.location_interval,
            logger=self.logger
        )

        self.publisher = self.create_publisher()

        self.logger.info("All components initialized successfully")

    def create_publisher(self) -> Publisher:
        """Create the publisher for the resolved output."""
        if self.output == constants.OUTPUT_LWM2M:
            return TelemetryPublisher(
                api_client=LwM2MAPI(
                    endpoint_url=self.config.lwm2m_url,
                    content_type=self.config.lwm2m_content_type,
                    verify_ssl=self.config.verify_ssl,
                    logger=self.logger
                ),
                include_record_time=self.config.lwm2m_include_record_time,
                stop_on_error=self.config.lwm2m_stop_on_error,
                logger=self.logger
            )

        return EntityStorePublisher(
            api_client=ContextBrokerAPI(
                base_url=self.config.context_broker_url,
                verify_ssl=self.config.verify_ssl,
                logger=self.logger
            ),
            identity_mode=self.config.identity_mode,
            stop_on_error=self.config.context_broker_stop_on_error,
            logger=self.logger
        )

    def run(
        self,
        locations: Iterable[Tuple[str, Optional[str]]],
        cancel_event: Optional[threading.Event] = None
    ) -> bool:
        """
        Collect and publish temperatures for the given locations.

        Args:
            locations: (code, internal id) pairs
            cancel_event: Once set, no further location is fetched and no
                          further observation is published

        Returns:
            True if at least one location was processed, every
            observation was published and the run was not cancelled
        """
        try:
            self.initialize_components()

            if not all([self.collector, self.publisher]):
                raise RuntimeError("Components not properly initialized")

            with LoggerContext(self.logger, "temperature collection") as ctx:
                result: CollectionResult = self.collector.collect(locations, cancel_event=cancel_event)
                ctx.record(
                    locations=len(result.processed),
                    failed=len(result.errors),
                    observations=len(result.observations)
                )

            for error in result.errors:
                self.logger.warning(f"Skipped location {error}")

            if not result.has_data:
                self.logger.error("No location could be processed")
                return False

            if not result.observations:
                self.logger.warning("No temperatures to publish")
                return not result.cancelled

            with LoggerContext(self.logger, f"publishing to {self.output}") as ctx:
                summary: PublishSummary = self.publisher.publish(
                    result.observations, cancel_event=cancel_event
                )
                ctx.record(
                    published=summary.published,
                    failed=len(summary.failures),
                    skipped=summary.skipped
                )

            return summary.ok and not result.cancelled

        finally:
            self.close()

    def close(self) -> None:
        """Close all HTTP sessions."""
        if self.hov_client:
            self.hov_client.close()
        api_client = getattr(self.publisher, "api_client", None)
        if api_client:
            api_client.close()


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Bathing water temperature integration"
    )
    parser.add_argument(
        "--nutscodes",
        type=str,
        default=None,
        help="Comma separated location codes, optionally CODE;INTERNAL_ID"
    )
    parser.add_argument(
        "--input",
        type=str,
        default=None,
        help="File with one location code (or CODE;INTERNAL_ID) per line"
    )
    parser.add_argument(
        "--output",
        type=str,
        choices=list(constants.OUTPUT_TYPES),
        default=None,
        help="Output type. Default: lwm2m if LWM2M_ENDPOINT_URL is set, else fiware"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file"
    )

    args = parser.parse_args()

    if not args.nutscodes and not args.input:
        print("At least one location code must be given with --nutscodes or --input")
        sys.exit(1)

    try:
        locations = read_locations(args.nutscodes, args.input)
    except OSError as e:
        print(f"Could not read input file: {e}")
        sys.exit(1)

    if not locations:
        print("No location codes found")
        sys.exit(1)

    try:
        app = BathingTemperatureApp(config_file=args.config, output=args.output)
    except (ValueError, FileNotFoundError) as e:
        print(f"Invalid configuration: {e}")
        sys.exit(1)

    cancel_event = threading.Event()
    install_signal_handlers(cancel_event, app.logger)

    try:
        ok = app.run(locations, cancel_event=cancel_event)
    except Exception as e:
        app.logger.error(f"Application error: {e}", exc_info=True)
        sys.exit(1)

    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
