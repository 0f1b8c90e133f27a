"""
Tests for the temperature collection service.

Covers per-location isolation, location resolution, throttling and cancellation.
"""

import threading
import unittest
from datetime import datetime
from unittest.mock import Mock, patch

import pytz

from src.bathing_temperature.core.errors import DecodeError, FetchError
from src.bathing_temperature.models import BathingProfile, Detail
from src.bathing_temperature.processing import TemperatureReconciler
from src.bathing_temperature.services.collector import TemperatureCollector


NOW = datetime(2024, 6, 1, 15, 0, tzinfo=pytz.UTC)


def make_profile(code):
    return BathingProfile.from_dict({
        "nutsCode": code,
        "decLat": 59.3,
        "decLong": 18.0,
        "coperSmhi": [{"copernicusData": "12.3", "measHour": "14"}],
    })


def make_detail(code, temperature="18.5"):
    return Detail(nuts_code=code, name=f"Bad {code}", sample_date=1700000000000, sample_temperature=temperature)


class TestTemperatureCollector(unittest.TestCase):
    """Test temperature collector service."""

    def setUp(self):
        """Set up test fixtures."""
        self.api_client = Mock()
        self.api_client.fetch_profile = Mock(side_effect=make_profile)
        self.api_client.fetch_detail = Mock(side_effect=make_detail)

        self.reconciler = TemperatureReconciler(
            sample_source="https://hov.example",
            timezone="UTC",
            logger=Mock()
        )

        self.collector = TemperatureCollector(
            api_client=self.api_client,
            reconciler=self.reconciler,
            location_interval=0,
            logger=Mock()
        )

    def test_collects_sample_and_forecasts(self):
        result = self.collector.collect([("SE0001", "beach-1")], now=NOW)

        self.assertEqual(len(result.observations), 2)
        self.assertEqual([o.temperature for o in result.observations], [18.5, 12.3])
        self.assertTrue(all(o.internal_id == "beach-1" for o in result.observations))
        self.assertEqual(result.processed, ["SE0001"])
        self.assertEqual(result.errors, [])
        self.assertTrue(result.has_data)

    def test_failing_location_is_isolated(self):
        """A failing location neither aborts the run nor hides its neighbours."""
        def fetch_profile(code):
            if code == "SE000B":
                raise FetchError("expectation failed", status_code=500)
            return make_profile(code)

        self.api_client.fetch_profile = Mock(side_effect=fetch_profile)

        result = self.collector.collect(
            [("SE000A", None), ("SE000B", None), ("SE000C", None)], now=NOW
        )

        self.assertEqual(result.processed, ["SE000A", "SE000C"])
        self.assertEqual({o.nuts_code for o in result.observations}, {"SE000A", "SE000C"})
        self.assertEqual(len(result.errors), 1)
        self.assertEqual(result.errors[0].nuts_code, "SE000B")
        self.assertIsInstance(result.errors[0].error, FetchError)

    def test_detail_failure_skips_whole_location(self):
        self.api_client.fetch_detail = Mock(side_effect=DecodeError("malformed JSON"))

        result = self.collector.collect([("SE0001", None)], now=NOW)

        self.assertEqual(result.observations, [])
        self.assertEqual(len(result.errors), 1)
        self.assertFalse(result.has_data)

    def test_missing_profile_is_not_an_error(self):
        self.api_client.fetch_profile = Mock(return_value=None)

        result = self.collector.collect([("SE0001", None)], now=NOW)

        self.assertEqual(result.observations, [])
        self.assertEqual(result.errors, [])
        self.assertEqual(result.processed, ["SE0001"])
        self.api_client.fetch_detail.assert_not_called()

    def test_missing_detail_keeps_forecasts(self):
        self.api_client.fetch_detail = Mock(return_value=None)

        result = self.collector.collect([("SE0001", None)], now=NOW)

        self.assertEqual([o.temperature for o in result.observations], [12.3])

    def test_unparsable_sample_date_keeps_forecasts(self):
        self.api_client.fetch_detail = Mock(return_value=Detail.from_dict({
            "nutsCode": "SE0001",
            "sampleDate": "2023-11-14",
            "sampleTemperature": "18.5",
        }))

        result = self.collector.collect([("SE0001", None)], now=NOW)

        self.assertEqual([o.temperature for o in result.observations], [12.3])
        self.assertEqual(result.errors, [])
        self.assertEqual(result.processed, ["SE0001"])

    def test_resolve_locations(self):
        resolved = TemperatureCollector.resolve_locations([
            ("se0001", None),
            ("SE0002", "beach-2"),
            ("SE0001", "beach-1"),
            ("  ", "ignored"),
            ("SE0003", ""),
        ])

        self.assertEqual(resolved, {"SE0001": "beach-1", "SE0002": "beach-2", "SE0003": "SE0003"})

    def test_resolve_locations_from_mapping(self):
        resolved = TemperatureCollector.resolve_locations({"se0001": None})

        self.assertEqual(resolved, {"SE0001": "SE0001"})

    def test_duplicate_codes_fetched_once(self):
        self.collector.collect([("SE0001", "a"), ("se0001", "b")], now=NOW)

        self.api_client.fetch_profile.assert_called_once_with("SE0001")

    def test_cutoff_computed_once_per_run(self):
        reconciler = Mock()
        reconciler.timezone = "UTC"
        reconciler.cutoff_for.return_value = NOW
        reconciler.reconcile.return_value = []
        collector = TemperatureCollector(self.api_client, reconciler, location_interval=0, logger=Mock())

        collector.collect([("SE0001", None), ("SE0002", None), ("SE0003", None)], now=NOW)

        reconciler.cutoff_for.assert_called_once_with(NOW)
        self.assertEqual(reconciler.reconcile.call_count, 3)

    def test_cancelled_before_start(self):
        cancel_event = threading.Event()
        cancel_event.set()

        result = self.collector.collect([("SE0001", None)], cancel_event=cancel_event, now=NOW)

        self.assertTrue(result.cancelled)
        self.assertEqual(result.processed, [])
        self.api_client.fetch_profile.assert_not_called()

    def test_cancelled_between_locations(self):
        cancel_event = threading.Event()

        def fetch_profile(code):
            cancel_event.set()
            return make_profile(code)

        self.api_client.fetch_profile = Mock(side_effect=fetch_profile)

        result = self.collector.collect(
            [("SE0001", None), ("SE0002", None)], cancel_event=cancel_event, now=NOW
        )

        self.assertTrue(result.cancelled)
        self.assertEqual(result.processed, ["SE0001"])

    @patch("src.bathing_temperature.services.collector.time")
    def test_throttles_between_locations(self, mock_time):
        mock_time.monotonic.return_value = 100.0
        self.collector.location_interval = 0.5

        self.collector.collect([("SE0001", None), ("SE0002", None), ("SE0003", None)], now=NOW)

        self.assertEqual(mock_time.sleep.call_count, 2)
        mock_time.sleep.assert_called_with(0.5)

    @patch("src.bathing_temperature.services.collector.time")
    def test_throttle_skipped_when_interval_elapsed(self, mock_time):
        mock_time.monotonic.side_effect = [100.0, 101.0, 101.0]
        self.collector.location_interval = 0.5

        self.collector.collect([("SE0001", None), ("SE0002", None)], now=NOW)

        mock_time.sleep.assert_not_called()


if __name__ == "__main__":
    unittest.main()
