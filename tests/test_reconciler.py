"""
Tests for temperature reconciliation.

Covers sampled and forecast values, the future-value bound and parse failures.
"""

from datetime import date, datetime, timedelta

import pytest  # type: ignore
import pytz

from src.bathing_temperature.core import constants
from src.bathing_temperature.models import BathingProfile, Detail
from src.bathing_temperature.processing import TemperatureReconciler


BASE_URL = "https://badplatsen.havochvatten.se/badplatsen/api"
NOW = datetime(2024, 6, 1, 15, 0, tzinfo=pytz.UTC)
TODAY = date(2024, 6, 1)


def forecast(value, hour):
    return {"copernicusData": value, "measHour": hour}


def make_profile(forecasts=None, code="SE0001"):
    return BathingProfile.from_dict({
        "nutsCode": code,
        "name": "Testbadet",
        "decLat": 59.3,
        "decLong": 18.0,
        "coperSmhi": forecasts or [],
    })


class TestTemperatureReconciler:
    """Test cases for TemperatureReconciler."""

    @pytest.fixture
    def reconciler(self):
        """Reconciler working in UTC to keep hour arithmetic simple."""
        return TemperatureReconciler(sample_source=BASE_URL, timezone="UTC")

    @pytest.fixture
    def cutoff(self, reconciler):
        return reconciler.cutoff_for(NOW)

    def test_cutoff_is_five_minutes_ahead(self, reconciler):
        assert reconciler.cutoff_for(NOW) == NOW + timedelta(minutes=5)

    def test_sampled_temperature(self, reconciler, cutoff, load_fixture):
        """Sample with profile without forecasts yields exactly one observation."""
        detail = Detail.from_dict(load_fixture("detail_SE0001.json"))
        profile = BathingProfile.from_dict(load_fixture("profile_SE0001.json"))

        result = reconciler.reconcile("SE0001", "beach-1", detail, profile, cutoff, TODAY)

        assert len(result) == 1
        observation = result[0]
        assert observation.temperature == 18.5
        assert observation.latitude == 59.3
        assert observation.longitude == 18.0
        assert observation.source == BASE_URL
        assert observation.internal_id == "beach-1"
        assert observation.observed_at == datetime(2023, 11, 14, 22, 13, 20, tzinfo=pytz.UTC)

    def test_sample_date_is_truncated_to_seconds(self, reconciler, cutoff):
        detail = Detail(nuts_code="SE0001", sample_date=1700000000999, sample_temperature="17")

        result = reconciler.reconcile("SE0001", "SE0001", detail, make_profile(), cutoff, TODAY)

        assert result[0].observed_at.timestamp() == 1700000000

    def test_forecast_without_detail(self, reconciler, cutoff):
        """Absent detail and one valid past forecast yields one forecast observation."""
        profile = make_profile([forecast("12.3", "14")])

        result = reconciler.reconcile("SE0001", "SE0001", None, profile, cutoff, TODAY)

        assert len(result) == 1
        assert result[0].temperature == 12.3
        assert result[0].source == constants.FORECAST_SOURCE
        assert result[0].observed_at == datetime(2024, 6, 1, 14, 0, tzinfo=pytz.UTC)

    def test_missing_profile_yields_nothing(self, reconciler, cutoff, load_fixture):
        detail = Detail.from_dict(load_fixture("detail_SE0001.json"))

        assert reconciler.reconcile("SE0001", "SE0001", detail, None, cutoff, TODAY) == []

    def test_future_forecast_excluded(self, reconciler, cutoff):
        profile = make_profile([forecast("12.0", "16"), forecast("13.0", "23")])

        assert reconciler.reconcile("SE0001", "SE0001", None, profile, cutoff, TODAY) == []

    def test_forecast_at_cutoff_excluded(self, reconciler):
        profile = make_profile([forecast("12.0", "15")])
        cutoff = datetime(2024, 6, 1, 15, 0, tzinfo=pytz.UTC)

        assert reconciler.reconcile("SE0001", "SE0001", None, profile, cutoff, TODAY) == []

    def test_forecast_just_before_cutoff_included(self, reconciler):
        profile = make_profile([forecast("12.0", "15")])
        cutoff = datetime(2024, 6, 1, 15, 0, 0, 1000, tzinfo=pytz.UTC)

        result = reconciler.reconcile("SE0001", "SE0001", None, profile, cutoff, TODAY)

        assert len(result) == 1

    def test_forecast_within_tolerance_included(self, reconciler):
        """An hour starting less than five minutes from now counts as current."""
        now = datetime(2024, 6, 1, 14, 57, tzinfo=pytz.UTC)
        profile = make_profile([forecast("12.0", "15")])

        result = reconciler.reconcile(
            "SE0001", "SE0001", None, profile, reconciler.cutoff_for(now), TODAY
        )

        assert len(result) == 1

    @pytest.mark.parametrize("entry", [
        forecast("", "10"),
        forecast("12.0", ""),
        forecast("12.0", "ten"),
        forecast("12.0", "24"),
        forecast("warm", "10"),
        forecast("nan", "10"),
    ])
    def test_unusable_forecast_entries_skipped(self, reconciler, cutoff, entry):
        profile = make_profile([entry])

        assert reconciler.reconcile("SE0001", "SE0001", None, profile, cutoff, TODAY) == []

    def test_unparsable_sample_keeps_forecasts(self, reconciler, cutoff):
        detail = Detail(nuts_code="SE0001", sample_date=1700000000000, sample_temperature="n/a")
        profile = make_profile([forecast("12.3", "10")])

        result = reconciler.reconcile("SE0001", "SE0001", detail, profile, cutoff, TODAY)

        assert [o.source for o in result] == [constants.FORECAST_SOURCE]

    def test_sample_without_date_skipped(self, reconciler, cutoff):
        detail = Detail(nuts_code="SE0001", sample_temperature="18.0")

        assert reconciler.reconcile("SE0001", "SE0001", detail, make_profile(), cutoff, TODAY) == []

    def test_not_sampled_detail(self, reconciler, cutoff):
        detail = Detail(nuts_code="SE0001", name="Testbadet")

        assert reconciler.reconcile("SE0001", "SE0001", detail, make_profile(), cutoff, TODAY) == []

    def test_sample_first_then_forecasts_in_order(self, reconciler, cutoff, load_fixture):
        detail = Detail.from_dict(load_fixture("detail_SE0001.json"))
        profile = make_profile([
            forecast("11.0", "9"),
            forecast("", "10"),
            forecast("13.0", "8"),
        ])

        result = reconciler.reconcile("SE0001", "SE0001", detail, profile, cutoff, TODAY)

        assert [o.temperature for o in result] == [18.5, 11.0, 13.0]
        assert result[0].source == BASE_URL
        assert all(o.latitude == 59.3 and o.longitude == 18.0 for o in result)

    def test_profile_fixture(self, reconciler, cutoff, load_fixture):
        profile = BathingProfile.from_dict(load_fixture("profile_SE0002.json"))

        result = reconciler.reconcile("SE0002", "SE0002", None, profile, cutoff, TODAY)

        assert [o.temperature for o in result] == [12.3]

    def test_local_hours_normalized_to_utc(self, cutoff):
        reconciler = TemperatureReconciler(sample_source=BASE_URL, timezone="Europe/Stockholm")
        profile = make_profile([forecast("12.3", "14")])

        result = reconciler.reconcile("SE0001", "SE0001", None, profile, cutoff, TODAY)

        # CEST is UTC+2
        assert result[0].observed_at == datetime(2024, 6, 1, 12, 0, tzinfo=pytz.UTC)
