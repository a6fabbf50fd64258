"""
Tests for the reporting-period JSON endpoints.
"""

from datetime import date

from django.urls import reverse

from tests.factories import LedgerEntryFactory, MarketValueEntryFactory, VehicleFactory


class TestVehicleListView:
    """Test cases for the vehicle_list view."""

    def test_requires_login(self, client):
        response = client.get(reverse("ledger:vehicles"))

        assert response.status_code == 302

    def test_newest_vintage_first(self, logged_in_client):
        VehicleFactory(vehicle_id="recOld", full_investment_name="Fund I LP", vintage=2018)
        VehicleFactory(vehicle_id="recNew", full_investment_name="Fund III LP", vintage=2024)

        data = logged_in_client.get(reverse("ledger:vehicles")).json()

        assert [v["vehicle_id"] for v in data["vehicles"]] == ["recNew", "recOld"]

    def test_fund_manager_filter(self, logged_in_client):
        VehicleFactory(vehicle_id="recAcme", fund_manager="Acme Capital")
        VehicleFactory(vehicle_id="recOther", fund_manager="Other Partners")

        data = logged_in_client.get(reverse("ledger:vehicles"), {"fund_manager": "Other Partners"}).json()

        assert [v["vehicle_id"] for v in data["vehicles"]] == ["recOther"]


class TestVehiclePeriodsView:
    """Test cases for the vehicle_periods view."""

    def test_periods(self, logged_in_client, vehicle):
        MarketValueEntryFactory(vehicle=vehicle, portfolio_date=date(2025, 6, 30))
        MarketValueEntryFactory(vehicle=vehicle, portfolio_date=date(2025, 9, 30))
        LedgerEntryFactory(vehicle=vehicle, date_reported=date(2024, 12, 31))
        LedgerEntryFactory(vehicle=vehicle, date_reported=date(2025, 3, 31))

        data = logged_in_client.get(reverse("ledger:vehicle_periods", kwargs={"vehicle_id": "recFund2"})).json()

        assert data["vehicle_id"] == "recFund2"
        assert data["portfolio_dates"] == ["2025-09-30", "2025-06-30"]
        assert set(data["date_reported"]) == {"2024-12-31", "2025-03-31"}
        assert data["investment_period"] == {"min_date": "2024-12-31", "max_date": "2025-03-31"}

    def test_until_limits_reported_dates(self, logged_in_client, vehicle):
        LedgerEntryFactory(vehicle=vehicle, date_reported=date(2024, 12, 31))
        LedgerEntryFactory(vehicle=vehicle, date_reported=date(2025, 3, 31))

        data = logged_in_client.get(
            reverse("ledger:vehicle_periods", kwargs={"vehicle_id": "recFund2"}), {"until": "2025-01-31"}
        ).json()

        assert data["date_reported"] == ["2024-12-31"]

    def test_unknown_vehicle(self, logged_in_client):
        data = logged_in_client.get(reverse("ledger:vehicle_periods", kwargs={"vehicle_id": "recNope"})).json()

        assert data["portfolio_dates"] == []
        assert data["date_reported"] == []
        assert data["investment_period"] == {"min_date": None, "max_date": None}
