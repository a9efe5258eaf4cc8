import datetime as dt
from decimal import Decimal

import pytest

from builders import make_dinner, make_player
from pokerclub.core.exceptions import ErrorCode, PreconditionError, ValidationError
from pokerclub.services import dinner_service
from pokerclub.services.dinner_service import DinnerService


class TestSplit:
    def test_food_split_between_eaters(self):
        dinner = make_dinner(("ana", True, False), ("bia", True, True), ("caio", False, True), ("davi", False, False), food="100")
        result = dinner_service.split(dinner)

        assert result.eating_count == 2
        assert result.food_per_person == Decimal("50.00")
        owed = {s.player_id: s.amount_owed for s in result.shares}
        assert owed == {"ana": Decimal("50.00"), "bia": Decimal("50.00"), "caio": Decimal("0"), "davi": Decimal("0")}

    def test_pools_are_independent(self):
        dinner = make_dinner(("ana", True, True), ("bia", True, False), ("caio", False, True), food="90", drink="40")
        result = dinner_service.split(dinner)

        assert result.food_per_person == Decimal("45.00")
        assert result.drink_per_person == Decimal("20.00")
        assert result.total_cost == Decimal("130")
        owed = {s.player_id: s.amount_owed for s in result.shares}
        assert owed == {"ana": Decimal("65.00"), "bia": Decimal("45.00"), "caio": Decimal("20.00")}

    def test_no_eaters_means_zero_per_person(self):
        dinner = make_dinner(("ana", False, False), ("bia", False, True), food="100", drink="30")
        result = dinner_service.split(dinner)

        assert result.eating_count == 0
        assert result.food_per_person == Decimal("0")
        assert {s.player_id: s.amount_owed for s in result.shares} == {"ana": Decimal("0"), "bia": Decimal("30.00")}

    def test_per_person_rounds_to_cents(self):
        assert dinner_service.per_person_cost(Decimal("100"), 3) == Decimal("33.33")
        assert dinner_service.per_person_cost(Decimal("100"), 0) == Decimal("0")
        assert dinner_service.per_person_cost(Decimal("100"), -1) == Decimal("0")

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (150, "150.00"),
            ("12.345", "12.35"),
            ("-3", "0"),
            ("abc", "0"),
            (None, "0"),
            ("", "0"),
            (float("nan"), "0"),
            ("Infinity", "0"),
            ("1e30", "9999999999.99"),
        ],
    )
    def test_costs_are_clamped(self, value, expected):
        assert dinner_service.clamp_cost(value) == Decimal(expected)


class TestDinnerLifecycle:
    @pytest.fixture
    def dinner(self):
        return DinnerService.start_dinner(None, [make_player("Ana"), make_player("Bia")], dinner_date=dt.date(2024, 3, 5))

    def test_start_defaults(self, dinner):
        assert dinner.name == "Jantar 05/03/24"
        assert dinner.status == "live"
        assert all(not p.is_eating and not p.is_drinking for p in dinner.participants)
        assert dinner.total_food_cost == Decimal("0")

    def test_start_rejects_second_dinner(self, dinner):
        with pytest.raises(PreconditionError) as exc_info:
            DinnerService.start_dinner(dinner, [make_player("Ana")])
        assert exc_info.value.code == ErrorCode.DINNER_ALREADY_ACTIVE

    def test_start_requires_players(self):
        with pytest.raises(PreconditionError) as exc_info:
            DinnerService.start_dinner(None, [])
        assert exc_info.value.code == ErrorCode.NO_PLAYERS

    def test_toggles(self, dinner):
        DinnerService.toggle_eating(dinner, "ana")
        DinnerService.toggle_drinking(dinner, "ana")
        DinnerService.toggle_drinking(dinner, "ana")
        ana = dinner.participant("ana")
        assert (ana.is_eating, ana.is_drinking) == (True, False)

    def test_toggle_unknown_participant(self, dinner):
        with pytest.raises(PreconditionError):
            DinnerService.toggle_eating(dinner, "nobody")

    def test_set_costs_keeps_omitted_pool(self, dinner):
        DinnerService.set_costs(dinner, food="80", drink="20")
        DinnerService.set_costs(dinner, food="-5")
        assert dinner.total_food_cost == Decimal("0")
        assert dinner.total_drink_cost == Decimal("20.00")

    def test_rename(self, dinner):
        DinnerService.rename(dinner, "  Pizza night ")
        assert dinner.name == "Pizza night"
        with pytest.raises(ValidationError):
            DinnerService.rename(dinner, " ")
        assert dinner.name == "Pizza night"

    def test_finalize_has_no_balance_precondition(self, dinner):
        DinnerService.set_costs(dinner, food="100")
        closed = DinnerService.finalize(dinner)
        assert closed.status == "closed"

    def test_finalize_without_dinner(self):
        with pytest.raises(PreconditionError) as exc_info:
            DinnerService.finalize(None)
        assert exc_info.value.code == ErrorCode.NO_ACTIVE_DINNER
