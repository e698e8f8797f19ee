from decimal import Decimal

from hrms.attendance.factory import AttendanceStrategyFactory
from hrms.attendance.strategies.half_day_strategy import HalfDayStrategy
from hrms.attendance.strategies.present_strategy import PresentStrategy
from hrms.core.enums import AttendanceStatus


def test_factory_checkin_is_always_present():
    strategy = AttendanceStrategyFactory().for_checkin()

    assert isinstance(strategy, PresentStrategy)
    assert strategy.decide_checkin().status == AttendanceStatus.PRESENT


def test_factory_checkout_below_threshold_is_half_day():
    hours = Decimal("3.99")
    strategy = AttendanceStrategyFactory().for_checkout(total_hours=hours)

    assert isinstance(strategy, HalfDayStrategy)
    assert strategy.decide_checkout(total_hours=hours).status == AttendanceStatus.HALF_DAY


def test_factory_checkout_at_threshold_is_present():
    hours = Decimal("4.00")
    strategy = AttendanceStrategyFactory().for_checkout(total_hours=hours)

    assert isinstance(strategy, PresentStrategy)
    assert strategy.decide_checkout(total_hours=hours).status == AttendanceStatus.PRESENT
