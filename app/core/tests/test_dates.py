import datetime
import zoneinfo

from core.abstracts.tests import TestsBase
from utils.dates import get_month_range, parse_date, parse_datetime, parse_month


class DateUtilsTests(TestsBase):
    """Unit tests for parsing dates from query params and rows."""

    def test_parse_date(self):
        self.assertEqual(parse_date("2025-07-15"), datetime.date(2025, 7, 15))
        self.assertEqual(
            parse_date(datetime.date(2025, 7, 15)), datetime.date(2025, 7, 15)
        )
        self.assertIsNone(parse_date("not a date"))
        self.assertIsNone(parse_date("2025-02-30"))

    def test_parse_date_timezone(self):
        """Should convert timestamps to the given timezone before taking the day."""

        berlin = zoneinfo.ZoneInfo("Europe/Berlin")

        self.assertEqual(
            parse_date("2025-07-14T23:30:00+00:00", tzinfo=berlin),
            datetime.date(2025, 7, 15),
        )

    def test_parse_date_fail_loudly(self):
        with self.assertRaises(ValueError):
            parse_date("not a date", fail_silently=False)

    def test_parse_datetime(self):
        berlin = zoneinfo.ZoneInfo("Europe/Berlin")

        value = parse_datetime("2025-07-15 19:00", tzinfo=berlin)

        self.assertEqual(value.hour, 19)
        self.assertEqual(value.utcoffset(), datetime.timedelta(hours=2))

    def test_parse_month(self):
        self.assertEqual(parse_month("2025-07"), (2025, 7))

        for value in ["2025", "2025-13", "2025-00", "july"]:
            with self.assertRaises(ValueError):
                parse_month(value)

    def test_get_month_range(self):
        self.assertEqual(
            get_month_range(2024, 2),
            (datetime.date(2024, 2, 1), datetime.date(2024, 2, 29)),
        )
        self.assertEqual(
            get_month_range(2025, 12),
            (datetime.date(2025, 12, 1), datetime.date(2025, 12, 31)),
        )
