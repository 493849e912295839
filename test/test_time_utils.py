import math
import os
import sys
import unittest

import pandas as pd

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from utilities.exceptions import InvalidInstantError
from utilities.time_utils import (
    format_time,
    gmst_rad,
    iso_interval,
    julian_day,
    parse_compact_datetime,
    parse_compact_interval,
    parse_iso_interval,
    to_iso_string,
)


class TestCompactDates(unittest.TestCase):
    def test_parse_compact_datetime(self):
        ts = parse_compact_datetime("20150411010203")
        self.assertEqual(ts, pd.Timestamp(2015, 4, 11, 1, 2, 3))

    def test_invalid_compact_datetime(self):
        for text in ["", "2015041101", "2015041101020x", "20151311010203", None]:
            with self.subTest(text=text):
                with self.assertRaises(InvalidInstantError):
                    parse_compact_datetime(text)

    def test_invalid_instant_is_value_error(self):
        with self.assertRaises(ValueError):
            parse_compact_datetime("20150230000000")

    def test_parse_compact_interval(self):
        start, end = parse_compact_interval("20150411010000-20150411045959")
        self.assertEqual(start, pd.Timestamp(2015, 4, 11, 1, 0, 0))
        self.assertEqual(end, pd.Timestamp(2015, 4, 11, 4, 59, 59))

    def test_reversed_or_malformed_interval(self):
        with self.assertRaises(InvalidInstantError):
            parse_compact_interval("20150411045959-20150411010000")
        with self.assertRaises(InvalidInstantError):
            parse_compact_interval("20150411010000")


class TestIsoStrings(unittest.TestCase):
    def test_to_iso_string(self):
        ts = pd.Timestamp("2015-04-11 01:00:00")
        self.assertEqual(to_iso_string(ts), "2015-04-11T01:00:00.000Z")

        ts = ts + pd.Timedelta(microseconds=123456)
        self.assertEqual(to_iso_string(ts), "2015-04-11T01:00:00.123Z")

    def test_tz_aware_timestamp_is_converted_to_utc(self):
        ts = pd.Timestamp("2015-04-11T03:00:00+02:00")
        self.assertEqual(to_iso_string(ts), "2015-04-11T01:00:00.000Z")

    def test_iso_interval_roundtrip(self):
        start = pd.Timestamp(2015, 4, 11, 1)
        end = pd.Timestamp(2015, 4, 11, 5)
        text = iso_interval(start, end)
        self.assertEqual(text, "2015-04-11T01:00:00.000Z/2015-04-11T05:00:00.000Z")
        self.assertEqual(parse_iso_interval(text), (start, end))

    def test_invalid_iso_interval(self):
        with self.assertRaises(InvalidInstantError):
            parse_iso_interval("2015-04-11T01:00:00.000Z")
        with self.assertRaises(InvalidInstantError):
            parse_iso_interval("not a date/2015-04-11T01:00:00.000Z")

    def test_empty_iso_interval_half(self):
        for text in ["/", "/2015-04-11T01:00:00.000Z", "2015-04-11T01:00:00.000Z/"]:
            with self.subTest(text=text):
                with self.assertRaises(InvalidInstantError):
                    parse_iso_interval(text)


class TestSiderealTime(unittest.TestCase):
    def test_julian_day_reference_epochs(self):
        self.assertAlmostEqual(julian_day(pd.Timestamp("2000-01-01 12:00:00")), 2451545.0)
        self.assertAlmostEqual(julian_day(pd.Timestamp("1970-01-01 00:00:00")), 2440587.5)

    def test_julian_day_fractional_day(self):
        jd0 = julian_day(pd.Timestamp("2015-04-11 00:00:00"))
        jd1 = julian_day(pd.Timestamp("2015-04-11 06:00:00"))
        self.assertAlmostEqual(jd1 - jd0, 0.25, places=9)

    def test_gmst_at_j2000(self):
        expected = math.radians(67310.54841 / 240.0)
        self.assertAlmostEqual(gmst_rad(pd.Timestamp("2000-01-01 12:00:00")), expected, places=9)

    def test_gmst_is_reduced(self):
        for text in ["1980-01-06", "2000-01-01 12:00", "2015-04-11 01:23:45", "2031-12-31 23:59:59"]:
            with self.subTest(time=text):
                theta = gmst_rad(pd.Timestamp(text))
                self.assertGreaterEqual(theta, 0.0)
                self.assertLess(theta, 2 * math.pi)

    def test_gmst_advances_one_sidereal_day(self):
        # One solar day is ~3m56s longer than a sidereal day, ~0.0172 rad.
        t0 = pd.Timestamp("2015-04-11 00:00:00")
        delta = (gmst_rad(t0 + pd.Timedelta(days=1)) - gmst_rad(t0)) % (2 * math.pi)
        self.assertAlmostEqual(delta, 0.017202791, places=6)


class TestFormatTime(unittest.TestCase):
    def test_default_format(self):
        ts = pd.Timestamp("2015-04-11 01:02:03")
        self.assertEqual(format_time(ts), "2015-04-11 01:02:03")

    def test_short_tokens(self):
        ts = pd.Timestamp("2015-04-11 01:02:03.450")
        self.assertEqual(format_time(ts, "yy/M/d"), "15/4/11")
        self.assertEqual(format_time(ts, "q"), "2")
        self.assertEqual(format_time(ts, "H:m:s.S"), "1:2:3.450")

    def test_iso_string_input(self):
        self.assertEqual(format_time("2015-04-11T01:00:00.000Z"), "2015-04-11 01:00:00")

    def test_milliseconds_input(self):
        self.assertEqual(format_time(86400000, "yyyy-MM-dd"), "1970-01-02")

    def test_empty_input(self):
        self.assertEqual(format_time(None), "")
        self.assertEqual(format_time(""), "")


if __name__ == "__main__":
    unittest.main()
