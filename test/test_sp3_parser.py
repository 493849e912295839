import math
import os
import sys
import tempfile
import unittest
from textwrap import dedent

import numpy as np
import pandas as pd

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from constants.parameters import ParserParameters
from utilities.exceptions import (
    MalformedEpochError,
    MissingHeaderError,
    StructuralParseError,
)
from utilities.frame_transform import ecef_to_eci
from utilities.sp3_parser import parse_sp3, parse_sp3_file


SAMPLE_SP3 = dedent(
    """\
    #cP2015  4 11  0  0  0.00000000       2 ORBIT IGS08 HLM  IGS
    ## 1840 518400.00000000   900.00000000 57123 0.0000000000000
    +    2   G01L01  0  0  0  0  0  0  0  0  0  0  0  0  0  0  0
    ++         2  2  0  0  0  0  0  0  0  0  0  0  0  0  0  0  0
    %c G  cc GPS ccc cccc cccc cccc cccc ccccc ccccc ccccc ccccc
    /* SAMPLE ORBIT
    *  2015  4 11  0  0  0.00000000
    PG01  15000.000000 -20000.000000   5000.000000     12.345678
    VG01  10000.000000  20000.000000  -3000.000000      0.000000
    PL01   6000.000000   2000.000000   1000.000000      0.000000
    *  2015  4 11  0 15  0.00000000
    PG01  15100.000000 -19900.000000   5100.000000     12.345678
    PL01   5000.000000   3000.000000   2000.000000      0.000000
    EOF
    """
)


class TestSp3Parser(unittest.TestCase):
    def test_single_epoch_roundtrip(self):
        text = "*  2015  4 11  0  0  0.00000000\nPG01  15000.0 -20000.0 5000.0 0.0\nEOF\n"
        orbit = parse_sp3(text)

        self.assertEqual(list(orbit.tracks), ["G01"])
        track = orbit.tracks["G01"]
        self.assertEqual(len(track), 4)
        self.assertEqual(orbit.numEpochs("G01"), 1)
        self.assertEqual(track[0], "2015-04-11T00:00:00.000Z")
        self.assertEqual(
            orbit.interval, "2015-04-11T00:00:00.000Z/2015-04-11T00:00:00.000Z"
        )

        expected = ecef_to_eci(pd.Timestamp(2015, 4, 11), 15000.0, -20000.0, 5000.0) * 1000
        np.testing.assert_allclose(track[1:], expected)
        self.assertEqual(track[3], 5000.0 * 1000)

    def test_full_sample(self):
        orbit = parse_sp3(SAMPLE_SP3)

        self.assertEqual(orbit.satelliteIds(), ["G01", "L01"])
        self.assertEqual(
            orbit.interval, "2015-04-11T00:00:00.000Z/2015-04-11T00:15:00.000Z"
        )
        g01 = orbit.tracks["G01"]
        self.assertEqual(len(g01), 8)
        self.assertEqual(g01[0], "2015-04-11T00:00:00.000Z")
        self.assertEqual(g01[4], "2015-04-11T00:15:00.000Z")
        # Velocity record is not stored
        self.assertNotIn(10000.0 * 1000, g01)
        self.assertAlmostEqual(
            math.hypot(g01[1], g01[2]), math.hypot(15000.0, -20000.0) * 1000, places=3
        )

    def test_default_keyword_when_empty(self):
        self.assertEqual(parse_sp3(SAMPLE_SP3, "").satelliteIds(), ["G01", "L01"])
        self.assertEqual(parse_sp3(SAMPLE_SP3, None).satelliteIds(), ["G01", "L01"])

    def test_satellite_keyword_filter(self):
        text = "*  2015  4 11  0  0  0.0\nPG01 1 2 3 0\nPL01 4 5 6 0\nEOF\n"
        self.assertEqual(list(parse_sp3(text, "L").tracks), ["L01"])
        self.assertEqual(list(parse_sp3(text, "G").tracks), ["G01"])
        self.assertEqual(list(parse_sp3(text, "P").tracks), ["G01", "L01"])
        self.assertEqual(parse_sp3(text, "E").tracks, {})

        # Velocity records never match, even when they contain the keyword
        self.assertEqual(parse_sp3(SAMPLE_SP3, "G").numEpochs("G01"), 2)

    def test_epoch_seconds(self):
        text = "*  2015  4 11  0  0 30.00000000\nPG01  1.0 2.0 3.0 0.0\nEOF\n"
        self.assertEqual(parse_sp3(text).tracks["G01"][0], "2015-04-11T00:00:00.000Z")

        params = ParserParameters(USE_EPOCH_SECONDS=True)
        orbit = parse_sp3(text, params=params)
        self.assertEqual(orbit.tracks["G01"][0], "2015-04-11T00:00:30.000Z")

    def test_no_matching_satellites(self):
        orbit = parse_sp3("*  2015  4 11  0  0  0.0\nEOF\n")
        self.assertEqual(orbit.tracks, {})
        self.assertEqual(
            orbit.interval, "2015-04-11T00:00:00.000Z/2015-04-11T00:00:00.000Z"
        )

    def test_to_dict_and_dataframe(self):
        orbit = parse_sp3(SAMPLE_SP3)
        data = orbit.toDict()
        self.assertEqual(data["interval"], orbit.interval)
        self.assertEqual(len(data["L01"]), 8)

        df = orbit.toDataFrame()
        self.assertEqual(list(df.columns), ["sat_id", "time", "x_m", "y_m", "z_m"])
        self.assertEqual(len(df), 4)
        self.assertEqual(df["z_m"].iloc[0], 5000.0 * 1000)

    def test_parse_file(self):
        with tempfile.NamedTemporaryFile("w", suffix=".sp3", delete=False) as tmp:
            tmp.write(SAMPLE_SP3)
        try:
            orbit = parse_sp3_file(tmp.name)
        finally:
            os.unlink(tmp.name)
        self.assertEqual(orbit.numEpochs("L01"), 2)


class TestSp3ParserErrors(unittest.TestCase):
    def test_eof_before_header(self):
        with self.assertRaises(MissingHeaderError) as ctx:
            parse_sp3("#cP2015\n## 1840\nEOF\n")
        self.assertEqual(ctx.exception.line_index, 2)

    def test_header_scan_limit(self):
        text = "\n".join(["/* comment"] * 150 + ["*  2015  4 11  0  0  0.0", "EOF"])
        with self.assertRaises(MissingHeaderError):
            parse_sp3(text)

        params = ParserParameters(HEADER_SCAN_LINE_LIMIT=200)
        self.assertEqual(parse_sp3(text, params=params).tracks, {})

    def test_missing_header_is_structural_error(self):
        with self.assertRaises(StructuralParseError):
            parse_sp3("")

    def test_truncated_epoch_line(self):
        text = "*  2015  4 11  0  0  0.0\nPG01 1.0 2.0 3.0\n*  2015  4\nEOF\n"
        with self.assertRaises(MalformedEpochError) as ctx:
            parse_sp3(text)
        self.assertEqual(ctx.exception.line_index, 2)
        self.assertEqual(ctx.exception.raw_text, "*  2015  4")

    def test_invalid_epoch_values(self):
        with self.assertRaises(MalformedEpochError):
            parse_sp3("*  2015 13 11  0  0  0.0\nEOF\n")

    def test_bad_coordinate(self):
        text = "*  2015  4 11  0  0  0.0\nPG01 abc 2.0 3.0\nEOF\n"
        with self.assertRaises(StructuralParseError) as ctx:
            parse_sp3(text)
        self.assertEqual(ctx.exception.line_index, 1)

    def test_short_position_record(self):
        with self.assertRaises(StructuralParseError):
            parse_sp3("*  2015  4 11  0  0  0.0\nPG01 1.0 2.0\nEOF\n")

    def test_missing_eof(self):
        with self.assertRaises(StructuralParseError):
            parse_sp3("*  2015  4 11  0  0  0.0\nPG01 1.0 2.0 3.0\n")


if __name__ == "__main__":
    unittest.main()
