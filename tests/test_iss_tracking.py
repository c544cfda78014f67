"""
Tests for the ISS position fetcher.

Run with:
    python -m pytest tests/test_iss_tracking.py -v
"""

import unittest
from unittest import mock

import requests

from iss_tracking import (
    IssPosition,
    PositionFetchError,
    get_iss_position,
    parse_position,
    request_iss_position,
)

SAMPLE_RESPONSE = {
    "name": "iss",
    "id": 25544,
    "latitude": 50.11496269845,
    "longitude": 118.07900427317,
    "altitude": 408.05526028199,
    "velocity": 27635.971970874,
    "visibility": "daylight",
    "timestamp": 1364069476,
    "units": "kilometers",
}


def fake_session(json_body=None, exc=None, status_error=None):
    response = mock.Mock()
    response.json.return_value = json_body
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    session = mock.Mock()
    if exc is not None:
        session.get.side_effect = exc
    else:
        session.get.return_value = response
    return session


class TestParsePosition(unittest.TestCase):

    def test_fields_extracted(self):
        position = parse_position(SAMPLE_RESPONSE)
        self.assertEqual(position.latitude, 50.11496269845)
        self.assertEqual(position.longitude, 118.07900427317)

    def test_altitude_converted_to_meters(self):
        position = parse_position({"latitude": 1, "longitude": 2, "altitude": 408.5})
        self.assertEqual(position.altitude_m, 408.5 * 1000)
        self.assertEqual(position.altitude_km, 408.5)

    def test_numeric_strings_accepted(self):
        position = parse_position({"latitude": "-12.5", "longitude": "33", "altitude": "420"})
        self.assertEqual(position, IssPosition(-12.5, 33.0, 420000.0))

    def test_missing_field(self):
        with self.assertRaises(PositionFetchError):
            parse_position({"latitude": 1, "longitude": 2})

    def test_non_numeric_field(self):
        with self.assertRaises(PositionFetchError):
            parse_position({"latitude": "north", "longitude": 2, "altitude": 400})

    def test_oversized_integer(self):
        with self.assertRaises(PositionFetchError):
            parse_position({"latitude": 10**400, "longitude": 1, "altitude": 400})

    def test_non_finite_values(self):
        for payload in (
            {"latitude": "nan", "longitude": 1, "altitude": 400},
            {"latitude": 1, "longitude": "inf", "altitude": 400},
            {"latitude": 1, "longitude": 1, "altitude": 1e308},
        ):
            with self.assertRaises(PositionFetchError):
                parse_position(payload)

    def test_not_an_object(self):
        with self.assertRaises(PositionFetchError):
            parse_position([1, 2, 3])


class TestRequestPosition(unittest.TestCase):

    def test_success(self):
        session = fake_session(SAMPLE_RESPONSE)
        position = request_iss_position("http://example.invalid/iss", timeout=3, session=session)

        session.get.assert_called_once_with("http://example.invalid/iss", timeout=3)
        self.assertAlmostEqual(position.altitude_m, 408055.26028199)

    def test_network_error_wrapped(self):
        session = fake_session(exc=requests.ConnectionError("unreachable"))
        with self.assertRaises(PositionFetchError) as ctx:
            request_iss_position(session=session)
        self.assertIsInstance(ctx.exception.__cause__, requests.ConnectionError)

    def test_http_error_wrapped(self):
        session = fake_session(SAMPLE_RESPONSE, status_error=requests.HTTPError("503"))
        with self.assertRaises(PositionFetchError):
            request_iss_position(session=session)

    def test_invalid_json_wrapped(self):
        session = fake_session()
        session.get.return_value.json.side_effect = ValueError("Expecting value")
        with self.assertRaises(PositionFetchError):
            request_iss_position(session=session)


class TestGetIssPosition(unittest.TestCase):
    """Failures collapse to the zero position instead of raising."""

    def test_success_passthrough(self):
        position = get_iss_position(session=fake_session(SAMPLE_RESPONSE))
        self.assertFalse(position.is_zero())

    def test_unreachable_returns_zero(self):
        session = fake_session(exc=requests.Timeout("timed out"))
        with self.assertLogs("iss_tracking", level="WARNING"):
            position = get_iss_position(session=session)
        self.assertEqual(position, IssPosition.zero())

    def test_malformed_returns_zero(self):
        session = fake_session({"message": "rate limited"})
        with self.assertLogs("iss_tracking", level="WARNING"):
            position = get_iss_position(session=session)
        self.assertTrue(position.is_zero())

    def test_oversized_integer_returns_zero(self):
        session = fake_session({"latitude": 10**400, "longitude": 1, "altitude": 400})
        with self.assertLogs("iss_tracking", level="WARNING"):
            position = get_iss_position(session=session)
        self.assertEqual(position, IssPosition.zero())

    def test_uses_requests_by_default(self):
        with mock.patch("iss_tracking.requests.get", side_effect=requests.ConnectionError("down")):
            with self.assertLogs("iss_tracking", level="WARNING"):
                self.assertTrue(get_iss_position().is_zero())


if __name__ == "__main__":
    unittest.main()
