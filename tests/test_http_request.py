import pytest

from tinynet.http_request import HttpRequest, Method, Version
from tinynet.timestamp import Timestamp


@pytest.mark.parametrize("name", ["GET", "POST", "HEAD", "PUT", "DELETE"])
def test_set_method_accepts_supported_methods(name):
    request = HttpRequest()
    assert request.set_method(name) is True
    assert request.method_string() == name
    assert request.method is Method[name]


@pytest.mark.parametrize("name", ["PATCH", "get", "", "OPTIONS"])
def test_set_method_rejects_others(name):
    request = HttpRequest()
    request.set_method("GET")
    assert request.set_method(name) is False
    assert request.method is Method.INVALID
    assert request.method_string() == "UNKNOWN"


def test_defaults():
    request = HttpRequest()
    assert request.method is Method.INVALID
    assert request.version is Version.UNKNOWN
    assert request.path == ""
    assert request.query == ""
    assert request.receive_time == Timestamp.invalid()
    assert request.headers == {}


def test_add_header_strips_surrounding_whitespace():
    request = HttpRequest()
    request.add_header("Host", " \t localhost \r ")
    assert request.get_header("Host") == "localhost"


def test_add_header_keeps_inner_whitespace():
    request = HttpRequest()
    request.add_header("User-Agent", "  a b  c ")
    assert request.get_header("User-Agent") == "a b  c"


def test_add_header_overwrites_previous_value():
    request = HttpRequest()
    request.add_header("Accept", "one")
    request.add_header("Accept", "two")
    assert request.get_header("Accept") == "two"
    assert list(request.headers) == ["Accept"]


def test_get_header_missing_is_empty():
    request = HttpRequest()
    request.add_header("Host", "x")
    assert request.get_header("Connection") == ""
    assert request.get_header("host") == ""