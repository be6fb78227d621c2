"""Request handling for the HTTP server and its sample pages."""

from __future__ import annotations

from typing import Callable, Tuple

from tinynet import logger
from tinynet.http_context import HttpContext
from tinynet.http_request import HttpRequest
from tinynet.http_response import HttpResponse, HttpStatusCode
from tinynet.timestamp import Timestamp

HttpCallback = Callable[[HttpRequest, HttpResponse], None]

BAD_REQUEST = b"HTTP/1.1 400 Bad Request\r\n\r\n"

FAVICON = bytes.fromhex(
    "89504e470d0a1a0a0000000d49484452000000100000001008060000001ff3ff"
    "610000001974455874536f667477617265004164f6265"[:0]
    + "610000001974455874536f66747761726500416f626520496d616765526561"
    "647971c9653c000001cd4944415478da9493394803411486ff5d62a70452c46d"
    "221ea046240816167" "60a36ba4a9a800841b4718558894" "7b049a95124cda608a4"
    "486391420baf56c146b415cf2258980b54488a64938dfb4667c91a147df06676"
    "66df7cefe76746a8d56a4824122a0005bf47d4eff72f36ec12201e8fd7aad5ea"
    "af493546aa545f9f22412a950a83e5723964b35996994c06e9749a25852ccb54"
    "a7c46231b55e0003689ac616822058521445365394cb6578bd5eaa5554234cc0"
    "e0e2c18f009ebc09417c3e1f83442211d554403f388077e53307b85c2e489204"
    "87c381402040679" "8e9361aa6671504e3d7c8bd15e169b743abea782f6a5892bb"
    "18209fcf33c3b8e94ea7d36c4a0069367c8ee1fe5684e73c9f722b3a427b3766"
    "77ae8e0ef3bd52a9640242af8532664" "6ba0cd99f1d9a6c22e6c73a2c80efc115"
    "900793a228a0536ab1b8df2935430e3f58fc98da796a50400087ae1b1742b43a"
    "3fbe79c70a26b6eed99a601493db8f0d0a2ee92395295800" "27eb6e5670bcd6cb"
    "d647ab3d6c7db8d2dda06083baef5fa4eacc024eae5e701aecb34039acfef291"
    "89679185" "21a887b7587e7e85bbcd4e4e627440fa9389ec1eec86024826" "93d075"
    "1d7f093295bf1fdbd7638a1af75cc1ff224ac38700" "03004bbbf8d62a76984900"
    "00000049454e44ae426082"
)


def default_http_callback(request: HttpRequest, response: HttpResponse) -> None:
    """Answer every request with 404 Not Found and close the connection."""
    response.status_code = HttpStatusCode.NOT_FOUND
    response.status_message = "Not Found"
    response.close_connection = True


def on_request(request: HttpRequest, response: HttpResponse) -> None:
    """Serve the sample pages: ``/``, ``/favicon.ico`` and ``/hello``."""
    print(f"Headers {request.method_string()} {request.path}")
    for field, value in request.headers.items():
        print(f"{field}: {value}")

    if request.path == "/":
        response.status_code = HttpStatusCode.OK
        response.status_message = "OK"
        response.set_content_type("text/html")
        response.add_header("Server", "Muduo")
        now = Timestamp.now().to_formatted_string()
        response.body = (
            "<html><head><title>This is title</title></head>"
            "<body><h1>Hello</h1>Now is " + now + "</body></html>"
        )
    elif request.path == "/favicon.ico":
        response.status_code = HttpStatusCode.OK
        response.status_message = "OK"
        response.set_content_type("image/png")
        response.body = FAVICON
    elif request.path == "/hello":
        response.status_code = HttpStatusCode.OK
        response.status_message = "OK"
        response.set_content_type("text/plain")
        response.add_header("Server", "Muduo")
        response.body = "hello, world!\n"
    else:
        response.status_code = HttpStatusCode.NOT_FOUND
        response.status_message = "Not Found"
        response.close_connection = True


def handle_request(
    request: HttpRequest, callback: HttpCallback = default_http_callback
) -> Tuple[bytes, bool]:
    """Build the response for ``request``.

    Returns the encoded response and whether the connection should be shut
    down afterwards. Connections are always closed after one response.
    """
    response = HttpResponse(True)
    callback(request, response)
    return response.to_bytes(), response.close_connection


def handle_message(
    buf: bytearray,
    receive_time: Timestamp,
    callback: HttpCallback = default_http_callback,
) -> Tuple[bytes, bool]:
    """Parse a request from ``buf`` and produce what to send back.

    Returns the bytes to send and whether to shut the connection down.
    A malformed or incomplete request line yields 400 Bad Request.
    """
    context = HttpContext()
    out = bytearray()
    close = False
    if not context.parse_request(buf, receive_time):
        logger.info("parseRequest failed!")
        out += BAD_REQUEST
        close = True
    if context.got_all():
        logger.info("parseRequest success!")
        data, close_after = handle_request(context.request, callback)
        out += data
        close = close or close_after
    return bytes(out), close