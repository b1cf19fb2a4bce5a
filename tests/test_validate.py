"""
Unit tests for `locusteggs.validate`.
"""

from logging import INFO, getLogger

from pytest import mark, raises
from requests.structures import CaseInsensitiveDict

from locusteggs.failure import TransactionError
from locusteggs.validate import (
    Validate,
    header_is_set,
    valid_header_value,
    valid_text,
    valid_title,
    validate_and_load_static_assets,
    validate_page,
)

from utils import FakeResponse, FakeUser, no_log, redirected

HTML = """
<!DOCTYPE html>
<head>
  <title>Title 1234ABCD</title>
  <link rel="stylesheet" href="/style.css" />
</head>
<body>
  <p>Test text on the page.</p>
</body>
"""

URL = "http://localhost/one"


def full_validation():
    return (
        Validate.builder()
        .title("1234ABCD")
        .not_title("Example")
        .text("Test text")
        .text("<!DOCTYPE html>")
        .not_text("<!DocType html>")
        .header_value("foo", "bar")
        .not_header("bar")
        .build()
    )


def check_fails(response, validate, message):
    with raises(TransactionError) as exc_info:
        validate_page(FakeUser(), response, validate)
    assert exc_info.value.message == message
    assert response.failures == [message]


def test_builder_defaults():
    """Test that a fresh builder checks nothing."""
    validate = Validate.builder().build()
    assert validate.status is None
    assert validate.title is None
    assert validate.texts == ()
    assert validate.headers == ()
    assert validate.redirect is None


def test_builder_accumulates():
    """Test that texts and headers accumulate while the title is replaced."""
    validate = (
        Validate.builder()
        .title("first")
        .title("second")
        .status(200)
        .not_status(404)
        .texts(["a", "b"])
        .not_texts(["c"])
        .header("x-one")
        .not_header_value("x-two", "miss")
        .redirect(False)
        .build()
    )
    assert validate.title == (True, "second")
    assert validate.status == (False, 404)
    assert validate.texts == ((True, "a"), (True, "b"), (False, "c"))
    assert validate.headers == ((True, "x-one", ""), (False, "x-two", "miss"))
    assert validate.redirect is False


def test_none():
    """Test that the empty validation accepts any response."""
    response = FakeResponse(text="anything", status_code=500)
    assert validate_page(FakeUser(), response, Validate.none()) == "anything"
    assert response.failures == []


@mark.parametrize(
    "title, valid",
    (
        ("1234ABCD", True),
        ("title 1234abcd", True),
        ("TITLE", True),
        ("", True),
        ("Example", False),
        ("Test text", False),
    ),
)
def test_valid_title(title, valid):
    """Test case-insensitive matching of the title in the head."""
    assert valid_title(HTML, title) is valid


def test_valid_title_outside_head():
    """Test that a title outside of the head is not considered."""
    html = "<head></head><body><title>Home</title></body>"
    assert not valid_title(html, "Home")


def test_valid_text():
    """Test that text matching is case-sensitive."""
    assert valid_text(HTML, "<!DOCTYPE html>")
    assert not valid_text(HTML, "<!DocType html>")


def test_header_checks(caplog):
    """Test header presence and value checks."""
    headers = CaseInsensitiveDict({"Content-Type": "text/html; charset=UTF-8"})
    with no_log(getLogger("locusteggs.validate")):
        assert header_is_set(headers, "content-type")
        assert valid_header_value(headers, "Content-Type", "text/html")
    with caplog.at_level(INFO, logger="locusteggs.validate"):
        assert not header_is_set(headers, "x-missing")
        assert not valid_header_value(headers, "x-missing", "foo")
        assert not valid_header_value(headers, "content-type", "json")
    assert len(caplog.records) == 2


def test_valid():
    """Test a response that passes all checks."""
    response = FakeResponse(text=HTML, headers={"foo": "bar"}, url=URL)
    assert validate_page(FakeUser(), response, full_validation()) == HTML
    assert response.failures == []


def test_invalid_status():
    """Test detection of an unexpected status code."""
    response = FakeResponse(text=HTML, status_code=404, url=URL)
    validate = Validate.builder().status(200).build()
    check_fails(response, validate, f"{URL}: response status != 200]: 404")


def test_not_status():
    """Test detection of a forbidden status code."""
    response = FakeResponse(text=HTML, status_code=403, url=URL)
    validate = Validate.builder().not_status(403).build()
    check_fails(response, validate, f"{URL}: response status == 403]: 403")


def test_expected_error_status():
    """Test that an expected error status is reported as a success."""
    response = FakeResponse(text="Not found", status_code=404, url=URL)
    validate = Validate.builder().status(404).build()
    assert validate_page(FakeUser(), response, validate) == "Not found"
    assert response.succeeded
    assert response.failures == []


def test_missing_header_with_value(caplog):
    """Test that a missing header fails a value check."""
    response = FakeResponse(text=HTML, url=URL)
    validate = Validate.builder().header_value("x-drupal-cache", "HIT").build()
    with caplog.at_level(INFO, logger="locusteggs.validate"):
        check_fails(
            response,
            validate,
            f"{URL}: header does not contain expected value: x-drupal-cache: HIT",
        )
    assert "header (x-drupal-cache) not set" in caplog.messages


def test_unexpected_header():
    """Test detection of a header that should not be there."""
    response = FakeResponse(text=HTML, headers={"x-debug": "1"}, url=URL)
    validate = Validate.builder().not_header("X-Debug").build()
    check_fails(response, validate, f"{URL}: header was included in response: X-Debug")


def test_missing_header():
    """Test detection of a missing header when only presence is checked."""
    response = FakeResponse(text=HTML, url=URL)
    validate = Validate.builder().header("x-drupal-cache").build()
    check_fails(
        response, validate, f"{URL}: header not included in response: x-drupal-cache"
    )


def test_invalid_header_value():
    """Test detection of a header with the wrong value."""
    response = FakeResponse(text=HTML, headers={"foo": "invalid"}, url=URL)
    check_fails(
        response,
        full_validation(),
        f"{URL}: header does not contain expected value: foo: bar",
    )


def test_unexpected_header_value():
    """Test detection of a header value that should not be there."""
    response = FakeResponse(text=HTML, headers={"cache-control": "no-cache"}, url=URL)
    validate = Validate.builder().not_header_value("cache-control", "no-cache").build()
    check_fails(
        response,
        validate,
        f"{URL}: header contains unexpected value: cache-control: no-cache",
    )


def test_title_not_found():
    """Test detection of a wrong title."""
    response = FakeResponse(text=HTML, url=URL)
    validate = Validate.builder().title("Home").build()
    check_fails(response, validate, f"{URL}: title not found: Home")


def test_title_found():
    """Test detection of a forbidden title."""
    response = FakeResponse(text=HTML, url=URL)
    validate = Validate.builder().not_title("1234").build()
    check_fails(response, validate, f"{URL}: title found: 1234")


def test_text_not_found():
    """Test detection of missing text; the first failing text is reported."""
    response = FakeResponse(text=HTML, url=URL)
    validate = Validate.builder().text("Test text").text("Missing").text("Gone").build()
    check_fails(response, validate, f"{URL}: text not found on page: Missing")


def test_text_found():
    """Test detection of forbidden text."""
    response = FakeResponse(text=HTML, url=URL)
    validate = Validate.builder().not_text("Test text").build()
    check_fails(response, validate, f"{URL}: text found on page: Test text")


def test_redirect_expected():
    """Test that a redirect is required when asked for."""
    response = FakeResponse(text=HTML, url=URL)
    check_fails(
        response, Validate.builder().redirect(True).build(), f"{URL}: did not redirect"
    )


def test_redirect_unexpected():
    """Test that the original URL is reported for an unexpected redirect."""
    response = redirected(FakeResponse(text=HTML, url=URL), "http://localhost/old")
    check_fails(
        response,
        Validate.builder().redirect(False).build(),
        "http://localhost/old: redirected unexpectedly",
    )


def test_redirect_accepted():
    """Test a redirect that was expected."""
    response = redirected(FakeResponse(text=HTML, url=URL), "http://localhost/old")
    assert validate_page(FakeUser(), response, Validate.builder().redirect(True).build())
    assert response.failures == []


def test_no_response():
    """Test that a connection error always fails."""
    response = FakeResponse(status_code=0, url=URL, error="Connection refused")
    check_fails(
        response, Validate.none(), f"{URL}: no response from server: Connection refused"
    )


def test_check_order():
    """Test that the status is checked before the body."""
    response = FakeResponse(text=HTML, status_code=500, url=URL)
    validate = Validate.builder().status(200).title("Home").build()
    check_fails(response, validate, f"{URL}: response status != 200]: 500")


def test_validate_and_load_static_assets():
    """Test that static assets are loaded after successful validation."""
    user = FakeUser()
    response = FakeResponse(text=HTML, url=URL)
    html = validate_and_load_static_assets(
        user, response, Validate.builder().title("1234ABCD").build()
    )
    assert html == HTML
    assert user.client.urls() == ["/style.css"]


def test_validate_and_load_static_assets_failed():
    """Test that static assets are not loaded when validation fails."""
    user = FakeUser()
    response = FakeResponse(text=HTML, url=URL)
    with raises(TransactionError):
        validate_and_load_static_assets(
            user, response, Validate.builder().title("Home").build()
        )
    assert user.client.requests == []
