"""Error hierarchy: status codes, categories and the REST envelope."""

from graphledger.core.errors import (
    BadRequestError, ConflictError, DatabaseError, ErrorCategory, ForbiddenError,
    GraphLedgerError, InsufficientTokensError, InvalidAmountError, NoPathFoundError,
    ResourceNotFoundError,
)


def test_http_status_per_error_kind():
    assert ResourceNotFoundError("Model", "x").http_status == 404
    assert BadRequestError("bad").http_status == 400
    assert InsufficientTokensError(1, 0).http_status == 402
    assert ConflictError("taken").http_status == 409
    assert InvalidAmountError("nope").http_status == 400
    assert ForbiddenError("no").http_status == 403
    assert DatabaseError("down", "execute").http_status == 503


def test_no_path_found_is_a_bad_request():
    err = NoPathFoundError("A", "Z")
    assert isinstance(err, BadRequestError)
    assert err.code == "NO_PATH_FOUND"
    assert err.http_status == 400
    assert "'A'" in err.message and "'Z'" in err.message


def test_all_errors_share_base():
    for err in (ConflictError("c"), InvalidAmountError("i"), DatabaseError("d", "q")):
        assert isinstance(err, GraphLedgerError)


def test_to_response_envelope():
    body = ResourceNotFoundError("Model", "42").to_response()["error"]
    assert body["code"] == "RESOURCE_NOT_FOUND"
    assert body["category"] == ErrorCategory.RESOURCE_NOT_FOUND.value
    assert body["message"] == "Model '42' not found"
    assert "timestamp" in body
