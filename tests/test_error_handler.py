from src.catalog.errors import ConsistencyError, ProductValidationError, SyncError
from src.error_handler import ErrorHandler


def test_handle_exception_returns_payload():
    eh = ErrorHandler()
    out = eh.handle_exception(Exception("boom"), context={"k": "v"})
    assert out["status_code"] == 500
    assert out["error"] == "InternalError"
    assert "internal error" in out["message"].lower()
    assert out["metadata"]["context"] == {"k": "v"}


def test_catalog_errors_keep_their_status():
    eh = ErrorHandler()
    assert eh.handle_exception(SyncError("stripe down"))["status_code"] == 502
    out = eh.handle_exception(ConsistencyError("no twin", product_id="p1"))
    assert out["status_code"] == 409
    assert out["error"] == "ConsistencyError"


def test_validation_errors_carry_field_errors():
    out = ErrorHandler().handle_exception(ProductValidationError(field_errors={"price": "too high"}))
    assert out["status_code"] == 422
    assert out["field_errors"] == {"price": "too high"}
    assert "field_errors" not in ErrorHandler().handle_exception(SyncError("x"))
