from src.error_handler import ErrorHandler


def test_handle_exception_returns_payload():
    eh = ErrorHandler()
    out = eh.handle_exception(Exception("boom"), context={"k": "v"})
    assert out["fallback"] is True
    assert "progress has been saved" in out["message"].lower()
    assert "boom" in out["metadata"]["error"]
    assert out["metadata"]["context"] == {"k": "v"}


def test_handle_exception_without_context():
    out = ErrorHandler().handle_exception(ValueError("bad"))
    assert out["metadata"]["context"] == {}
