"""Custom assertion helpers."""

from typing import Any, Optional


def assert_success_envelope(response: Any, expected_status: int = 200) -> Any:
    """Assert an ApiResponse carries a successful envelope and return its data."""
    assert response.status_code == expected_status
    assert response.body is not None
    assert response.body["success"] is True
    assert "error" not in response.body
    return response.body.get("data")


def assert_error_envelope(response: Any, expected_status: int, message: Optional[str] = None) -> str:
    """Assert an ApiResponse carries a failed envelope and return the error."""
    assert response.status_code == expected_status
    assert response.body["success"] is False
    assert "data" not in response.body
    assert isinstance(response.body.get("error"), str)
    if message is not None:
        assert response.body["error"] == message
    return response.body["error"]


def assert_cors(response: Any) -> None:
    assert response.headers.get("Access-Control-Allow-Origin") == "*"
