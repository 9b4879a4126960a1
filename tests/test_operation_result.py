import pytest

from src.timeclock_payroll.timeclock_payroll.core.exceptions import (
    AlreadyActiveError,
    AuthorizationError,
    InvalidRangeError,
    NotFoundError,
    StillOnBreakError,
    ValidationError,
)
from src.timeclock_payroll.timeclock_payroll.core.result import UNEXPECTED_ERROR_MESSAGE, run_operation


def test_success_wraps_data():
    result = run_operation(lambda: {"ok": 1}, name="demo")

    assert result.success is True
    assert result.status_code == 200
    assert result.to_dict() == {"success": True, "data": {"ok": 1}}


@pytest.mark.parametrize(
    "error, status",
    [
        (ValidationError("bad"), 400),
        (InvalidRangeError("bad range"), 400),
        (AuthorizationError("nope"), 403),
        (NotFoundError("missing"), 404),
        (AlreadyActiveError("busy"), 409),
        (StillOnBreakError("on break"), 409),
    ],
)
def test_domain_errors_keep_their_message(error, status):
    def fail():
        raise error

    result = run_operation(fail, name="demo")

    assert result.success is False
    assert result.status_code == status
    assert result.to_dict() == {"success": False, "error": str(error)}


def test_unexpected_errors_are_logged_and_hidden(caplog):
    def fail():
        raise RuntimeError("db down")

    result = run_operation(fail, name="demo")

    assert result.status_code == 500
    assert result.error == UNEXPECTED_ERROR_MESSAGE
    assert "demo failed" in caplog.text
