import logging

import pytest
from fastapi import HTTPException

from src.db.session import get_db


def test_get_db_does_not_log_http_exceptions(caplog):
    gen = get_db()
    next(gen)
    with caplog.at_level(logging.DEBUG, logger="src.db.session"):
        with pytest.raises(HTTPException):
            gen.throw(HTTPException(status_code=404, detail="用户不存在"))

    assert not [r for r in caplog.records if r.levelno >= logging.ERROR]


def test_get_db_logs_unexpected_errors(caplog):
    gen = get_db()
    next(gen)
    with caplog.at_level(logging.DEBUG, logger="src.db.session"):
        with pytest.raises(RuntimeError):
            gen.throw(RuntimeError("disk full"))

    errors = [r for r in caplog.records if r.levelno >= logging.ERROR]
    assert len(errors) == 1
    assert errors[0].exc_info is not None
