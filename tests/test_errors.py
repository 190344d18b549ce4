"""Tests for the error envelope and database-error mapping."""

import pytest
from sqlalchemy.exc import IntegrityError

from catalog.core.errors import (
    InternalError,
    ValidationFailed,
    is_unique_violation,
    render,
)


class _PgError(Exception):
    pgcode = "23505"


def _integrity(orig: Exception) -> IntegrityError:
    return IntegrityError("INSERT INTO products ...", {}, orig)


def test_unique_violation_detection():
    assert is_unique_violation(_integrity(Exception("UNIQUE constraint failed: products.id")))
    assert is_unique_violation(_integrity(_PgError("duplicate key value")))
    assert not is_unique_violation(
        _integrity(Exception("NOT NULL constraint failed: products.in_stock"))
    )


def test_render_taxonomy_errors():
    res = render(ValidationFailed(errors=[{"field": "name", "message": "required"}]))
    assert res.status_code == 400
    assert res.body == (
        b'{"success":false,"message":"Validation error",'
        b'"errors":[{"field":"name","message":"required"}]}'
    )

    res = render(InternalError())
    assert res.status_code == 500
    assert res.body == b'{"success":false,"message":"Internal server error"}'


@pytest.mark.asyncio
async def test_integrity_errors_are_split_by_constraint(app, client):
    @app.get("/raise/unique")
    def raise_unique():
        raise _integrity(Exception("UNIQUE constraint failed: products.id"))

    @app.get("/raise/not-null")
    def raise_not_null():
        raise _integrity(Exception("NOT NULL constraint failed: products.in_stock"))

    unique = await client.get("/raise/unique")
    not_null = await client.get("/raise/not-null")

    assert unique.status_code == 400
    assert unique.json() == {"success": False, "message": "Duplicate value for a unique field"}
    assert not_null.status_code == 500
    assert not_null.json() == {"success": False, "message": "Database error"}
