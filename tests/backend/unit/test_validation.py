"""
Unit tests for core.validation.parse_payload.
"""
import uuid

import pytest
from pydantic import BaseModel, field_validator

from aspas.core.errors import AppError, ErrorKind
from aspas.core.validation import parse_payload
from aspas.schemas import (
    IdParams,
    ListTasksQuery,
    PageQuery,
    PhraseCreateIn,
    ProjectCreateIn,
    RegisterIn,
)


def test_accepts_and_coerces_query_strings():
    q = parse_payload(PageQuery, {"page": "2", "limit": "25"}, "query")
    assert q.page == 2
    assert q.limit == 25


def test_defaults_applied():
    q = parse_payload(ListTasksQuery, {}, "query")
    assert q.page == 1
    assert q.limit == 10
    assert q.completed is None
    assert q.sortBy == "createdAt"
    assert q.sortOrder == "desc"


def test_completed_flag_parsed_from_text():
    assert parse_payload(ListTasksQuery, {"completed": "false"}, "query").completed is False
    assert parse_payload(ListTasksQuery, {"completed": "true"}, "query").completed is True


def test_trims_and_lowercases():
    body = parse_payload(RegisterIn, {"nome": "  Ana  ", "email": "Ana@Example.COM", "senha": "secret1"})
    assert body.nome == "Ana"
    assert body.email == "ana@example.com"
    assert body.role.value == "FREE"


def test_rejects_with_field_details():
    with pytest.raises(AppError) as exc:
        parse_payload(PageQuery, {"page": "0", "limit": "500"}, "query")
    err = exc.value
    assert err.kind is ErrorKind.VALIDATION_ERROR
    assert err.status_code == 400
    assert err.message == "Invalid query parameters"
    assert {d["field"] for d in err.details} == {"page", "limit"}


def test_nested_field_paths_are_dotted():
    with pytest.raises(AppError) as exc:
        parse_payload(PhraseCreateIn, {"phrase": "Long enough", "author": "Me", "tags": ["ok", "  "]})
    assert [d["field"] for d in exc.value.details] == ["tags.1"]
    assert exc.value.message == "Invalid data"


def test_collects_every_violation():
    with pytest.raises(AppError) as exc:
        parse_payload(ProjectCreateIn, {"name": "x", "color": "red"})
    assert {d["field"] for d in exc.value.details} == {"name", "color"}


def test_params_message_and_uuid_check():
    with pytest.raises(AppError) as exc:
        parse_payload(IdParams, {"id": "not-a-uuid"}, "params")
    assert exc.value.message == "Invalid parameters"
    good = uuid.uuid4()
    assert parse_payload(IdParams, {"id": str(good)}, "params").id == good


def test_unexpected_validator_failure_is_internal_error():
    class Exploding(BaseModel):
        value: str

        @field_validator("value")
        @classmethod
        def _boom(cls, v):
            raise RuntimeError("validator bug")

    with pytest.raises(AppError) as exc:
        parse_payload(Exploding, {"value": "x"})
    assert exc.value.kind is ErrorKind.INTERNAL_ERROR
    assert exc.value.status_code == 500
