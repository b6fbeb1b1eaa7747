# aspas/api/routers/phrases.py
import uuid

from fastapi import APIRouter, Depends, Response, status

from aspas.api.deps import get_current_user_id
from aspas.core.security import iso_utc
from aspas.core.validation import validate_params, validate_query
from aspas.models.phrase import Phrase
from aspas.schemas.common import IdParams, UserIdParams
from aspas.schemas.phrase import ListPhrasesQuery, PhraseCreateIn, PhraseFiltersQuery, PhraseUpdateIn
from aspas.services.phrases import PhraseService

router = APIRouter(prefix="/phrases", tags=["phrases"])

service = PhraseService()


def _phrase_to_dict(p: Phrase) -> dict:
    return {
        "id": str(p.id),
        "phrase": p.phrase,
        "author": p.author,
        "tags": list(p.tags or []),
        "userId": str(p.user_id),
        "createdAt": iso_utc(p.created_at),
        "updatedAt": iso_utc(p.updated_at),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_phrase(body: PhraseCreateIn, user_id: uuid.UUID = Depends(get_current_user_id)):
    p = await service.create(user_id, body)
    return {"message": "Phrase created successfully", "phrase": _phrase_to_dict(p)}


@router.get("")
async def list_phrases(
    user_id: uuid.UUID = Depends(get_current_user_id),
    query: ListPhrasesQuery = Depends(validate_query(ListPhrasesQuery)),
):
    """
    Paginated phrase search.

    Query:
        userId (admins may target anyone; others only themselves),
        author (substring), tag (exact), search (phrase or author substring), page, limit

    Error codes:
        - USER_NOT_AUTHORIZED (403): userId of another user for a non-admin
        - USER_NOT_FOUND (404): the caller no longer exists
    """
    rows, meta = await service.list_phrases(user_id, query)
    data = {"phrases": [_phrase_to_dict(p) for p in rows], "pagination": meta}
    if not rows:
        data["message"] = "No phrases found"
    return data


# Fixed paths are registered before /{id}
@router.get("/filters/authors")
async def list_authors(
    user_id: uuid.UUID = Depends(get_current_user_id),
    query: PhraseFiltersQuery = Depends(validate_query(PhraseFiltersQuery)),
):
    return {"authors": await service.unique_authors(user_id, query.userId)}


@router.get("/filters/tags")
async def list_tags(
    user_id: uuid.UUID = Depends(get_current_user_id),
    query: PhraseFiltersQuery = Depends(validate_query(PhraseFiltersQuery)),
):
    return {"tags": await service.unique_tags(user_id, query.userId)}


@router.get("/user/{userId}")
async def list_user_phrases(
    user_id: uuid.UUID = Depends(get_current_user_id),
    params: UserIdParams = Depends(validate_params(UserIdParams)),
):
    """All phrases of one user, newest first (same authorization as the list)."""
    rows = await service.list_by_user(user_id, params.userId)
    return {"phrases": [_phrase_to_dict(p) for p in rows]}


@router.get("/{id}")
async def get_phrase(
    user_id: uuid.UUID = Depends(get_current_user_id),
    params: IdParams = Depends(validate_params(IdParams)),
):
    p = await service.get(user_id, params.id)
    return {"phrase": _phrase_to_dict(p)}


@router.put("/{id}")
async def update_phrase(
    body: PhraseUpdateIn,
    user_id: uuid.UUID = Depends(get_current_user_id),
    params: IdParams = Depends(validate_params(IdParams)),
):
    p = await service.update(user_id, params.id, body)
    return {"message": "Phrase updated successfully", "phrase": _phrase_to_dict(p)}


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_phrase(
    user_id: uuid.UUID = Depends(get_current_user_id),
    params: IdParams = Depends(validate_params(IdParams)),
):
    await service.delete(user_id, params.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
