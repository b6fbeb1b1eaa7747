# aspas/services/phrases.py
"""
Phrase service (legacy quotes feature).

Single phrases are owner scoped like projects and tasks. Listing endpoints take
an optional ``userId`` filter: regular users may only ask for their own
phrases, admins may ask for anyone's or, without the filter, for all of them.
"""
import uuid
from typing import Optional

from tortoise.expressions import Q

from aspas.core.errors import AppError, ErrorKind
from aspas.core.pagination import page_offset, paginate, pagination_meta
from aspas.core.security import utc_now
from aspas.models.phrase import Phrase
from aspas.models.user import Role, User
from aspas.schemas.phrase import ListPhrasesQuery, PhraseCreateIn, PhraseUpdateIn

_REQUIRED = {"phrase", "author", "tags"}

# Rows read per round trip when tag membership has to be checked in Python
TAG_SCAN_BATCH = 500


def _json_containment_supported() -> bool:
    return Phrase._meta.db.capabilities.dialect == "postgres"


class PhraseService:
    async def _caller(self, user_id) -> User:
        user = await User.get_or_none(id=user_id)
        if user is None:
            raise AppError(ErrorKind.USER_NOT_FOUND)
        return user

    async def _visible(self, user_id, target_user_id: Optional[uuid.UUID]):
        """Queryset of the phrases the caller may list, honoring the userId filter."""
        caller = await self._caller(user_id)
        is_admin = caller.role == Role.ADMIN
        if target_user_id is not None:
            if not is_admin and str(target_user_id) != str(caller.id):
                raise AppError(ErrorKind.USER_NOT_AUTHORIZED)
            return Phrase.filter(user_id=target_user_id)
        if is_admin:
            return Phrase.all()
        return Phrase.filter(user_id=caller.id)

    async def create(self, user_id, data: PhraseCreateIn) -> Phrase:
        return await Phrase.create(phrase=data.phrase, author=data.author, tags=list(data.tags), user_id=user_id)

    async def list_phrases(self, user_id, query: ListPhrasesQuery) -> tuple[list[Phrase], dict]:
        qs = await self._visible(user_id, query.userId)
        if query.author:
            qs = qs.filter(author__icontains=query.author)
        if query.search:
            qs = qs.filter(Q(phrase__icontains=query.search) | Q(author__icontains=query.search))
        if query.tag:
            if _json_containment_supported():
                qs = qs.filter(tags__contains=[query.tag])
            else:
                return await self._page_by_tag(qs, query.tag, query.page, query.limit)
        return await paginate(qs.order_by("-created_at"), query.page, query.limit)

    async def _page_by_tag(self, qs, tag: str, page: int, limit: int) -> tuple[list[Phrase], dict]:
        """
        Tag filter for backends without JSON containment (SQLite).

        Only (id, tags) pairs are scanned, in fixed-size batches; full rows are
        loaded for the requested page alone.
        """
        ordered = qs.order_by("-created_at", "id")
        matches: list = []
        offset = 0
        while True:
            batch = await ordered.offset(offset).limit(TAG_SCAN_BATCH).values_list("id", "tags")
            matches.extend(pid for pid, tags in batch if tag in (tags or []))
            if len(batch) < TAG_SCAN_BATCH:
                break
            offset += TAG_SCAN_BATCH

        start = page_offset(page, limit)
        page_ids = matches[start:start + limit]
        by_id = {p.id: p for p in await Phrase.filter(id__in=page_ids)} if page_ids else {}
        rows = [by_id[pid] for pid in page_ids if pid in by_id]
        return rows, pagination_meta(page, limit, len(matches))

    async def list_by_user(self, user_id, target_user_id: uuid.UUID) -> list[Phrase]:
        qs = await self._visible(user_id, target_user_id)
        return await qs.order_by("-created_at")

    async def get(self, user_id, phrase_id) -> Phrase:
        phrase = await Phrase.get_or_none(id=phrase_id, user_id=user_id)
        if phrase is None:
            raise AppError(ErrorKind.PHRASE_NOT_FOUND)
        return phrase

    async def update(self, user_id, phrase_id, data: PhraseUpdateIn) -> Phrase:
        phrase = await self.get(user_id, phrase_id)
        changes = {
            k: v for k, v in data.model_dump(exclude_unset=True).items()
            if not (k in _REQUIRED and v is None)
        }
        if changes:
            await Phrase.filter(id=phrase.id).update(**changes, updated_at=utc_now())
        return await self.get(user_id, phrase.id)

    async def delete(self, user_id, phrase_id) -> None:
        phrase = await self.get(user_id, phrase_id)
        await Phrase.filter(id=phrase.id).delete()

    async def unique_authors(self, user_id, target_user_id: Optional[uuid.UUID] = None) -> list[str]:
        qs = await self._visible(user_id, target_user_id)
        authors = await qs.order_by("author").distinct().values_list("author", flat=True)
        return list(authors)

    async def unique_tags(self, user_id, target_user_id: Optional[uuid.UUID] = None) -> list[str]:
        qs = await self._visible(user_id, target_user_id)
        seen: dict[str, None] = {}
        for tags in await qs.order_by("created_at").values_list("tags", flat=True):
            for tag in tags or []:
                if tag.strip():
                    seen.setdefault(tag, None)
        return list(seen)
