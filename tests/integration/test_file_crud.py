"""
Test suite for FileCRUD against SQLite.

Tests short-code queries, link visibility rules, search matching and
pagination, and soft deletion.

System role: Verification of link persistence queries
"""

import asyncio
import uuid

import pytest
from sqlalchemy.exc import IntegrityError

from linkdrop.boundary.db.CRUD.file_crud import escape_like, file_crud
from linkdrop.boundary.db.models.file_model import FileStatus, MetadataStatus


class TestShortCodeQueries:
    @pytest.mark.asyncio
    async def test_short_code_exists(self, db_session, insert_record) -> None:
        await insert_record(short_code="ABC123")

        assert await file_crud.short_code_exists(db_session, "ABC123")
        assert not await file_crud.short_code_exists(db_session, "ZZZ999")

    @pytest.mark.asyncio
    async def test_deleted_records_keep_their_code_reserved(self, db_session, insert_record) -> None:
        await insert_record(short_code="ABC123", status=FileStatus.DELETED)

        assert await file_crud.short_code_exists(db_session, "ABC123")
        assert await file_crud.get_by_short_code(db_session, "ABC123") is None

    @pytest.mark.asyncio
    async def test_unique_constraint_on_short_code(self, insert_record) -> None:
        await insert_record(short_code="ABC123")

        with pytest.raises(IntegrityError):
            await insert_record(short_code="ABC123")


class TestGetLink:
    @pytest.mark.asyncio
    async def test_returns_active_link(self, db_session, insert_record) -> None:
        record = await insert_record()

        found = await file_crud.get_link(db_session, record.id)

        assert found is not None
        assert found.link_url == "https://example.com/post/1"

    @pytest.mark.asyncio
    async def test_ignores_files_and_deleted_links(self, db_session, insert_record) -> None:
        plain_file = await insert_record(short_code="FILE11", is_link=False, link_url=None)
        deleted = await insert_record(short_code="GONE11", status=FileStatus.DELETED)

        assert await file_crud.get_link(db_session, plain_file.id) is None
        assert await file_crud.get_link(db_session, deleted.id) is None
        assert await file_crud.get_link(db_session, uuid.uuid4()) is None


class TestSearchLinks:
    @pytest.mark.asyncio
    async def test_matches_url_title_description_and_tags(self, db_session, insert_record) -> None:
        await insert_record(short_code="AAAAA1", link_url="https://python.org/")
        await insert_record(short_code="AAAAA2", link_url="https://a.test/", link_title="Learning PYTHON")
        await insert_record(short_code="AAAAA3", link_url="https://b.test/", link_description="about python")
        await insert_record(short_code="AAAAA4", link_url="https://c.test/", tags=["python"])
        await insert_record(short_code="AAAAA5", link_url="https://d.test/", link_title="Rust")

        records, total = await file_crud.search_links(db_session, "Python")

        assert total == 4
        assert {r.short_code for r in records} == {"AAAAA1", "AAAAA2", "AAAAA3", "AAAAA4"}

    @pytest.mark.asyncio
    async def test_excludes_deleted_records_and_plain_files(self, db_session, insert_record) -> None:
        await insert_record(short_code="AAAAA1", link_title="keep me")
        await insert_record(short_code="AAAAA2", link_title="keep me", status=FileStatus.DELETED)
        await insert_record(short_code="AAAAA3", original_name="keep me", is_link=False, link_url=None)

        records, total = await file_crud.search_links(db_session, "keep")

        assert total == 1
        assert records[0].short_code == "AAAAA1"

    @pytest.mark.asyncio
    async def test_wildcards_match_literally(self, db_session, insert_record) -> None:
        await insert_record(short_code="AAAAA1", link_title="100% pure")
        await insert_record(short_code="AAAAA2", link_title="1000 pure")

        records, total = await file_crud.search_links(db_session, "100%")

        assert total == 1
        assert records[0].short_code == "AAAAA1"

    @pytest.mark.asyncio
    async def test_non_ascii_tags_are_searchable(self, db_session, insert_record) -> None:
        await insert_record(short_code="AAAAA1", tags=["编程"])

        _, total = await file_crud.search_links(db_session, "编程")

        assert total == 1

    @pytest.mark.asyncio
    async def test_tags_match_one_element_at_a_time(self, db_session, insert_record) -> None:
        await insert_record(short_code="AAAAA1", link_url="https://a.test/", link_title="alpha", tags=[])
        await insert_record(short_code="AAAAA2", link_url="https://b.test/", link_title="beta", tags=["x", "y"])

        _, bracket_total = await file_crud.search_links(db_session, "[")
        _, spanning_total = await file_crud.search_links(db_session, 'x", "y')
        _, quote_total = await file_crud.search_links(db_session, '"')
        records, single_total = await file_crud.search_links(db_session, "Y")

        assert bracket_total == 0
        assert spanning_total == 0
        assert quote_total == 0
        assert single_total == 1
        assert records[0].short_code == "AAAAA2"

    @pytest.mark.asyncio
    async def test_tag_substring_matches(self, db_session, insert_record) -> None:
        await insert_record(short_code="AAAAA1", link_url="https://a.test/", tags=["reading-list", "Later"])

        _, total = await file_crud.search_links(db_session, "later")

        assert total == 1

    @pytest.mark.asyncio
    async def test_newest_first_with_offset_and_limit(self, db_session, insert_record) -> None:
        for index in range(5):
            await insert_record(short_code=f"PAGE{index:02d}".replace("0", "A"), link_title=f"item {index}")
            await asyncio.sleep(0.01)

        records, total = await file_crud.search_links(db_session, "", offset=1, limit=2)

        assert total == 5
        assert [r.link_title for r in records] == ["item 3", "item 2"]


class TestMutations:
    @pytest.mark.asyncio
    async def test_set_metadata_status(self, db_session, insert_record) -> None:
        record = await insert_record()

        updated = await file_crud.set_metadata_status(db_session, record.id, MetadataStatus.PROCESSING)
        await db_session.commit()

        assert updated.metadata_status == MetadataStatus.PROCESSING

    @pytest.mark.asyncio
    async def test_update_link_metadata(self, db_session, insert_record) -> None:
        record = await insert_record()

        updated = await file_crud.update_link_metadata(db_session, record.id, link_title="Fetched")
        await db_session.commit()

        assert updated.link_title == "Fetched"
        assert updated.link_description is None

    @pytest.mark.asyncio
    async def test_soft_delete(self, db_session, insert_record) -> None:
        record = await insert_record()

        assert await file_crud.soft_delete(db_session, record.id)
        await db_session.commit()

        assert await file_crud.get_link(db_session, record.id) is None
        assert not await file_crud.soft_delete(db_session, record.id)
        assert not await file_crud.soft_delete(db_session, uuid.uuid4())


def test_escape_like() -> None:
    assert escape_like("50%_off\\") == "50\\%\\_off\\\\"
