"""
Unit tests for the curriculum service layer.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from schoolbase.modules.curriculum.models import Chapter, Subject, SubjectClass
from schoolbase.modules.curriculum.schemas import ClassListItem
from schoolbase.modules.curriculum.service import (
    get_chapters,
    get_class_subjects,
    group_by_class_number,
    list_class_lists,
)
from schoolbase.modules.shared.errors import NotFoundError

REPO = "schoolbase.modules.curriculum.service.repository"


def _item(id, number, stream=None):
    return ClassListItem(
        id=id,
        class_name=f"Class {number}",
        class_number=number,
        stream=stream,
        code=f"{number}-{stream.upper()}" if stream else str(number),
    )


class TestGroupByClassNumber:
    def test_groups_keep_order(self):
        items = [
            _item(10, 10),
            _item(11, 11, "science"),
            _item(12, 11, "arts"),
            _item(13, 11, "commerce"),
        ]

        groups = group_by_class_number(items)

        assert [g.class_number for g in groups] == [10, 11]
        assert [c.id for c in groups[1].classes] == [11, 12, 13]

    def test_empty(self):
        assert group_by_class_number([]) == []


class TestListClassLists:
    @pytest.mark.asyncio
    async def test_passes_class_number(self, mock_db, science_template):
        with patch(REPO) as mock_repo:
            mock_repo.list_class_lists = AsyncMock(return_value=[science_template])

            items = await list_class_lists(mock_db, 11)

            mock_repo.list_class_lists.assert_called_once_with(mock_db, 11)
            assert items[0].code == "11-SCIENCE"


class TestGetClassSubjects:
    @pytest.mark.asyncio
    async def test_subjects(self, mock_db, sample_template):
        with patch(REPO) as mock_repo:
            mock_repo.get_class_list = AsyncMock(return_value=sample_template)
            mock_repo.list_subjects = AsyncMock(
                return_value=[{"id": 1, "name": "Mathematics", "subject_class_id": 5}]
            )

            result = await get_class_subjects(mock_db, 11)

            assert result.class_id == 11
            assert result.subjects[0].subject_class_id == 5

    @pytest.mark.asyncio
    async def test_unknown_template(self, mock_db):
        with patch(REPO) as mock_repo:
            mock_repo.get_class_list = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError) as exc_info:
                await get_class_subjects(mock_db, 99)

            assert exc_info.value.message == "Class with ID 99 not found"


class TestGetChapters:
    @pytest.mark.asyncio
    async def test_chapters(self, mock_db, sample_template):
        subject = MagicMock(spec=Subject)
        subject.id = 1
        subject.name = "Mathematics"
        link = MagicMock(spec=SubjectClass)
        link.id = 5
        chapter = MagicMock(spec=Chapter)
        chapter.id = 100
        chapter.chapter_name = "Real Numbers"
        chapter.chapter_number = 1
        chapter.description = None
        with patch(REPO) as mock_repo:
            mock_repo.get_class_list = AsyncMock(return_value=sample_template)
            mock_repo.get_subject = AsyncMock(return_value=subject)
            mock_repo.get_subject_class = AsyncMock(return_value=link)
            mock_repo.list_chapters = AsyncMock(return_value=[chapter])

            result = await get_chapters(mock_db, 11, 1)

            mock_repo.list_chapters.assert_called_once_with(mock_db, 5)
            assert result.subject_name == "Mathematics"
            assert result.chapters[0].chapter_name == "Real Numbers"

    @pytest.mark.asyncio
    async def test_unknown_subject(self, mock_db, sample_template):
        with patch(REPO) as mock_repo:
            mock_repo.get_class_list = AsyncMock(return_value=sample_template)
            mock_repo.get_subject = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError) as exc_info:
                await get_chapters(mock_db, 11, 9)

            assert exc_info.value.message == "Subject with ID 9 not found"

    @pytest.mark.asyncio
    async def test_subject_not_taught_in_class(self, mock_db, sample_template):
        with patch(REPO) as mock_repo:
            mock_repo.get_class_list = AsyncMock(return_value=sample_template)
            subject = MagicMock(spec=Subject)
            subject.id = 9
            subject.name = "Latin"
            mock_repo.get_subject = AsyncMock(return_value=subject)
            mock_repo.get_subject_class = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError) as exc_info:
                await get_chapters(mock_db, 11, 9)

            assert "No subject-class relationship" in exc_info.value.message
