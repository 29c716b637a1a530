"""
Unit Tests for EngagementService
Tests for: like toggling, joins and capacity, comments, reports
"""
import pytest

from app.core.exceptions import (
    ActivityNotFoundError,
    AuthenticationError,
    CapacityReachedError,
    ConflictError,
    JoinRequestNotFoundError,
    ValidationError,
)
from app.models.report import ReportStatus
from app.services.engagement_service import EngagementService

MISSING_ID = '00000000-0000-0000-0000-000000000000'


@pytest.fixture
def service(db_session):
    return EngagementService(db_session)


@pytest.fixture
async def activity(verified_user, make_activity):
    return await make_activity(verified_user)


class TestToggleLike:

    @pytest.mark.asyncio
    async def test_like_then_unlike(self, service, test_user, activity):
        liked = await service.toggle_like(test_user, activity.id)
        unliked = await service.toggle_like(test_user, activity.id)

        assert (liked.liked, liked.like_count, liked.message) == (True, 1, 'Activity liked')
        assert (unliked.liked, unliked.like_count, unliked.message) == (False, 0, 'Activity unliked')

    @pytest.mark.asyncio
    async def test_likes_from_different_users_add_up(self, service, make_user, activity):
        for _ in range(3):
            result = await service.toggle_like(await make_user(), activity.id)

        assert result.like_count == 3

    @pytest.mark.asyncio
    async def test_anonymous(self, service, activity):
        with pytest.raises(AuthenticationError):
            await service.toggle_like(None, activity.id)

    @pytest.mark.asyncio
    async def test_missing_activity(self, service, test_user):
        with pytest.raises(ActivityNotFoundError):
            await service.toggle_like(test_user, MISSING_ID)


class TestJoinActivity:

    @pytest.mark.asyncio
    async def test_join_and_leave(self, service, test_user, activity):
        joined = await service.join_activity(test_user, activity.id)

        assert joined.joined is True
        assert joined.joined_count == 1
        assert joined.message == 'Successfully joined activity'

        left = await service.leave_activity(test_user, activity.id)

        assert left.joined is False
        assert left.joined_count == 0
        assert left.message == 'Successfully left activity'

    @pytest.mark.asyncio
    async def test_double_join(self, service, test_user, activity):
        await service.join_activity(test_user, activity.id)

        with pytest.raises(ConflictError) as exc_info:
            await service.join_activity(test_user, activity.id)

        assert exc_info.value.message == 'You have already requested to join this activity'

    @pytest.mark.asyncio
    async def test_capacity_enforced(self, service, make_user, verified_user, make_activity):
        activity = await make_activity(verified_user, capacity=2)
        for _ in range(2):
            await service.join_activity(await make_user(), activity.id)

        with pytest.raises(CapacityReachedError) as exc_info:
            await service.join_activity(await make_user(), activity.id)

        assert exc_info.value.status_code == 409
        assert exc_info.value.message == 'Activity is at full capacity'
        assert exc_info.value.details['capacity'] == 2
        assert await service.count_confirmed_joins(activity.id) == 2

    @pytest.mark.asyncio
    async def test_leaving_frees_a_place(self, service, make_user, verified_user, make_activity):
        activity = await make_activity(verified_user, capacity=1)
        first = await make_user()
        await service.join_activity(first, activity.id)
        await service.leave_activity(first, activity.id)

        result = await service.join_activity(await make_user(), activity.id)

        assert result.joined_count == 1

    @pytest.mark.asyncio
    async def test_leave_without_joining(self, service, test_user, activity):
        with pytest.raises(JoinRequestNotFoundError) as exc_info:
            await service.leave_activity(test_user, activity.id)

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_join_missing_activity(self, service, test_user):
        with pytest.raises(ActivityNotFoundError):
            await service.join_activity(test_user, MISSING_ID)


class TestComments:

    @pytest.mark.asyncio
    async def test_add_comment(self, service, test_user, activity):
        comment = await service.add_comment(test_user, activity.id, 'See you <there>')

        assert comment.text == 'See you &lt;there&gt;'
        assert comment.activity_id == activity.id
        assert comment.user.roll_number == test_user.roll_number

    @pytest.mark.asyncio
    @pytest.mark.parametrize('text', ['', 'x' * 1001])
    async def test_comment_length(self, service, test_user, activity, text):
        with pytest.raises(ValidationError) as exc_info:
            await service.add_comment(test_user, activity.id, text)

        assert exc_info.value.errors[0]['field'] == 'text'

    @pytest.mark.asyncio
    async def test_list_newest_first(self, service, test_user, activity):
        await service.add_comment(test_user, activity.id, 'First')
        await service.add_comment(test_user, activity.id, 'Second')

        comments = await service.list_comments(activity.id)

        assert [c.text for c in comments] == ['Second', 'First']

    @pytest.mark.asyncio
    async def test_list_for_missing_activity(self, service):
        with pytest.raises(ActivityNotFoundError):
            await service.list_comments(MISSING_ID)


class TestReports:

    @pytest.mark.asyncio
    async def test_report_created_open(self, service, test_user, activity):
        report = await service.report_activity(test_user, activity.id, 'This is clearly spam content')

        assert report.status == ReportStatus.OPEN
        assert report.activity_id == activity.id

    @pytest.mark.asyncio
    async def test_duplicate_report(self, service, test_user, activity):
        await service.report_activity(test_user, activity.id, 'This is clearly spam content')

        with pytest.raises(ConflictError) as exc_info:
            await service.report_activity(test_user, activity.id, 'Reporting once more, still spam')

        assert exc_info.value.message == 'You have already reported this activity'

    @pytest.mark.asyncio
    async def test_reason_too_short(self, service, test_user, activity):
        with pytest.raises(ValidationError) as exc_info:
            await service.report_activity(test_user, activity.id, 'spam')

        assert exc_info.value.errors[0]['field'] == 'reason'
