"""Tests for influencer_tracker.services.influencers."""
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import IntegrityError

from influencer_tracker import tasks
from influencer_tracker.errors import ConflictError, NotFoundError, ValidationError
from influencer_tracker.models.influencer import Influencer
from influencer_tracker.models.post import Post
from influencer_tracker.services import influencers as service
from influencer_tracker.services.sync_flags import POSTS_FLAG, PROFILE_FLAG, claim_sync_flag


class TestAddInfluencer:

    def test_creates_and_enqueues_full_sync(self, mock_queues, db_session):
        data = service.add_influencer(
            name='Jane Doe',
            platform='LinkedIn',
            profile_url='https://www.linkedin.com/in/janedoe/',
            organization_id='org-1',
            user_id='user-1',
        )

        assert data['handle'] == 'janedoe'
        assert data['is_post_syncing'] is False
        assert db_session.query(Influencer).count() == 1
        args, kwargs = mock_queues.sync.enqueue.call_args
        assert args == (tasks.sync_influencer_data, data['id'], 'org-1', 'user-1')
        assert kwargs['job_timeout'] == 300

    def test_sync_false_skips_enqueue(self, mock_queues):
        service.add_influencer('Jane', 'LinkedIn', 'janedoe', 'org-1', 'user-1', sync=False)
        mock_queues.sync.enqueue.assert_not_called()

    def test_duplicate_in_same_org_conflicts(self, mock_queues, db_session):
        service.add_influencer('Jane', 'LinkedIn', 'https://linkedin.com/in/janedoe', 'org-1', 'user-1')
        with pytest.raises(ConflictError, match='already being tracked'):
            service.add_influencer('Jane 2', 'LinkedIn', '@janedoe', 'org-1', 'user-2')
        assert db_session.query(Influencer).count() == 1

    def test_same_handle_other_org_is_allowed(self, mock_queues, db_session):
        service.add_influencer('Jane', 'LinkedIn', 'janedoe', 'org-1', 'user-1')
        service.add_influencer('Jane', 'LinkedIn', 'janedoe', 'org-2', 'user-9')
        assert db_session.query(Influencer).count() == 2

    def test_unique_constraint_race_is_conflict(self, mock_queues):
        """A concurrent add slips past the pre-check; the unique constraint catches it."""
        session = MagicMock()
        session.query.return_value.filter_by.return_value.first.return_value = None
        session.commit.side_effect = IntegrityError('INSERT', {}, Exception('unique'))
        with patch('influencer_tracker.services.influencers.get_session', return_value=session):
            with pytest.raises(ConflictError):
                service.add_influencer('Jane', 'LinkedIn', 'janedoe', 'org-1', 'user-1')
        session.rollback.assert_called_once()
        mock_queues.sync.enqueue.assert_not_called()

    def test_enqueue_failure_is_not_raised(self, mock_queues):
        mock_queues.sync.enqueue.side_effect = ConnectionError('redis down')
        data = service.add_influencer('Jane', 'LinkedIn', 'janedoe', 'org-1', 'user-1')
        assert data['id'] is not None

    @pytest.mark.parametrize('kwargs, message', [
        (dict(platform='', profile_url='janedoe', name='J'), 'required'),
        (dict(platform='LinkedIn', profile_url='', name='J'), 'required'),
        (dict(platform='TikTok', profile_url='janedoe', name='J'), 'Invalid platform'),
        (dict(platform='LinkedIn', profile_url='janedoe', name=''), 'Name is required'),
        (dict(platform='LinkedIn', profile_url='jane doe', name='J'), 'Invalid profile URL'),
    ])
    def test_validation(self, mock_queues, kwargs, message):
        with pytest.raises(ValidationError, match=message):
            service.add_influencer(organization_id='org-1', user_id='user-1', **kwargs)


class TestReadAndDelete:

    def test_list_scoped_to_org(self, make_influencer):
        make_influencer(handle='a')
        make_influencer(handle='b', organization_id='org-2')
        assert [i['handle'] for i in service.list_influencers('org-1')] == ['a']

    def test_get_other_org_is_not_found(self, make_influencer):
        influencer_id = make_influencer(organization_id='org-2')
        with pytest.raises(NotFoundError):
            service.get_influencer(influencer_id, 'org-1')

    def test_delete_cascades_to_posts(self, registry, make_influencer, db_session):
        from influencer_tracker.scrapers.base import PostData
        from influencer_tracker.services.post_sync import PostSyncService

        influencer_id = make_influencer()
        PostSyncService(registry).sync_scraped_post_data(
            influencer_id, PostData(platform_post_id='p', posted_at=1709294400000),
        )
        service.delete_influencer(influencer_id, 'org-1')

        assert db_session.query(Influencer).count() == 0
        assert db_session.query(Post).count() == 0

    def test_delete_missing(self):
        with pytest.raises(NotFoundError):
            service.delete_influencer(1, 'org-1')

    def test_sync_status(self, make_influencer):
        influencer_id = make_influencer()
        claim_sync_flag(influencer_id, POSTS_FLAG)
        status = service.get_sync_status(influencer_id, 'org-1')
        assert status['is_post_syncing'] is True
        assert status['is_profile_syncing'] is False
        assert status['last_sync_attempt'] is not None
        assert status['last_profile_sync'] is None


class TestSyncRequests:

    def test_post_sync_enqueues(self, mock_queues, make_influencer):
        influencer_id = make_influencer()
        summary = service.request_post_sync(influencer_id, 'org-1', 'user-1')
        assert summary == {'id': influencer_id, 'name': 'Jane Doe', 'platform': 'LinkedIn'}
        assert mock_queues.sync.enqueue.call_args.args[0] is tasks.sync_influencer_posts

    def test_profile_sync_enqueues(self, mock_queues, make_influencer):
        influencer_id = make_influencer()
        service.request_profile_sync(influencer_id, 'org-1', 'user-1')
        assert mock_queues.sync.enqueue.call_args.args[0] is tasks.sync_influencer_profile

    def test_post_sync_conflict(self, mock_queues, make_influencer):
        influencer_id = make_influencer()
        claim_sync_flag(influencer_id, POSTS_FLAG)
        with pytest.raises(ConflictError):
            service.request_post_sync(influencer_id, 'org-1', 'user-1')
        mock_queues.sync.enqueue.assert_not_called()

    def test_data_sync_conflicts_on_either_flag(self, mock_queues, make_influencer):
        influencer_id = make_influencer()
        claim_sync_flag(influencer_id, PROFILE_FLAG)
        with pytest.raises(ConflictError):
            service.request_data_sync(influencer_id, 'org-1', 'user-1')

    def test_data_sync_enqueues(self, mock_queues, make_influencer):
        influencer_id = make_influencer()
        service.request_data_sync(influencer_id, 'org-1', 'user-1')
        assert mock_queues.sync.enqueue.call_args.args[0] is tasks.sync_influencer_data
