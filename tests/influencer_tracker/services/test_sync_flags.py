"""Tests for influencer_tracker.services.sync_flags."""
import pytest

from influencer_tracker.errors import ConflictError, NotFoundError
from influencer_tracker.models.influencer import Influencer
from influencer_tracker.services.sync_flags import (
    POSTS_FLAG, PROFILE_FLAG, claim_sync_flag, release_sync_flag,
)


def _influencer(db_session, influencer_id):
    db_session.expire_all()
    return db_session.get(Influencer, influencer_id)


class TestClaimSyncFlag:

    def test_sets_flag_and_stamps_attempt(self, make_influencer, db_session):
        influencer_id = make_influencer()
        snapshot = claim_sync_flag(influencer_id, PROFILE_FLAG)

        assert snapshot == {'id': influencer_id, 'name': 'Jane Doe', 'platform': 'LinkedIn', 'handle': 'janedoe'}
        row = _influencer(db_session, influencer_id)
        assert row.is_profile_syncing is True
        assert row.is_post_syncing is False
        assert row.last_sync_attempt is not None

    def test_second_claim_conflicts(self, make_influencer, db_session):
        influencer_id = make_influencer()
        claim_sync_flag(influencer_id, POSTS_FLAG)
        first_attempt = _influencer(db_session, influencer_id).last_sync_attempt

        with pytest.raises(ConflictError, match='Posts already being synced'):
            claim_sync_flag(influencer_id, POSTS_FLAG)

        row = _influencer(db_session, influencer_id)
        assert row.is_post_syncing is True
        assert row.last_sync_attempt == first_attempt

    def test_flags_are_independent(self, make_influencer):
        influencer_id = make_influencer()
        claim_sync_flag(influencer_id, POSTS_FLAG)
        claim_sync_flag(influencer_id, PROFILE_FLAG)

    def test_missing_influencer(self):
        with pytest.raises(NotFoundError):
            claim_sync_flag(999, PROFILE_FLAG)


class TestReleaseSyncFlag:

    def test_clears_flag(self, make_influencer, db_session):
        influencer_id = make_influencer()
        claim_sync_flag(influencer_id, PROFILE_FLAG)
        release_sync_flag(influencer_id, PROFILE_FLAG)
        assert _influencer(db_session, influencer_id).is_profile_syncing is False

    def test_claim_after_release(self, make_influencer):
        influencer_id = make_influencer()
        claim_sync_flag(influencer_id, PROFILE_FLAG)
        release_sync_flag(influencer_id, PROFILE_FLAG)
        claim_sync_flag(influencer_id, PROFILE_FLAG)
