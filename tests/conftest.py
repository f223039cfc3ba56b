"""Shared test fixtures."""
import pytest
from unittest.mock import patch, MagicMock
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from influencer_tracker.database import Base

# Modules that bind `get_session` at import time via `from ... import get_session`
_SESSION_USERS = [
    'influencer_tracker.services.scrap_jobs',
    'influencer_tracker.services.sync_flags',
    'influencer_tracker.services.profile_sync',
    'influencer_tracker.services.post_sync',
    'influencer_tracker.services.influencers',
    'influencer_tracker.tasks',
]


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with schema created.

    StaticPool keeps a single connection, so every session opened by the
    code under test sees the same database.
    """
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    import influencer_tracker.models  # noqa: F401
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine)


@pytest.fixture
def db_session(session_factory):
    """Session for test assertions. Production code gets its own sessions."""
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture(autouse=True)
def patch_get_session(session_factory):
    """Route every get_session() call to the in-memory engine.

    Each call returns a new session, so close() inside the production code
    behaves as it does against a real database.
    """
    from contextlib import ExitStack
    import importlib

    with ExitStack() as stack:
        for module_name in _SESSION_USERS:
            importlib.import_module(module_name)
            stack.enter_context(patch(f'{module_name}.get_session', side_effect=lambda: session_factory()))
        yield session_factory


@pytest.fixture
def mock_queues():
    """Replace the RQ queues with MagicMocks where they are looked up."""
    webhook_queue = MagicMock()
    webhook_queue.enqueue.return_value = MagicMock(id='rq-job-1')
    sync_queue = MagicMock()
    with patch('influencer_tracker.services.webhook_relay.get_webhook_queue', return_value=webhook_queue), \
         patch('influencer_tracker.services.influencers.get_sync_queue', return_value=sync_queue):
        yield MagicMock(webhook=webhook_queue, sync=sync_queue)


@pytest.fixture
def fake_scraper():
    """A ScraperAdapter double registered under 'linkedin'."""
    from influencer_tracker.scrapers.base import ScraperAdapter
    from influencer_tracker.scrapers.linkedin import LinkedInScraper

    class FakeScraper(ScraperAdapter):
        platform = 'LinkedIn'

        def __init__(self):
            self.profile_calls = []
            self.post_calls = []

        def init_scrap_profile(self, handle, job_context):
            self.profile_calls.append((handle, job_context))

        def init_scrap_posts(self, handle, job_context):
            self.post_calls.append((handle, job_context))

        # Real parsers, so webhook tests exercise the LinkedIn mapping
        def parse_profile_data(self, payload):
            return LinkedInScraper(api_token='test').parse_profile_data(payload)

        def parse_post_data(self, payload):
            return LinkedInScraper(api_token='test').parse_post_data(payload)

    return FakeScraper()


@pytest.fixture
def registry(fake_scraper):
    from influencer_tracker.scrapers.registry import ScraperRegistry
    return ScraperRegistry({'linkedin': lambda: fake_scraper})


@pytest.fixture
def app(registry):
    """Flask test app."""
    from influencer_tracker import create_app
    app = create_app(registry=registry)
    app.config['TESTING'] = True
    yield app


@pytest.fixture
def client(app):
    """Flask test client."""
    with app.test_client() as c:
        yield c


@pytest.fixture
def auth_headers():
    return {'X-Organization-Id': 'org-1', 'X-User-Id': 'user-1'}


@pytest.fixture
def make_influencer(db_session):
    """Factory fixture — inserts an Influencer row and returns its id."""
    from influencer_tracker.models.influencer import Influencer

    def _make(**overrides):
        defaults = dict(
            name='Jane Doe',
            platform='LinkedIn',
            handle='janedoe',
            organization_id='org-1',
            user_id='user-1',
        )
        defaults.update(overrides)
        influencer = Influencer(**defaults)
        db_session.add(influencer)
        db_session.commit()
        return influencer.id
    return _make


@pytest.fixture
def make_job(make_influencer):
    """Factory fixture — creates a ScrapJob through the ledger and returns its job_id."""
    from influencer_tracker.scrapers.base import ScrapJobContext
    from influencer_tracker.services import scrap_jobs

    def _make(influencer_id=None, job_type='posts', status='pending', organization_id='org-1'):
        if influencer_id is None:
            influencer_id = make_influencer()
        context = ScrapJobContext(
            organization_id=organization_id,
            user_id='user-1',
            influencer_id=influencer_id,
            job_type=job_type,
        )
        return scrap_jobs.create_job(
            handle='janedoe',
            target_url='https://linkedin.com/in/janedoe',
            job_type=job_type,
            job_context=context,
            platform='LinkedIn',
            status=status,
        )
    return _make


@pytest.fixture
def sample_post_payload():
    """One post record as Bright Data delivers it."""
    return {
        'post_id': '7140000000000000001',
        'url': 'https://www.linkedin.com/posts/janedoe_activity-7140000000000000001',
        'post_text': 'Shipping season is here',
        'likes': '1.2K',
        'num_comments': 34,
        'reposts': '1,050',
        'date_posted': '2024-03-01T12:00:00.000Z',
        'images': ['https://media.licdn.com/a.jpg', {'url': 'https://media.licdn.com/b.jpg'}],
    }


@pytest.fixture
def sample_profile_payload():
    """One profile record as Bright Data delivers it."""
    return {
        'name': 'Jane Doe',
        'url': 'https://www.linkedin.com/in/janedoe',
        'avatar': 'https://media.licdn.com/avatar.jpg',
        'linkedin_id': 'janedoe',
        'about': 'Builder of things',
        'followers': 4521,
        'city': 'Berlin',
    }
