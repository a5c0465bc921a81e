import pytest
from datetime import date

from app import create_app
from config import Config
from extensions import db as _db # Alias to avoid fixture name conflict
from models import (
    AdPlatformIntegration,
    Campaign,
    CampaignAnalytics,
    CampaignStatusEnum,
    IntegrationStatusEnum,
    PlatformNameEnum,
    User,
    UserRoleEnum,
)

class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:' # Use in-memory SQLite for tests
    WTF_CSRF_ENABLED = False # Disable CSRF so tests can post JSON directly
    SECRET_KEY = 'test-secret-key-for-forms' # WTForms/Flask-Login require a SECRET_KEY for session context
    # Fixed URL-safe base64-encoded 32-byte key, used when tokens are encrypted.
    FERNET_KEY = b'MDEyMzQ1Njc4OWFiY2RlZjAxMjM0NTY3ODlhYmNkZWY='
    LOG_LEVEL = 'DEBUG'
    ANALYTICS_CACHE_TTL_MINUTES = 15
    ANALYTICS_AVG_ORDER_VALUE = 100

TEST_PASSWORD = 'password123'

@pytest.fixture(scope='session')
def app():
    """
    Session-wide test Flask application.
    Ensures the app is created once per test session with TestConfig.
    """
    app_instance = create_app(config_class=TestConfig)
    return app_instance

@pytest.fixture(scope='function')
def app_context(app):
    """
    Function-scoped application context.
    Pushes an app context before each test that needs it and pops it afterwards.
    """
    with app.app_context():
        yield

@pytest.fixture(scope='function')
def db(app_context):
    """
    Function-scoped database fixture.
    Creates all database tables before each test and drops them afterwards,
    so every test starts from a clean database.
    """
    _db.create_all() # Create tables based on models
    yield _db
    _db.session.remove() # Ensure session is closed
    _db.drop_all()     # Drop all tables to clean up

@pytest.fixture(scope='function')
def client(app):
    """
    Test client fixture for making requests to the application.
    Function-scoped so login cookies never leak from one test into the next.
    """
    return app.test_client()

def _create_user(db, email, role=UserRoleEnum.MARKETING):
    user = User(email=email, full_name=email.split('@')[0].title(), role=role)
    user.set_password(TEST_PASSWORD)
    db.session.add(user)
    db.session.commit()
    return user

@pytest.fixture
def user(db):
    return _create_user(db, 'marketer@example.com')

@pytest.fixture
def other_user(db):
    return _create_user(db, 'other@example.com')

@pytest.fixture
def admin_user(db):
    return _create_user(db, 'admin@example.com', role=UserRoleEnum.ADMIN)

def _login(client, user):
    response = client.post('/auth/login', json={'email': user.email, 'password': TEST_PASSWORD})
    assert response.status_code == 200
    return client

@pytest.fixture
def auth_client(client, user):
    """Client with an authenticated session for `user`."""
    return _login(client, user)

@pytest.fixture
def admin_client(client, admin_user):
    """Client with an authenticated session for `admin_user`."""
    return _login(client, admin_user)

@pytest.fixture
def seeded_analytics(db, user, other_user):
    """
    Two campaigns for `user` (one with FACEBOOK and INSTAGRAM rows over two days)
    and one campaign for `other_user`, plus a connected FACEBOOK account for `user`.

    Returns a dict with the campaign ids under 'summer', 'winter' and 'foreign'.
    """
    summer = Campaign(id='camp-summer', created_by=user.id, name='Summer Sale',
                      status=CampaignStatusEnum.ACTIVE, budget=500, start_date=date(2024, 1, 1))
    winter = Campaign(id='camp-winter', created_by=user.id, name='Winter Sale',
                      status=CampaignStatusEnum.PAUSED, budget=250)
    foreign = Campaign(id='camp-foreign', created_by=other_user.id, name='Not Yours',
                       status=CampaignStatusEnum.ACTIVE, budget=1000)
    db.session.add_all([summer, winter, foreign])
    db.session.add_all([
        CampaignAnalytics(campaign_id='camp-summer', platform=PlatformNameEnum.FACEBOOK, date=date(2024, 1, 1),
                          impressions=1000, clicks=50, conversions=5, cost=25),
        CampaignAnalytics(campaign_id='camp-summer', platform=PlatformNameEnum.INSTAGRAM, date=date(2024, 1, 1),
                          impressions=400, clicks=10, conversions=1, cost=8),
        CampaignAnalytics(campaign_id='camp-summer', platform=PlatformNameEnum.FACEBOOK, date=date(2024, 1, 2),
                          impressions=2000, clicks=80, conversions=4, cost=40),
        CampaignAnalytics(campaign_id='camp-winter', platform=PlatformNameEnum.FACEBOOK, date=date(2024, 1, 2),
                          impressions=300, clicks=3, conversions=0, cost=6),
        # Outside the usual 2024-01-01..2024-01-07 query window.
        CampaignAnalytics(campaign_id='camp-winter', platform=PlatformNameEnum.FACEBOOK, date=date(2024, 2, 1),
                          impressions=999, clicks=9, conversions=9, cost=9),
        CampaignAnalytics(campaign_id='camp-foreign', platform=PlatformNameEnum.FACEBOOK, date=date(2024, 1, 1),
                          impressions=7777, clicks=77, conversions=7, cost=70),
    ])
    db.session.add(AdPlatformIntegration(user_id=user.id, platform_name=PlatformNameEnum.FACEBOOK,
                                         ad_account_id='act_123', ad_account_name='Main account',
                                         status=IntegrationStatusEnum.ACTIVE))
    db.session.commit()
    return {'summer': summer.id, 'winter': winter.id, 'foreign': foreign.id}
