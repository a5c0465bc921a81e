from datetime import datetime, timedelta

from models import AnalyticsCache

def test_purge_analytics_cache_command(app, db, user):
    now = datetime.utcnow()
    db.session.add_all([
        AnalyticsCache(cache_key='stale', user_id=user.id, data={}, expires_at=now - timedelta(hours=1)),
        AnalyticsCache(cache_key='fresh', user_id=user.id, data={}, expires_at=now + timedelta(hours=1)),
    ])
    db.session.commit()

    result = app.test_cli_runner().invoke(args=['purge-analytics-cache'])

    assert result.exit_code == 0
    assert "Purged 1 expired analytics cache entries." in result.output
    assert [row.cache_key for row in AnalyticsCache.query.all()] == ['fresh']
