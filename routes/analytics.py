from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user

from analytics.cache import ResultCache
from analytics.engine import AnalyticsEngine
from analytics.errors import StorageError, ValidationError
from analytics.storage import SQLAlchemyAnalyticsStore
from extensions import db
from utils.decorators import admin_required
from utils.helpers import parse_analytics_query

# Blueprint for the analytics dashboard API: the aggregated analytics query
# and administration of the analytics result cache.
analytics_bp = Blueprint('analytics', __name__, url_prefix='/analytics')

def get_analytics_store():
    """Storage collaborator bound to the request's Flask-SQLAlchemy session."""
    return SQLAlchemyAnalyticsStore(db.session)

def get_analytics_engine(store=None):
    """
    Builds an AnalyticsEngine for the current request.
    The session it uses is owned by Flask-SQLAlchemy and removed at teardown.
    """
    store = store or get_analytics_store()
    cache = ResultCache(store, ttl_minutes=current_app.config['ANALYTICS_CACHE_TTL_MINUTES'])
    return AnalyticsEngine(store, cache=cache, avg_order_value=current_app.config['ANALYTICS_AVG_ORDER_VALUE'])

@analytics_bp.errorhandler(ValidationError)
def handle_validation_error(error):
    current_app.logger.warning(f"Bad request to {request.path}: {error} (Params: {request.args.to_dict()})")
    return jsonify({"success": False, "message": str(error)}), 400

@analytics_bp.errorhandler(StorageError)
def handle_storage_error(error):
    current_app.logger.error(f"Storage failure on {request.path}: {error}", exc_info=True)
    return jsonify({"success": False, "message": "Failed to fetch analytics data"}), 500

# API endpoint returning the full analytics payload for the dashboard.
@analytics_bp.route('/api/data')
@login_required # Ensures only logged-in users can access this endpoint.
def get_analytics():
    """
    Aggregated analytics for the current user's campaigns.

    Query Parameters:
        startDate, endDate (str, required): Inclusive range, YYYY-MM-DD.
        platforms (str, optional): Comma-separated FACEBOOK/INSTAGRAM. Empty means all.
        campaigns (str, optional): Comma-separated campaign ids. Empty means all.
        metrics (str, optional): Comma-separated metric names echoed back for charts/exports.
        groupBy (str, optional): 'day' (default), 'week' or 'month'.
    Returns:
        JSON: {"success": true, "data": {...}, "cached": bool}. The data object holds
              analytics, summary, trends, topPerformers, campaigns, platforms,
              dateRange, groupBy, metrics and totalRecords.
    """
    query = parse_analytics_query(request.args, current_user.id)
    data, cached = get_analytics_engine().run(query)
    return jsonify({"success": True, "data": data, "cached": cached})

@analytics_bp.route('/api/cache')
@login_required
@admin_required
def get_cache_stats():
    """Cache table statistics: total, expired and active entries, oldest/newest entry."""
    stats = get_analytics_engine().cache.stats()
    return jsonify({"success": True, "data": stats})

@analytics_bp.route('/api/cache', methods=['DELETE'])
@login_required
def clear_cache():
    """
    Clears analytics cache entries.

    Query Parameters:
        action (str, optional): 'user' (default) clears the caller's entries,
                                'expired' purges expired entries for everyone,
                                'all' clears every entry (ADMIN only).
    """
    action = request.args.get('action', 'user')
    store = get_analytics_store()

    if action == 'user':
        removed = store.cache_clear_user(current_user.id)
        current_app.logger.info(f"Cleared {removed} analytics cache entries for user {current_user.id}.")
        return jsonify({"success": True, "message": "User cache cleared successfully", "removed": removed})

    if action == 'expired':
        removed = get_analytics_engine(store).cache.purge_expired()
        return jsonify({"success": True, "message": f"Cleared {removed} expired cache entries", "removed": removed})

    if action == 'all':
        if not current_user.is_admin:
            current_app.logger.warning(f"Forbidden request to {request.path} by user {current_user.id}: admin access required.")
            return jsonify({"success": False, "message": "Admin access required"}), 403
        removed = store.cache_clear_all()
        current_app.logger.info(f"Cleared all {removed} analytics cache entries (requested by user {current_user.id}).")
        return jsonify({"success": True, "message": "All cache cleared successfully", "removed": removed})

    current_app.logger.warning(f"Bad request to {request.path}: invalid cache action '{action}'.")
    return jsonify({"success": False, "message": "Invalid action. Use: user, expired, or all"}), 400
