from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import ScheduledReport, ReportFrequencyEnum, ReportFormatEnum
from utils.helpers import calculate_next_run, REPORT_FREQUENCIES

# Blueprint for scheduled analytics reports (recurring CSV/PDF e-mails).
# Every route is scoped to the logged-in user's own schedules.
reports_bp = Blueprint('reports', __name__, url_prefix='/analytics/api/schedules')

REPORT_FORMATS = tuple(f.value for f in ReportFormatEnum)

# JSON body keys that PUT may change, mapped to model attributes.
UPDATABLE_FIELDS = {
    'name': 'name',
    'frequency': 'frequency',
    'format': 'format',
    'timezone': 'timezone',
    'recipients': 'recipients',
    'filters': 'filters',
    'includeCharts': 'include_charts',
    'isActive': 'is_active',
}

def _bad_request(message):
    current_app.logger.warning(f"Bad request to {request.path}: {message}")
    return jsonify({"success": False, "message": message}), 400

def _validate_fields(data):
    """
    Validates the value of every known field present in `data`.
    Returns an error message, or None if all present fields are acceptable.
    """
    if 'frequency' in data and data['frequency'] not in REPORT_FREQUENCIES:
        return "Frequency must be daily, weekly, or monthly"
    if 'format' in data and data['format'] not in REPORT_FORMATS:
        return "Format must be csv or pdf"
    if 'recipients' in data:
        recipients = data['recipients']
        if not isinstance(recipients, list) or not recipients:
            return "Recipients must be a non-empty list of email addresses"
        if not all(isinstance(r, str) and '@' in r for r in recipients):
            return "All recipients must be valid email addresses"
    if 'filters' in data and not isinstance(data['filters'], dict):
        return "Filters must be an object"
    if 'name' in data and not (isinstance(data['name'], str) and data['name'].strip()):
        return "Name must be a non-empty string"
    return None

def _get_owned_report(schedule_id):
    return ScheduledReport.query.filter_by(id=schedule_id, user_id=current_user.id).first()

@reports_bp.route('', methods=['POST'])
@login_required
def create_schedule():
    """
    Creates a scheduled report.

    JSON body:
        name (str), frequency ('daily'|'weekly'|'monthly'), recipients (list of emails),
        format ('csv'|'pdf') are required; includeCharts (bool, default False),
        filters (object of analytics query parameters, default {}) and
        timezone (str, default 'UTC') are optional.
    """
    data = request.get_json(silent=True)
    if not data:
        return _bad_request("Missing JSON payload.")

    if not data.get('name') or not data.get('frequency') or not data.get('recipients') or not data.get('format'):
        return _bad_request("Name, frequency, recipients, and format are required")

    error = _validate_fields(data)
    if error:
        return _bad_request(error)

    report = ScheduledReport(
        user_id=current_user.id,
        name=data['name'].strip(),
        frequency=ReportFrequencyEnum(data['frequency']),
        recipients=data['recipients'],
        format=ReportFormatEnum(data['format']),
        include_charts=bool(data.get('includeCharts', False)),
        filters=data.get('filters') or {},
        timezone=data.get('timezone') or 'UTC',
        next_run=calculate_next_run(data['frequency']),
    )
    try:
        db.session.add(report)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error scheduling report for user {current_user.id}: {e}", exc_info=True)
        return jsonify({"success": False, "message": "Failed to schedule report"}), 500

    current_app.logger.info(f"User {current_user.id} scheduled {report.frequency.value} report {report.id}.")
    return jsonify({
        "success": True,
        "message": "Report scheduled successfully",
        "data": {"scheduleId": report.id, "nextRunTime": report.next_run.isoformat()},
    }), 201

@reports_bp.route('', methods=['GET'])
@login_required
def list_schedules():
    """Lists the user's scheduled reports, newest first."""
    reports = ScheduledReport.query.filter_by(user_id=current_user.id).order_by(
        ScheduledReport.created_at.desc()
    ).all()
    return jsonify({"success": True, "data": [report.to_dict() for report in reports]})

@reports_bp.route('', methods=['PUT'])
@login_required
def update_schedule():
    """
    Updates a scheduled report.

    JSON body: scheduleId (required) plus any of name, frequency, format, timezone,
    recipients, filters, includeCharts, isActive. Changing the frequency
    recomputes the next run time.
    """
    data = request.get_json(silent=True) or {}
    schedule_id = data.get('scheduleId')
    if not schedule_id:
        return _bad_request("Schedule ID is required")

    report = _get_owned_report(schedule_id)
    if report is None:
        return jsonify({"success": False, "message": "Scheduled report not found"}), 404

    updates = {key: value for key, value in data.items() if key in UPDATABLE_FIELDS}
    if not updates:
        return _bad_request("No valid fields to update")

    error = _validate_fields(updates)
    if error:
        return _bad_request(error)

    for key, value in updates.items():
        if key == 'frequency':
            value = ReportFrequencyEnum(value)
        elif key == 'format':
            value = ReportFormatEnum(value)
        setattr(report, UPDATABLE_FIELDS[key], value)

    if 'frequency' in updates:
        report.next_run = calculate_next_run(updates['frequency'])

    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error updating scheduled report {schedule_id}: {e}", exc_info=True)
        return jsonify({"success": False, "message": "Failed to update scheduled report"}), 500

    return jsonify({"success": True, "message": "Scheduled report updated successfully", "data": report.to_dict()})

@reports_bp.route('', methods=['DELETE'])
@login_required
def delete_schedule():
    """Deletes the scheduled report given by the `id` query parameter."""
    schedule_id = request.args.get('id')
    if not schedule_id:
        return _bad_request("Schedule ID is required")

    report = _get_owned_report(schedule_id)
    if report is None:
        return jsonify({"success": False, "message": "Scheduled report not found"}), 404

    try:
        db.session.delete(report)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error deleting scheduled report {schedule_id}: {e}", exc_info=True)
        return jsonify({"success": False, "message": "Failed to delete scheduled report"}), 500

    current_app.logger.info(f"User {current_user.id} deleted scheduled report {schedule_id}.")
    return jsonify({"success": True, "message": "Scheduled report deleted successfully"})
