from flask import Blueprint, current_app, jsonify, request
import math

from web3 import Web3

from models.event import EventRecord
from services.errors import EventNotFoundError, InvalidEventError, RegistryError
from services.status_reporter import StatusCategory

registry_bp = Blueprint('registry', __name__, url_prefix='/api')

# HTTP status per status category
CATEGORY_HTTP_STATUS = {
    StatusCategory.CONFIRMED: 200,
    StatusCategory.PENDING: 202,
    StatusCategory.TIMEOUT: 202,
    StatusCategory.DENIED: 403,
    StatusCategory.ALREADY_DONE: 409,
    StatusCategory.FAILED: 400,
}


def get_registry_service():
    """The EventRegistryService attached by create_app"""
    return current_app.extensions['event_registry']


def parse_timeout(data):
    """Confirmation timeout override from a request body; None when absent"""
    value = data.get('timeout')
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("timeout must be a number of seconds")
    timeout = float(value)
    if not math.isfinite(timeout) or timeout <= 0:
        raise ValueError("timeout must be a positive number of seconds")
    return timeout


def attempt_response(service, attempt):
    report = service.report(attempt)
    http_status = CATEGORY_HTTP_STATUS.get(report.category, 200)
    if report.category is StatusCategory.FAILED and attempt.tx_hash:
        # Failed after submission (revert)
        http_status = 502
    return jsonify({
        'success': report.category is StatusCategory.CONFIRMED,
        'status': report.to_dict(),
        'attempt': attempt.to_dict(),
    }), http_status


@registry_bp.route('/contract/verify')
def verify_contract():
    """Run the contract diagnostics"""
    service = get_registry_service()
    probe_event_code = request.args.get('event_code')
    results = service.diagnose(probe_event_code)
    success = all(check['ok'] for check in results.values())
    return jsonify({'success': success, 'results': results})


@registry_bp.route('/events/<event_code>')
def event_details(event_code):
    """Event data, minting fee and mint counters"""
    service = get_registry_service()
    account = request.args.get('account')
    if account and not Web3.is_address(account):
        return jsonify({'success': False, 'error': 'Invalid account address'}), 400

    try:
        details = service.get_event_details(event_code, account)
    except EventNotFoundError as e:
        return jsonify({'success': False, 'error': e.message}), 404
    except RegistryError as e:
        return jsonify({'success': False, 'error': str(e)}), 502

    return jsonify({'success': True, **details})


@registry_bp.route('/events', methods=['POST'])
def create_event():
    """Register a new event"""
    service = get_registry_service()
    data = request.get_json(silent=True)
    if not data:
        return jsonify({'success': False, 'error': 'No data provided'}), 400

    try:
        event = EventRecord.from_dict(data)
        timeout = parse_timeout(data)
    except InvalidEventError as e:
        return jsonify({'success': False, 'error': e.message}), 400
    except (TypeError, ValueError) as e:
        return jsonify({'success': False, 'error': f"Invalid timeout: {e}"}), 400

    attempt = service.create_event(event, timeout=timeout)
    return attempt_response(service, attempt)


@registry_bp.route('/events/<event_code>/mint', methods=['POST'])
def mint(event_code):
    """Mint the attendance NFT for the connected account"""
    service = get_registry_service()
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return jsonify({'success': False, 'error': 'Request body must be a JSON object'}), 400

    content_hash = data.get('content_hash')
    if content_hash is not None and not isinstance(content_hash, str):
        return jsonify({'success': False, 'error': 'content_hash must be a string'}), 400
    try:
        timeout = parse_timeout(data)
    except (TypeError, ValueError) as e:
        return jsonify({'success': False, 'error': f"Invalid timeout: {e}"}), 400

    attempt = service.mint(event_code, content_hash=content_hash, timeout=timeout)
    return attempt_response(service, attempt)
