from flask import Flask
import logging
import os

from config import FLASK_PORT, RegistryConfig
from routes.registry import registry_bp
from services.event_registry_service import EventRegistryService
from services.web3_service import Web3Service
from utils.wallet import LocalAccountWallet

logger = logging.getLogger(__name__)


def create_registry_service(config=None):
    """Wire the registry service against the configured RPC endpoint and signing key"""
    config = config or RegistryConfig.from_env()
    web3_service = Web3Service(config)
    if not web3_service.is_connected():
        logger.warning(f"⚠️ RPC endpoint {config.rpc_url} is not answering; reads will retry per request")
    wallet = LocalAccountWallet(web3_service, private_key=os.environ.get('PRIVATE_KEY'))
    return EventRegistryService(web3_service, wallet, config)


def create_app(service=None):
    """Create the Flask app; pass a service to run against another ledger"""
    app = Flask(__name__)

    app.extensions['event_registry'] = service or create_registry_service()

    # Register blueprints
    app.register_blueprint(registry_bp)
    return app


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(name)s %(levelname)s %(message)s')
    app = create_app()
    app.run(debug=True, host='0.0.0.0', port=FLASK_PORT)
