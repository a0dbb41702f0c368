"""
Web interface for the Simple Vault client
"""

from flask import Flask, jsonify, request

from vault_client import VaultClient
from vault_client.logger import get_logger

logger = get_logger(__name__)


def snapshot_json(client: VaultClient) -> dict:
    snapshot = client.snapshot
    return {
        'account': client.account,
        # wei amounts exceed JSON-safe integers, send them as strings
        'balance_wei': str(snapshot.balance) if snapshot.balance is not None else None,
        'balance': snapshot.balance_display(client.config.decimals),
        'lock_period_seconds': snapshot.lock_period_seconds,
        'last_deposit_timestamp': snapshot.last_deposit_timestamp,
        'unlock_time': snapshot.unlock_time,
        'status_message': client.status_message,
    }


def history_json(client: VaultClient) -> dict:
    return {
        'entries': [entry.to_dict() for entry in client.history],
        'error': client.history_error,
        'loading': client.is_loading_history,
    }


def create_app(client: VaultClient) -> Flask:
    """Build the Flask app around an already configured vault client"""
    app = Flask(__name__)
    app.config['VAULT_CLIENT'] = client

    def not_connected():
        return jsonify({'success': False, 'error': 'No account connected'}), 409

    def amount_from_body():
        data = request.get_json(silent=True) or {}
        amount = data.get('amount', '')
        return amount if isinstance(amount, str) else str(amount)

    @app.route('/api/account', methods=['POST'])
    async def connect_account():
        """Connect an account and load its vault state and history"""
        data = request.get_json(silent=True) or {}
        try:
            await client.connect(data.get('account', ''))
        except ValueError as e:
            return jsonify({'success': False, 'error': str(e)}), 400

        return jsonify({'success': True, 'vault': snapshot_json(client), 'history': history_json(client)})

    @app.route('/api/account', methods=['DELETE'])
    def disconnect_account():
        client.disconnect()
        return jsonify({'success': True})

    @app.route('/api/vault')
    def get_vault():
        """Current vault snapshot"""
        if not client.is_connected:
            return not_connected()
        return jsonify(snapshot_json(client))

    @app.route('/api/vault/refresh', methods=['POST'])
    async def refresh_vault():
        if not client.is_connected:
            return not_connected()
        await client.refresh()
        return jsonify(snapshot_json(client))

    @app.route('/api/vault/deposit', methods=['POST'])
    async def deposit():
        """Deposit into the vault"""
        if not client.is_connected:
            return not_connected()

        outcome = await client.deposit(amount_from_body())
        body = outcome.to_dict()
        body['vault'] = snapshot_json(client)
        return jsonify(body), 200 if outcome.ok else 400

    @app.route('/api/vault/withdraw', methods=['POST'])
    async def withdraw():
        """Withdraw from the vault once the lock period is over"""
        if not client.is_connected:
            return not_connected()

        outcome = await client.withdraw(amount_from_body())
        body = outcome.to_dict()
        body['vault'] = snapshot_json(client)
        return jsonify(body), 200 if outcome.ok else 400

    @app.route('/api/history')
    def get_history():
        if not client.is_connected:
            return not_connected()
        return jsonify(history_json(client))

    @app.route('/api/history/refresh', methods=['POST'])
    async def refresh_history():
        """Rescan the event logs and rebuild the history"""
        if not client.is_connected:
            return not_connected()

        await client.refresh_history()
        if client.history_error:
            logger.warning("history_refresh_failed", error=client.history_error)
            return jsonify(history_json(client)), 502
        return jsonify(history_json(client))

    return app
