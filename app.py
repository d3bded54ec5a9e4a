import logging
import sys

import click
from flask import Blueprint, Flask, current_app, jsonify, request

from config import load_config
from ledger import Blockchain, hash_file
from models import CreateBlockRequest, MalformedRequest, ValidationRequest

logger = logging.getLogger(__name__)

api = Blueprint("api", __name__)


def create_app(config=None, blockchain=None):
    if config is None:
        config = load_config()

    app = Flask(__name__)
    app.config["DEBUG"] = config.debug
    app.config["CHAIN_CONFIG"] = config

    # Pretty-printed, in field order
    app.json.sort_keys = False
    app.json.compact = False

    # Genesis exists before the first request is served
    if blockchain is None:
        blockchain = Blockchain()
    app.extensions["ledger"] = blockchain
    app.register_blueprint(api)

    @app.cli.command("hash-file")
    @click.argument("path", type=click.Path(exists=True, dir_okay=False))
    def hash_file_command(path):
        """Print the FileHash (SHA-256) of PATH."""
        click.echo(hash_file(path))

    @app.cli.command("verify-chain")
    def verify_chain_command():
        """Re-check every block's linkage and digest."""
        chain_length = len(blockchain)
        if not blockchain.verify():
            raise click.ClickException(f"Chain of {chain_length} blocks failed verification")
        click.echo(f"Chain of {chain_length} blocks verified")

    return app


def get_ledger():
    return current_app.extensions["ledger"]


def bad_request(error):
    # Echo what the caller sent alongside the reason
    return jsonify({"error": error, "body": request.get_data(as_text=True)}), 400


def read_json():
    return request.get_json(force=True, silent=True)


@api.route('/', methods=['GET'])
def get_blockchain():
    return jsonify([block.to_dict() for block in get_ledger().snapshot()])


@api.route('/block/<block_hash>', methods=['GET'])
def get_block(block_hash):
    block = get_ledger().get(block_hash)
    # unknown digest is not an error
    return jsonify(block.to_dict() if block else None)


@api.route('/block', methods=['POST'])
def write_block():
    try:
        message = CreateBlockRequest.from_json(read_json())
    except MalformedRequest as e:
        return bad_request(str(e))

    block, ok = get_ledger().append(
        event=message.event,
        event_time=message.event_time,
        file_hash=message.file_hash,
        location=message.location,
        server=message.server,
    )
    if block is None:
        return bad_request("Event must not be empty")
    if not ok:
        return jsonify(block.to_dict()), 500

    return jsonify(block.to_dict()), 201


@api.route('/validation', methods=['POST'])
def validation():
    try:
        message = ValidationRequest.from_json(read_json())
    except MalformedRequest as e:
        return bad_request(str(e))

    valid = get_ledger().validate_event(message.hash, message.create_message.event)
    status = 201 if valid else 400
    return jsonify({"ValidationMessage": message.to_dict(), "Result": valid}), status


def main():
    try:
        config = load_config()
    except ValueError as e:
        logging.basicConfig(level=logging.ERROR)
        logger.error("Invalid configuration: %s", e)
        sys.exit(1)

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app(config)

    logger.info("HTTP Server Listening on port :%s", config.port)
    try:
        app.run(host=config.host, port=config.port, debug=config.debug, threaded=True, use_reloader=False)
    except OSError as e:
        logger.error("HTTP server failed: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
