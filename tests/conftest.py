import itertools

import pytest

from app import create_app
from config import Config
from ledger import Blockchain


@pytest.fixture
def clock():
    counter = itertools.count()
    return lambda: f"2018-04-23T18:25:{next(counter):02d}Z"


@pytest.fixture
def blockchain(clock):
    return Blockchain(clock=clock)


@pytest.fixture
def app(blockchain):
    app = create_app(Config(), blockchain=blockchain)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
