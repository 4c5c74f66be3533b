import logging

from flask import current_app
from pymongo import MongoClient

from tripsplit.ledger import LedgerStore, MongoLedgerStore

logger = logging.getLogger(__name__)


def init_mongo(app):
    client = MongoClient(app.config["MONGO_URI"])

    # get_default_database() extracts DB name from URI (e.g., /tripsplit?)
    # If the URI carries none, use the configured name
    db = client.get_default_database(default=app.config["MONGO_DB_NAME"])

    logger.info("[MongoDB] Connected to database: %s", db.name)
    return db

def init_store(app, store: LedgerStore = None):
    """Attach the ledger store used by every route; Mongo unless one is given."""
    if store is None:
        store = MongoLedgerStore(init_mongo(app))
    app.extensions["ledger_store"] = store
    return store

def get_store() -> LedgerStore:
    """Ledger store of the current application."""
    store = current_app.extensions.get("ledger_store")
    if store is None:
        raise RuntimeError("Ledger store not initialized. Call init_store first.")
    return store
