import pycouchdb

from hashblog.settings import settings


def get_couch():
    """
    Create a CouchDB database handle.
    Called at runtime to avoid import-time connections.
    """
    couch = pycouchdb.Server(settings.couchdb_url)
    try:
        return couch.database(settings.COUCHDB_DATABASE)
    except pycouchdb.exceptions.NotFound:
        return couch.create(settings.COUCHDB_DATABASE)
