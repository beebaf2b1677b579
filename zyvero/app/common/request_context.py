import uuid
from flask import g, request, session

REQUEST_ID_HEADER = "X-Request-ID"
CLIENT_ID_KEY = "client_id"


def init_request_id() -> str:
    rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    g.request_id = rid
    return rid


def client_id() -> str:
    """Stable id for the calling browser, kept in its session cookie."""
    cid = session.get(CLIENT_ID_KEY)
    if not cid:
        cid = uuid.uuid4().hex
        session[CLIENT_ID_KEY] = cid
    return cid
