import hmac
import logging

from flask import Response, request

log = logging.getLogger(__name__)


def credentials_match(username: str | None, password: str | None, expected_user: str | None, expected_pass: str | None) -> bool:
    if not expected_user or not expected_pass or username is None or password is None:
        return False
    user_ok = hmac.compare_digest(username.encode("utf-8"), expected_user.encode("utf-8"))
    pass_ok = hmac.compare_digest(password.encode("utf-8"), expected_pass.encode("utf-8"))
    return user_ok and pass_ok


def challenge(realm: str) -> Response:
    return Response(
        "Unauthorized",
        status=401,
        headers={"WWW-Authenticate": f'Basic realm="{realm}"'},
        mimetype="text/plain",
    )


def basic_auth_guard(user: str | None, password: str | None, realm: str):
    """Build a ``before_request`` hook that demands HTTP Basic credentials.

    Returns None when the request may proceed, otherwise a 401 challenge.
    """

    def guard() -> Response | None:
        auth = request.authorization
        if auth is not None and auth.type == "basic" and credentials_match(auth.username, auth.password, user, password):
            return None
        log.warning("Rejected admin request %s %s from %s", request.method, request.path, request.remote_addr)
        return challenge(realm)

    return guard
