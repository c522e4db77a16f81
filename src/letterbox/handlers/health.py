"""Liveness check for load balancers and uptime monitors."""

from letterbox.http.response import Response


def health_check() -> Response:
    """Answer 200 with an empty body.

    Takes no input and touches no dependency: a 200 here only means the
    process is accepting and answering HTTP requests.
    """
    return Response()
