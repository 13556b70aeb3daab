from starlette.responses import PlainTextResponse, Response
from .header_rewrite import ALLOW_METHODS_VALUE, CORS_HEADERS

NOT_FOUND_BODY = "Not Found - Only /api/* and /sdk/* routes are supported"
METHOD_NOT_ALLOWED_BODY = "Method Not Allowed"


def preflight_response() -> Response:
    return Response(
        status_code=200,
        headers={**CORS_HEADERS, "Content-Length": "0"},
    )


def not_found_response() -> Response:
    # explicit Content-Type so no charset parameter is appended
    return PlainTextResponse(
        NOT_FOUND_BODY,
        status_code=404,
        headers={
            "Content-Type": "text/plain",
            "Access-Control-Allow-Origin": "*",
        },
    )


def method_not_allowed_response() -> Response:
    return PlainTextResponse(
        METHOD_NOT_ALLOWED_BODY,
        status_code=405,
        headers={
            "Content-Type": "text/plain",
            "Allow": ALLOW_METHODS_VALUE,
            "Access-Control-Allow-Origin": "*",
        },
    )
