"""统一错误响应格式：{"error": {"code": ..., "message": ...}}"""

from starlette.responses import JSONResponse


def error_response(status_code: int, code: str, message: str, **extra) -> JSONResponse:
    content: dict = {"error": {"code": code, "message": message}}
    content["error"].update(extra)
    return JSONResponse(status_code=status_code, content=content)


def not_found(entity: str, entity_id: str) -> JSONResponse:
    return error_response(
        404,
        f"{entity.upper()}_NOT_FOUND",
        f"{entity.capitalize()} with id {entity_id} does not exist",
    )
