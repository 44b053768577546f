from typing import Any


def error_response(message: str, details: Any = None) -> dict:
    return {"message": message, "details": message if details is None else details}
