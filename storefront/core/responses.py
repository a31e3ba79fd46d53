from typing import Any


def envelope(message: str, data: Any = None) -> dict[str, Any]:
    """Build the ``{message, data}`` success body.

    ``data`` may hold ORM objects; the route's ``response_model`` serializes them.
    """
    return {"message": message, "data": data if data is not None else {}}
