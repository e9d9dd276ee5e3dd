from tryto import tryto_sync


def primary() -> dict:
    raise TimeoutError("primary store unavailable")


def replica() -> dict:
    raise ConnectionError("replica unavailable")


def cache() -> dict:
    return {"source": "cache"}


result = tryto_sync(
    primary,
    fallback=[replica, cache],
    on_error=lambda err: print(f"error: {err}"),
    on_success=lambda value: print(f"served from {value['source']}"),
)
print(f"result: {result}")
