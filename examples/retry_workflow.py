from tryto import tryto_sync

attempts = 0


def flaky_read() -> str:
    global attempts
    attempts += 1
    if attempts < 3:
        raise ConnectionError(f"attempt {attempts} dropped")
    return "payload"


result = tryto_sync(
    flaky_read,
    retry=True,
    retries=3,
    on_retry=lambda n: print(f"retry {n}"),
)
print(f"result: {result}")
