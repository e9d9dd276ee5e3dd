import asyncio

from tryto import Options, tryto

calls = 0


async def lookup() -> str:
    global calls
    calls += 1
    if calls == 1:
        await asyncio.sleep(1.0)
    return "answer"


async def main() -> None:
    options = Options(
        retry=True,
        retries=1,
        retry_delay=0.01,
        timeout=True,
        timeout_after=0.05,
        on_timeout=lambda: print("timed out"),
    )
    result = await tryto(lookup, options)
    print(f"result: {result}")


if __name__ == "__main__":
    asyncio.run(main())
