import contextlib

import anyio
import httpx
from anyio import create_task_group
from pydantic import SecretStr

from thalamus_client import ThalamusClientAsync, ThalamusConfig, ThalamusError
from thalamus_client.utils.logger import configure_logging


async def main() -> None:
    """
    Demonstrates the Thalamus client against a local server.
    Includes:
    - Authorization URL construction (no network)
    - Client credentials grant
    - Concurrent introspection of several tokens with a TaskGroup
    """
    configure_logging()
    print(">>> Starting Thalamus token flows example")

    config = ThalamusConfig(
        client_id="example-client",
        client_secret=SecretStr("example-secret"),
        redirect_uri="http://localhost:3000/auth/callback",
        base_url="http://localhost:4000/",
        default_scopes=["openid", "profile"],
        http_timeout=5.0,
    )

    async with ThalamusClientAsync(config) as thalamus:
        print(f">>> Redirect the user to: {thalamus.auth.build_authorization_url()}")

        try:
            tokens = await thalamus.auth.get_client_credentials_token(scope=["api:read"])
        except (ThalamusError, httpx.HTTPError) as e:
            # Without a running server this fails
            print(f">>> Expected failure (no real server): {e}")
            return

        results: dict[str, bool] = {}

        async def check(name: str, token: str) -> None:
            results[name] = await thalamus.tokens.validate(token)

        async with create_task_group() as tg:
            tg.start_soon(check, "issued", tokens.access_token)
            tg.start_soon(check, "bogus", "not-a-token")

        print(f">>> Validity: {results}")


if __name__ == "__main__":
    with contextlib.suppress(KeyboardInterrupt):
        anyio.run(main)
