import sys

import typer

from agentproxy.config import REQUIRED_SETTINGS, missing_settings, settings
from agentproxy.domain.exceptions import ProxyError
from agentproxy.logging import logger, get_run_id, redact_endpoint

app = typer.Typer(no_args_is_help=True)

@app.callback()
def main():
    """
    Agent proxy CLI.
    """
    pass

@app.command(name="doctor")
def doctor():
    """
    Check configuration and credential health.
    """
    from agentproxy.infra.identity.token_provider import build_token_provider

    logger.info("Running doctor check...")

    failures: list[str] = []
    passed = 0

    print("\n🩺 Agent Proxy Doctor\n")

    # ── Check 1: Environment / Interpreter ──────────────────────────────────
    print("[Environment]")
    print(f"  Python: {sys.version.split()[0]}")
    print(f"  Run ID: {get_run_id()}")
    passed += 1

    # ── Check 2: Required settings ──────────────────────────────────────────
    print("\n[Configuration]")
    missing = missing_settings(settings)
    for name in REQUIRED_SETTINGS:
        if name in missing:
            print(f"  {name:<26}❌ Missing")
            failures.append(f"{name} is not set, add it to .env")
        else:
            print(f"  {name:<26}✅ Set")
            passed += 1

    safe = redact_endpoint(settings.FOUNDRY_PROJECT_ENDPOINT)
    print(f"  Endpoint host:            {safe['host']}")
    print(f"  Project:                  {safe['project']}")
    print(f"  API_VERSION:              {settings.API_VERSION}")
    print(f"  TIMEOUT_MS:               {settings.TIMEOUT_MS}")
    print(f"  CORS_ORIGIN:              {settings.CORS_ORIGIN}")

    # ── Check 3: Credential ──────────────────────────────────────────────────
    print("\n[Credential]")
    try:
        build_token_provider(settings).acquire_token()
        print(f"  Token ({settings.TOKEN_SCOPE}): ✅ Acquired")
        passed += 1
    except ProxyError as e:
        print(f"  Token ({settings.TOKEN_SCOPE}): ❌ {e.message}")
        failures.append(f"Token acquisition failed: {e.details or e.message}")

    # ── Summary ──────────────────────────────────────────────────────────────
    total = passed + len(failures)
    print(f"\n{'─' * 50}")
    if failures:
        print(f"Result: {passed}/{total} checks passed\n")
        for msg in failures:
            print(f"  ❌ {msg}")
        print()
        raise typer.Exit(code=1)
    else:
        print(f"Result: {passed}/{total} checks passed, all good ✅")
        print()


@app.command(name="ask")
def ask(
    prompt: str,
    thread_id: str | None = typer.Option(None, "--thread-id", help="Continue an existing thread"),
):
    """Send one prompt to the agent and print its reply."""
    from agentproxy.infra.http.client import AgentHttpClient
    from agentproxy.infra.identity.token_provider import build_token_provider
    from agentproxy.services.conversation_service import ConversationService

    with AgentHttpClient(timeout=settings.HTTP_TIMEOUT_S) as http:
        service = ConversationService(
            settings, http=http, token_provider=build_token_provider(settings),
        )
        try:
            result = service.handle_turn(prompt, thread_id)
        except ProxyError as e:
            logger.error(f"Turn failed: {e.message}")
            print(f"❌ [{e.status_code}] {e.message}")
            raise typer.Exit(code=1)

    print(result.output)
    print(f"\nthread: {result.thread_id}  run: {result.run_id}  status: {result.status}")

if __name__ == "__main__":
    app()
