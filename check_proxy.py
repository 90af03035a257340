"""Manual smoke check against a running proxy."""

import json
import os
import sys

import httpx
from rich.console import Console

from core.config import load_config
from core.exceptions import ConfigurationError

console = Console()

GENERATE_BODY = {"model": "llama2", "prompt": "Hello, how are you?", "stream": False}


def _show(response: httpx.Response) -> str:
    try:
        return json.dumps(response.json())
    except ValueError:
        return response.text


def check_health(client: httpx.Client) -> bool:
    console.print("\n[bold]Testing health check endpoint...[/bold]")
    return _run(client, "GET", "/health", "Response")


def check_list_models(client: httpx.Client) -> bool:
    console.print("\n[bold]Testing Ollama list models endpoint...[/bold]")
    return _run(client, "GET", "/api/tags", "Models available")


def check_generate(client: httpx.Client) -> bool:
    console.print("\n[bold]Testing Ollama generate endpoint...[/bold]")
    console.print(f"Sending request to: {client.base_url.join('/api/generate')}")
    return _run(client, "POST", "/api/generate", "Response data", json=GENERATE_BODY)


def _run(client: httpx.Client, method: str, path: str, label: str, **kwargs) -> bool:
    try:
        response = client.request(method, path, **kwargs)
    except httpx.HTTPError as e:
        console.print(f"[red]FAILED[/red] {method} {path}: {e}")
        return False

    ok = response.is_success
    mark = "[green]OK[/green]" if ok else "[red]FAILED[/red]"
    console.print(f"{mark} {method} {path}")
    console.print(f"  Status: {response.status_code}")
    console.print(f"  {label}: {_show(response)}", markup=False)
    return ok


def main() -> None:
    try:
        config = load_config()
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        sys.exit(1)

    base_url = os.environ.get("PROXY_URL", f"http://localhost:{config.proxy.port}")
    console.print(f"[bold cyan]Testing Ollama proxy at {base_url}[/bold cyan]")

    headers = {"Authorization": f"Bearer {config.auth.api_key}"}
    with httpx.Client(base_url=base_url, headers=headers, timeout=config.limits.upstream_timeout) as client:
        results = {
            "Health Check": check_health(client),
            "List Models": check_list_models(client),
            "Generate": check_generate(client),
        }

    console.print("\n[bold]Summary:[/bold]")
    for name, passed in results.items():
        console.print(f"{name}: {'[green]Passed[/green]' if passed else '[red]Failed[/red]'}")

    if all(results.values()):
        console.print("\nAll checks passed, the proxy is working.")
    else:
        console.print("\n[yellow]Some checks failed, see output above.[/yellow]")
        sys.exit(1)


if __name__ == "__main__":
    main()
