"""appwrite_cli -- command-line client for the Appwrite REST API.

Every command maps to a single REST endpoint: flags are collected into a
parameter tree, flattened into bracket-keyed form fields, sent through
:class:`~appwrite_cli.client.Client`, and the decoded response is printed
either as JSON or as a terminal table.

Typical workflow::

    appwrite client set --endpoint https://cloud.appwrite.io/v1 --project-id demo
    appwrite users list --queries "limit(5)"
    appwrite --json functions list-executions --function-id fn123

Modules:
    app: Typer application and CLI entry point.
    params: Request parameter flattening.
    values: Value kinds and big-integer aware JSON codec.
    render: JSON and table rendering of responses.
    output: stdout/stderr formatting system with Rich support.
    config: XDG-aware configuration resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    sdk: Client factories and the request-render-report helper commands use.
    commands: Built-in command groups.
"""

__version__ = "6.0.0"
