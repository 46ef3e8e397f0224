"""apiq -- a small command-line client for REST and GraphQL APIs.

Each invocation sends exactly one HTTP request. Connection defaults (base
URL, bearer token, and any extra keys) live in named *profiles* persisted in
a YAML config file; command-line flags override them per invocation.

Typical workflow::

    apiq config set dev base_url=https://api.example.com token=abc123
    apiq config use dev
    apiq GET /users --show-headers
    apiq gql --file query.graphql

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for config, options, requests and responses.
    config: XDG-aware config paths and the profile store.
    resolver: Merges flags, profile fields and defaults into one request.
    body: Resolves ``--data`` body specs and GraphQL payloads.
    client: The request dispatcher and response renderer.
    output: stdout/stderr formatting system with Rich support.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric process exit codes.
"""

__version__ = "0.3.0"
