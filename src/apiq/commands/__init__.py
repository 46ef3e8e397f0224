"""Built-in CLI sub-commands for apiq.

This package groups the Typer command modules that form the CLI's
top-level command tree:

* :mod:`~apiq.commands.request` -- send one REST request (the default
  command when the first argument is an HTTP method).
* :mod:`~apiq.commands.gql` -- send a GraphQL query file as ``POST /graphql``.
* :mod:`~apiq.commands.config` -- manage saved profiles.

:mod:`~apiq.commands.common` holds the store/dispatcher factories and the
error-to-exit-code bridge shared by all of them.
"""
