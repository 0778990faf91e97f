"""
signed_ops.cli.main
===================

`signed-ops`: compute and check signed-operation digests from the shell.

Examples
--------
    $ signed-ops --chain-id 1 --proxy 0x2a84...6e55 domain-hash
    $ signed-ops --proxy 0x2a84...6e55 hash operation.json
    $ signed-ops --proxy 0x2a84...6e55 cancel-hash 0xd287...9d39
    $ signed-ops --proxy 0x2a84...6e55 typed-data operation.json
    $ signed-ops --proxy 0x2a84...6e55 verify signed_operation.json
    $ signed-ops --proxy 0x2a84...6e55 --rpc http://127.0.0.1:8545 sign operation.json --method eth_signTypedData_v3
    $ cat operation.json | signed-ops --proxy 0x2a84...6e55 hash -

Operation files use the camelCase JSON of `Operation.to_dict()`; signed files
add a `typedSignature` field.

Configuration
-------------
- Chain ID       : `--chain-id` or env `SIGNED_OPS_CHAIN_ID` (default: 1)
- Proxy address  : `--proxy` or env `SIGNED_OPS_PROXY_ADDRESS`
- Signer RPC URL : `--rpc` or env `SIGNED_OPS_RPC_URL`
- Log level      : `--log-level` or env `SIGNED_OPS_LOG_LEVEL`
"""

from __future__ import annotations

import asyncio
import json
import re
import sys
from typing import Any, Dict, Optional

import typer

from .. import logging as slog
from ..config import ProxyConfig
from ..errors import SignedOpsError, SignerRejected
from ..operations import ETH_SIGN, SignedOperations
from ..signature import ec_recover_typed_signature
from ..types.operation import Operation, SignedOperation
from ..version import version as package_version
from ..wallet import JsonRpcSigner, TypedDataMethod

app = typer.Typer(
    name="signed-ops",
    help="Hash, sign-check and recover signed operations for the SignedOperationProxy verifier.",
    no_args_is_help=True,
    add_completion=False,
)

__all__ = ["app", "main", "run"]

_DIGEST_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")


def _print_json(obj: Any) -> None:
    typer.echo(json.dumps(obj, indent=2, ensure_ascii=False))


def _fail(message: str, code: int = 2) -> typer.Exit:
    typer.echo(f"error: {message}", err=True)
    return typer.Exit(code=code)


def _load_json(path: str) -> Dict[str, Any]:
    try:
        if path == "-":
            return json.load(sys.stdin)
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise _fail(f"cannot read {path}: {e.strerror}")
    except json.JSONDecodeError as e:
        raise _fail(f"{path} is not valid JSON: {e}")


def _load_operation(path: str) -> Operation:
    try:
        return Operation.from_dict(_load_json(path))
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise _fail(f"invalid operation in {path}: {e}")


def _ops(ctx: typer.Context) -> SignedOperations:
    return ctx.obj


@app.callback()
def _root(
    ctx: typer.Context,
    chain_id: Optional[str] = typer.Option(
        None, "--chain-id", help="Chain ID (decimal or 0x-hex).", envvar="SIGNED_OPS_CHAIN_ID"
    ),
    proxy: Optional[str] = typer.Option(
        None, "--proxy", help="Verifying contract address.", envvar="SIGNED_OPS_PROXY_ADDRESS"
    ),
    rpc: Optional[str] = typer.Option(
        None, "--rpc", help="Signer HTTP JSON-RPC URL.", envvar="SIGNED_OPS_RPC_URL"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="DEBUG, INFO, WARNING, ...", envvar="SIGNED_OPS_LOG_LEVEL"
    ),
) -> None:
    """Resolve the proxy configuration shared by all commands."""
    if log_level:
        slog.configure(level=log_level, stream=sys.stderr)
    try:
        config = ProxyConfig.from_env().with_overrides(
            chain_id=chain_id, verifying_contract=proxy, rpc_url=rpc
        )
    except (SignedOpsError, ValueError) as e:
        raise _fail(str(e))
    ctx.obj = SignedOperations(config)


@app.command("version")
def version() -> None:
    """Print the CLI version."""
    typer.echo(f"signed-ops {package_version()}")


@app.command("domain-hash")
def domain_hash(ctx: typer.Context) -> None:
    """Print the domain digest for the configured chain and proxy."""
    typer.echo(_ops(ctx).get_domain_hash())


@app.command("hash")
def hash_(
    ctx: typer.Context,
    operation: str = typer.Argument(..., help="Operation JSON file, or - for stdin."),
) -> None:
    """Print the operation digest."""
    typer.echo(_ops(ctx).get_operation_hash(_load_operation(operation)))


@app.command("cancel-hash")
def cancel_hash(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Operation JSON file, - for stdin, or a 0x digest."),
) -> None:
    """Print the cancel digest of an operation or of an operation digest."""
    target: Any = source if _DIGEST_RE.match(source) else _load_operation(source)
    typer.echo(_ops(ctx).get_cancel_hash(target))


@app.command("typed-data")
def typed_data(
    ctx: typer.Context,
    operation: str = typer.Argument(..., help="Operation JSON file, or - for stdin."),
) -> None:
    """Print the typed-data payload an external signer would be asked to sign."""
    _print_json(_ops(ctx).build_typed_data(_load_operation(operation)))


@app.command("verify")
def verify(
    ctx: typer.Context,
    signed_operation: str = typer.Argument(..., help="Signed operation JSON (with typedSignature)."),
) -> None:
    """Exit 0 if the typed signature was produced by the operation's signer, 1 otherwise."""
    data = _load_json(signed_operation)
    try:
        signed = SignedOperation.from_dict(data)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise _fail(f"invalid signed operation: {e}")
    try:
        valid = _ops(ctx).operation_has_valid_signature(signed)
    except SignedOpsError as e:
        raise _fail(str(e))
    typer.echo("valid" if valid else "invalid")
    if not valid:
        raise typer.Exit(code=1)


@app.command("verify-cancel")
def verify_cancel(
    ctx: typer.Context,
    operation: str = typer.Argument(..., help="Operation JSON file (signer must be set)."),
    typed_signature: str = typer.Argument(..., help="Typed signature over the cancel digest."),
) -> None:
    """Exit 0 if `typed_signature` cancels the operation on behalf of its signer, 1 otherwise."""
    op = _load_operation(operation)
    try:
        valid = _ops(ctx).cancel_operation_has_valid_signature(op, typed_signature)
    except SignedOpsError as e:
        raise _fail(str(e))
    typer.echo("valid" if valid else "invalid")
    if not valid:
        raise typer.Exit(code=1)


@app.command("sign")
def sign(
    ctx: typer.Context,
    operation: str = typer.Argument(..., help="Operation JSON file (signer must be set), or - for stdin."),
    method: str = typer.Option(
        ETH_SIGN, "--method", help="eth_sign, eth_signTypedData or eth_signTypedData_v3."
    ),
) -> None:
    """
    Ask the signer at --rpc to sign the operation and print the signed operation JSON.

    Exits 1 if the signer rejects the request.
    """
    if method != ETH_SIGN and method not in {m.value for m in TypedDataMethod}:
        raise _fail(f"unknown signing method: {method}")
    op = _load_operation(operation)
    try:
        signed = asyncio.run(_sign_via_rpc(_ops(ctx).config, op, method))
    except SignerRejected as e:
        raise _fail(str(e), code=1)
    except SignedOpsError as e:
        raise _fail(str(e))
    _print_json(signed.to_dict())


async def _sign_via_rpc(config: ProxyConfig, operation: Operation, method: str) -> SignedOperation:
    async with JsonRpcSigner.from_config(config) as backend:
        return await SignedOperations(config, backend).sign_operation(operation, method)


@app.command("recover")
def recover(
    digest: str = typer.Argument(..., help="32-byte digest (0x...)."),
    typed_signature: str = typer.Argument(..., help="Typed signature (0x..., 66 bytes)."),
) -> None:
    """Print the address that produced `typed_signature` over `digest`."""
    if not _DIGEST_RE.match(digest):
        raise _fail("digest must be 0x followed by 64 hex characters")
    try:
        typer.echo(ec_recover_typed_signature(digest, typed_signature))
    except SignedOpsError as e:
        raise _fail(str(e))


# --- Entrypoints --------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> int:
    """
    Run the CLI. Returns an integer exit code.
    """
    try:
        rv = app(prog_name="signed-ops", standalone_mode=False, args=argv)
    except typer.Exit as e:
        return int(e.exit_code)
    except typer.Abort:
        typer.echo("aborted", err=True)
        return 1
    except Exception as e:
        typer.echo(f"error: {e}", err=True)
        return 1
    return rv if isinstance(rv, int) else 0


def run(argv: Optional[list[str]] = None) -> int:
    """Alias for :func:`main`, used by the console script."""
    return main(argv)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
