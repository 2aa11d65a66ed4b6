#!/usr/bin/env python3
"""
Validation Commands for the xcpv CLI

One command per validator. Each prints the verdict in the selected output format and
exits with status 1 when the input is invalid.
"""

import sys
from typing import Any, Dict, Optional

import click

from addresses.models import Network
from addresses.packing import is_segwit_packed, pack_address, unpack_address
from assets.names import validate_asset_name
from amounts.validation import validate_amount, validate_quantity
from core.exceptions import ValidationError
from core.results import ValidationResult
from scripts.classifier import estimate_script_complexity, validate_script, validate_script_size
from validator.core import validate_bitcoin_address

from cli.context import CLIContext, pass_context

NETWORK_CHOICES = [network.value for network in Network]
SCRIPT_CONTEXTS = ['scriptSig', 'scriptPubKey', 'witnessScript']


def emit_verdict(ctx: CLIContext, result: ValidationResult, extra: Optional[Dict[str, Any]] = None):
    """Print a verdict and exit non-zero when it is invalid."""
    data = result.to_dict()
    if extra:
        data.update(extra)
    ctx.output(data)

    if not result.is_valid:
        sys.exit(1)


@click.command()
@click.argument('address')
@click.option('--network', type=click.Choice(NETWORK_CHOICES),
              help='Expected network (overrides network.expected)')
@click.option('--no-multisig', is_flag=True, help='Reject bare multisig destinations')
@pass_context
def address(ctx: CLIContext, address: str, network: Optional[str], no_multisig: bool):
    """Validate and classify a Bitcoin address."""
    settings = ctx.settings.network
    info = validate_bitcoin_address(
        address,
        expected_network=network or settings.expected,
        allow_multisig=settings.allow_multisig and not no_multisig,
    )
    emit_verdict(ctx, info)


@click.command()
@click.argument('script_hex')
@click.option('--context', 'size_context', type=click.Choice(SCRIPT_CONTEXTS),
              help='Also enforce the size limit of this script context')
@pass_context
def script(ctx: CLIContext, script_hex: str, size_context: Optional[str]):
    """Classify a hex script and flag dangerous opcodes."""
    info = validate_script(script_hex)
    if info.is_valid and size_context:
        size = validate_script_size(script_hex, size_context)
        if not size.is_valid:
            emit_verdict(ctx, size, {'script_type': info.script_type.value})
    emit_verdict(ctx, info)


@click.command()
@click.argument('name')
@click.option('--subasset', is_flag=True, help='Validate as PARENT.child subasset')
@pass_context
def asset(ctx: CLIContext, name: str, subasset: bool):
    """Validate a Counterparty asset name."""
    emit_verdict(ctx, validate_asset_name(name, is_subasset=subasset))


@click.command()
@click.argument('value')
@click.option('--unit', type=click.Choice(['btc', 'satoshis']),
              help='Unit of VALUE (defaults to amounts.unit)')
@click.option('--allow-zero/--no-allow-zero', default=None, help='Accept a zero amount')
@click.option('--dust/--no-dust', 'allow_dust', default=None,
              help='Accept amounts below the dust limit')
@pass_context
def amount(ctx: CLIContext, value: str, unit: Optional[str],
           allow_zero: Optional[bool], allow_dust: Optional[bool]):
    """Validate a BTC amount."""
    settings = ctx.settings.amounts
    result = validate_amount(
        value,
        unit=unit or settings.unit,
        allow_zero=settings.allow_zero if allow_zero is None else allow_zero,
        allow_dust=settings.allow_dust if allow_dust is None else allow_dust,
        max_amount=settings.max_amount,
    )
    emit_verdict(ctx, result)


@click.command()
@click.argument('value')
@click.option('--indivisible', is_flag=True, help='Asset accepts whole numbers only')
@click.option('--max-supply', default='9223372036854775807', show_default=True,
              help='Largest acceptable quantity')
@click.option('--allow-zero', is_flag=True, help='Accept a zero quantity')
@pass_context
def quantity(ctx: CLIContext, value: str, indivisible: bool, max_supply: str, allow_zero: bool):
    """Validate an asset quantity."""
    result = validate_quantity(
        value, divisible=not indivisible, max_supply=max_supply, allow_zero=allow_zero
    )
    emit_verdict(ctx, result)


@click.command()
@click.argument('text')
@pass_context
def memo(ctx: CLIContext, text: str):
    """Validate a transaction memo (text or hex)."""
    result = ctx.engine.validate_memo(text)
    extra = {}
    if result.is_valid:
        extra = {'is_hex': result.is_hex, 'byte_length': result.byte_length}
    emit_verdict(ctx, result, extra)


@click.command()
@click.argument('text')
@pass_context
def qr(ctx: CLIContext, text: str):
    """Check text before it is encoded as a QR code."""
    emit_verdict(ctx, ctx.engine.validate_qr_text(text))


@click.command()
@click.argument('rate')
@pass_context
def fee(ctx: CLIContext, rate: str):
    """Validate a fee rate in sat/vB."""
    emit_verdict(ctx, ctx.engine.validate_fee_rate(rate))


@click.command()
@click.argument('script_hex')
@pass_context
def complexity(ctx: CLIContext, script_hex: str):
    """Estimate the complexity score of a hex script."""
    try:
        score = estimate_script_complexity(script_hex)
    except ValidationError as e:
        emit_verdict(ctx, ValidationResult.from_exception(e))
        return
    emit_verdict(ctx, ValidationResult.ok(), {'complexity': score})


@click.command()
@click.argument('address')
@pass_context
def pack(ctx: CLIContext, address: str):
    """Pack an address into its 21-byte Counterparty form."""
    try:
        packed = pack_address(address)
    except ValidationError as e:
        emit_verdict(ctx, ValidationResult.from_exception(e))
        return
    emit_verdict(ctx, ValidationResult.ok(), {
        'packed': packed.hex(),
        'segwit': is_segwit_packed(packed),
    })


@click.command()
@click.argument('packed_hex')
@click.option('--network', type=click.Choice(NETWORK_CHOICES), default='mainnet',
              show_default=True, help='Network to render the address for')
@pass_context
def unpack(ctx: CLIContext, packed_hex: str, network: str):
    """Rebuild an address from its packed hex form."""
    try:
        packed = bytes.fromhex(packed_hex)
    except ValueError:
        emit_verdict(ctx, ValidationResult.fail("Packed address must be valid hexadecimal"))
        return

    try:
        address = unpack_address(packed, Network(network))
    except ValidationError as e:
        emit_verdict(ctx, ValidationResult.from_exception(e))
        return
    emit_verdict(ctx, ValidationResult.ok(), {'address': address})


@click.command()
@click.argument('destination')
@click.argument('asset_name', metavar='ASSET')
@click.argument('quantity_value', metavar='QUANTITY')
@click.option('--memo', 'memo_text', help='Optional memo')
@click.option('--fee-rate', help='Optional fee rate in sat/vB')
@click.option('--indivisible', is_flag=True, help='Asset accepts whole numbers only')
@pass_context
def send(ctx: CLIContext, destination: str, asset_name: str, quantity_value: str,
         memo_text: Optional[str], fee_rate: Optional[str], indivisible: bool):
    """Validate every field of a send request."""
    report = ctx.engine.validate_send(
        destination, asset_name, quantity_value,
        memo=memo_text, fee_rate=fee_rate, divisible=not indivisible,
    )
    ctx.output(report.to_dict())

    if not report.is_valid:
        sys.exit(1)


COMMANDS = [address, script, asset, amount, quantity, memo, qr, fee, complexity, pack, unpack, send]
