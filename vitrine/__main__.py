"""
Command line — payment payloads and identity checks.

    python -m vitrine pix encode --key pix@loja.com.br --name "Loja" --city "Sao Paulo" --reference recA1B2
    python -m vitrine pix decode 00020101021126...6304ABCD
    python -m vitrine tax-id 529.982.247-25
    python -m vitrine postal-code 01310100
    python -m vitrine totals --delivery-fee 20 --service-fee 3.40 lojaA:50.00 lojaB:30.00
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from kungfu import Ok, Error

from vitrine import pix as P
from vitrine import totals as T
from vitrine import validate as V


# ═══════════════════════════════════════════════════════════════════════════════
# Commands
# ═══════════════════════════════════════════════════════════════════════════════


def pix_encode(args: argparse.Namespace) -> int:
    try:
        amount = T.to_cents(args.amount) if args.amount is not None else None
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    fields = P.PaymentFields(
        payee_key=args.key,
        merchant_name=args.name,
        merchant_city=args.city,
        reference=args.reference,
        initiation=P.Initiation.DYNAMIC if args.dynamic else P.Initiation.STATIC,
        amount=amount,
        currency=args.currency,
        uppercase_name=args.uppercase_name,
    )
    match P.encode(fields):
        case Ok(payload):
            print(payload)
            return 0
        case Error(e):
            print(f"error: {e.message}", file=sys.stderr)
            return 1


def pix_decode(args: argparse.Namespace) -> int:
    match P.decode(args.payload):
        case Ok(decoded):
            print(f"initiation     {decoded.initiation.name.lower()}")
            print(f"payee key      {decoded.payee_key}")
            print(f"merchant name  {decoded.merchant_name}")
            print(f"merchant city  {decoded.merchant_city}")
            print(f"currency       {decoded.currency}")
            if decoded.amount is not None:
                print(f"amount         {T.format_amount(decoded.amount)}")
            print(f"reference      {decoded.reference or ''}")
            print(f"crc            {decoded.crc}")
            return 0
        case Error(e):
            print(f"error: {e.kind.name.lower()}: {e.message}", file=sys.stderr)
            return 1


def tax_id(args: argparse.Namespace) -> int:
    valid = V.is_valid_tax_id(args.value)
    print(f"{V.mask_tax_id(args.value)} {'valid' if valid else 'invalid'}")
    return 0 if valid else 1


def postal_code(args: argparse.Namespace) -> int:
    valid = V.is_valid_postal_code(args.value)
    print(f"{V.mask_postal_code(args.value)} {'valid' if valid else 'invalid'}")
    return 0 if valid else 1


def parse_line(raw: str, index: int) -> T.CartLine:
    """MERCHANT:PRICE[:QTY]"""
    parts = raw.split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"Expected MERCHANT:PRICE[:QTY], got {raw!r}")
    quantity = int(parts[2]) if len(parts) == 3 else 1
    return T.CartLine(
        item_id=f"item{index}",
        merchant_id=parts[0],
        unit_price=T.to_cents(parts[1]),
        quantity=quantity,
    )


def totals(args: argparse.Namespace) -> int:
    try:
        lines = [parse_line(raw, i) for i, raw in enumerate(args.lines, start=1)]
        result = T.compute_totals(
            lines,
            T.to_cents(args.delivery_fee),
            T.to_cents(args.service_fee),
        )
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    print(f"subtotal     {T.format_brl(result.subtotal)}")
    print(f"delivery     {T.format_brl(result.delivery_fee)}  ({result.store_count} stores)")
    print(f"service fee  {T.format_brl(result.service_fee)}")
    print(f"total        {T.format_brl(result.grand_total)}")
    return 0


# ═══════════════════════════════════════════════════════════════════════════════
# Parser
# ═══════════════════════════════════════════════════════════════════════════════


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vitrine")
    commands = parser.add_subparsers(dest="command", required=True)

    pix = commands.add_parser("pix", help="encode or decode payment payloads")
    pix_commands = pix.add_subparsers(dest="pix_command", required=True)

    encode = pix_commands.add_parser("encode", help="build a payload")
    encode.add_argument("--key", required=True)
    encode.add_argument("--name", required=True)
    encode.add_argument("--city", required=True)
    encode.add_argument("--reference", default="")
    encode.add_argument("--amount", help="e.g. 123.40, required with --dynamic")
    encode.add_argument("--dynamic", action="store_true", help="single-use code bound to the amount")
    encode.add_argument("--currency", default=P.CURRENCY_BRL)
    encode.add_argument("--uppercase-name", action="store_true")
    encode.set_defaults(run=pix_encode)

    decode = pix_commands.add_parser("decode", help="check and show a payload")
    decode.add_argument("payload")
    decode.set_defaults(run=pix_decode)

    tax = commands.add_parser("tax-id", help="validate a CPF")
    tax.add_argument("value")
    tax.set_defaults(run=tax_id)

    postal = commands.add_parser("postal-code", help="validate a CEP")
    postal.add_argument("value")
    postal.set_defaults(run=postal_code)

    total = commands.add_parser("totals", help="compute checkout totals")
    total.add_argument("--delivery-fee", default="20.00", help="per store")
    total.add_argument("--service-fee", default="3.40")
    total.add_argument("lines", nargs="*", metavar="MERCHANT:PRICE[:QTY]")
    total.set_defaults(run=totals)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.run(args)


if __name__ == "__main__":
    sys.exit(main())
