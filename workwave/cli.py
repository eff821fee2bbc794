"""
WorkWave CLI - Command-line interface.

This layer provides the user-facing CLI commands, using the SDK layer
for all operations. It handles:
- Argument parsing
- TTY detection for human vs machine output
- Pretty formatting for human output
- JSON output for piping/automation
"""

import argparse
import json
import logging
import sys
from typing import Any

import httpx

from workwave.core.client import ValidationError, WorkWaveError
from workwave.core.types import Callback, Order
from workwave.sdk import WorkWaveClient

# =============================================================================
# Output Helpers
# =============================================================================


def is_tty() -> bool:
    """Check if stdout is a TTY (human) or pipe (machine)."""
    return sys.stdout.isatty()


def json_output(data: Any, pretty: bool = False) -> None:
    """Print JSON output."""
    indent = 2 if pretty or is_tty() else None
    print(json.dumps(data, indent=indent, default=str))


def error_output(error: WorkWaveError) -> None:
    """Print error and exit."""
    json_output(error.to_dict())
    sys.exit(1)


def transport_error_output(error: httpx.TransportError) -> None:
    """Print a connection-level failure and exit."""
    json_output({"error": f"Connection error: {error}"})
    sys.exit(1)


def success_output(data: Any) -> None:
    """Print success output."""
    json_output(data)


def table_output(
    headers: list[str],
    rows: list[list[str]],
    widths: list[int],
) -> None:
    """Print a formatted table for human output."""
    # Header
    header_line = "  ".join(h.ljust(w) for h, w in zip(headers, widths))
    print(header_line)
    print("-" * len(header_line))

    # Rows
    for row in rows:
        print("  ".join(str(v)[:w].ljust(w) for v, w in zip(row, widths)))


def parse_headers(pairs: list[str] | None) -> dict[str, str]:
    """Parse repeated KEY=VALUE arguments."""
    headers: dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValidationError(f"Invalid header {pair!r}, expected KEY=VALUE")
        headers[key] = value
    return headers


def load_orders(source: str) -> list[Order]:
    """Read a JSON list of orders (or {"orders": [...]}) from a file or stdin."""
    try:
        if source == "-":
            data = json.load(sys.stdin)
        else:
            with open(source, encoding="utf-8") as f:
                data = json.load(f)
    except OSError as e:
        raise ValidationError(f"Cannot read orders file: {e}")
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in orders file: {e}")

    if isinstance(data, dict):
        data = data.get("orders")
    if not isinstance(data, list):
        raise ValidationError("Orders file must contain a JSON list of orders")
    try:
        return [Order.from_dict(item) for item in data]
    except (AttributeError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid order in orders file: {e}")


# =============================================================================
# CLI Commands
# =============================================================================


def cmd_callback_get(client: WorkWaveClient, _args: argparse.Namespace) -> None:
    """Show the configured callback URL."""
    callback = client.callback.get()
    success_output(callback.to_dict())


def cmd_callback_set(client: WorkWaveClient, args: argparse.Namespace) -> None:
    """Set the callback URL."""
    callback = client.callback.set(
        Callback(
            url=args.url,
            signature_password=args.signature_password or "",
            test=args.test,
            headers=parse_headers(args.header),
        )
    )
    success_output(callback.to_dict())


def cmd_callback_delete(client: WorkWaveClient, _args: argparse.Namespace) -> None:
    """Remove the callback URL."""
    callback = client.callback.delete()
    success_output({"success": True, "previous_url": callback.previous_url})


def _orders_output(orders: list[Order]) -> None:
    if is_tty():
        if not orders:
            print("No orders found.")
            return
        table_output(
            ["ID", "Name", "Eligibility", "Priority"],
            [[o.id, o.name, o.eligibility.type, str(o.priority)] for o in orders],
            [36, 40, 11, 8],
        )
    else:
        success_output({"data": [o.to_dict() for o in orders], "total_count": len(orders)})


def cmd_orders_list(client: WorkWaveClient, args: argparse.Namespace) -> None:
    """List orders in the territory."""
    orders = client.orders.list(
        include=args.include,
        eligible_on=args.eligible_on,
        assigned_on=args.assigned_on,
    )
    _orders_output(orders)


def cmd_orders_get(client: WorkWaveClient, args: argparse.Namespace) -> None:
    """Get orders by ID."""
    _orders_output(client.orders.get(args.order_ids))


def cmd_orders_add(client: WorkWaveClient, args: argparse.Namespace) -> None:
    """Add orders from a JSON file."""
    orders = load_orders(args.file)
    request_id = client.orders.add(
        orders,
        strict=args.strict,
        accept_bad_geocodes=args.accept_bad_geocodes,
    )
    success_output(
        {
            "request_id": request_id,
            "message": f"{len(orders)} order(s) submitted. The result is delivered to the callback URL.",
        }
    )


def _routes_output(routes: list[Any]) -> None:
    if is_tty():
        if not routes:
            print("No routes found.")
            return
        table_output(
            ["ID", "Date", "Vehicle", "Driver", "Steps"],
            [[r.id, r.date, r.vehicle_id, r.driver_id, str(len(r.steps))] for r in routes],
            [36, 8, 36, 36, 5],
        )
    else:
        success_output({"data": [r.to_dict() for r in routes], "total_count": len(routes)})


def cmd_routes_current(client: WorkWaveClient, args: argparse.Namespace) -> None:
    """List current routes."""
    _routes_output(client.routes.list_current(date=args.date, vehicle=args.vehicle))


def cmd_routes_approved(client: WorkWaveClient, args: argparse.Namespace) -> None:
    """List approved routes."""
    _routes_output(client.routes.list_approved(date=args.date))


def cmd_drivers_list(client: WorkWaveClient, _args: argparse.Namespace) -> None:
    """List drivers in the territory."""
    drivers = client.drivers.list()
    if is_tty():
        if not drivers:
            print("No drivers found.")
            return
        table_output(
            ["ID", "Name", "Email"],
            [[d.id, d.name, d.email] for d in drivers],
            [36, 30, 40],
        )
    else:
        success_output({"data": [d.to_dict() for d in drivers], "total_count": len(drivers)})


# =============================================================================
# Parser
# =============================================================================


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="workwave",
        description="WorkWave CLI - Command-line interface for the WorkWave Route Manager API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Output Modes:
  TTY (human):  Pretty tables
  Pipe:         Full JSON

Examples:
  workwave callback set https://my.server.com/callback --test
  workwave -t <territory_id> orders list --include assigned --eligible-on 20191019
  workwave -t <territory_id> routes approved --date 20191019 | jq '.data[].id'
""",
    )
    parser.add_argument("--territory", "-t", help="Territory ID (overrides WORKWAVE_TERRITORY_ID)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log HTTP requests to stderr")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # ========== Callback ==========
    callback = subparsers.add_parser("callback", help="Manage the callback URL")
    callback.set_defaults(func=lambda _c, _a: callback.print_help())
    callback_sub = callback.add_subparsers(dest="subcommand")

    c_get = callback_sub.add_parser("get", help="Show the callback URL")
    c_get.set_defaults(func=cmd_callback_get)

    c_set = callback_sub.add_parser("set", help="Set the callback URL")
    c_set.add_argument("url", help="Callback URL")
    c_set.add_argument("--signature-password", help="Secret used to sign callback messages")
    c_set.add_argument("--test", action="store_true", help="Ask WorkWave to test the URL first")
    c_set.add_argument(
        "--header",
        action="append",
        metavar="KEY=VALUE",
        help="Extra header sent with each callback (repeatable)",
    )
    c_set.set_defaults(func=cmd_callback_set)

    c_delete = callback_sub.add_parser("delete", help="Remove the callback URL")
    c_delete.set_defaults(func=cmd_callback_delete)

    # ========== Orders ==========
    orders = subparsers.add_parser("orders", help="List and add orders")
    orders.set_defaults(func=lambda _c, _a: orders.print_help())
    orders_sub = orders.add_subparsers(dest="subcommand")

    o_list = orders_sub.add_parser("list", help="List orders")
    o_list.add_argument("--include", "-i", help="Which orders to include (assigned, unassigned, all)")
    o_list.add_argument("--eligible-on", help="Only orders eligible on this date (yyyyMMdd)")
    o_list.add_argument("--assigned-on", help="Only orders assigned on this date (yyyyMMdd)")
    o_list.set_defaults(func=cmd_orders_list)

    o_get = orders_sub.add_parser("get", help="Get orders by ID")
    o_get.add_argument("order_ids", nargs="+", help="Order IDs")
    o_get.set_defaults(func=cmd_orders_get)

    o_add = orders_sub.add_parser("add", help="Add orders from a JSON file")
    o_add.add_argument("file", help="JSON file with a list of orders (or - for stdin)")
    o_add.add_argument("--strict", action="store_true", help="Reject the batch if any order is invalid")
    o_add.add_argument("--accept-bad-geocodes", action="store_true", help="Accept orders that failed to geocode")
    o_add.set_defaults(func=cmd_orders_add)

    # ========== Routes ==========
    routes = subparsers.add_parser("routes", help="List current and approved routes")
    routes.set_defaults(func=lambda _c, _a: routes.print_help())
    routes_sub = routes.add_subparsers(dest="subcommand")

    r_current = routes_sub.add_parser("current", help="List current routes")
    r_current.add_argument("--date", "-d", help="Route date (yyyyMMdd)")
    r_current.add_argument("--vehicle", help="Vehicle ID")
    r_current.set_defaults(func=cmd_routes_current)

    r_approved = routes_sub.add_parser("approved", help="List approved routes")
    r_approved.add_argument("--date", "-d", help="Route date (yyyyMMdd)")
    r_approved.set_defaults(func=cmd_routes_approved)

    # ========== Drivers ==========
    drivers = subparsers.add_parser("drivers", help="List drivers")
    drivers.set_defaults(func=lambda _c, _a: drivers.print_help())
    drivers_sub = drivers.add_subparsers(dest="subcommand")

    d_list = drivers_sub.add_parser("list", help="List drivers")
    d_list.set_defaults(func=cmd_drivers_list)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )

    # Run command (all subparsers have default funcs that print help)
    with WorkWaveClient(territory_id=args.territory) as client:
        try:
            args.func(client, args)
        except WorkWaveError as e:
            error_output(e)
        except httpx.TransportError as e:
            transport_error_output(e)


if __name__ == "__main__":
    main()
