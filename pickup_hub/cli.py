"""Command-line front end for the pick-up point: orders and the point shell."""

from __future__ import annotations

import re
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from pickup_hub.file_storage import OrderStorage, PointStorage
from pickup_hub.memory_cache import MemoryCache
from pickup_hub.model import OrderInput, ServiceError
from pickup_hub.order_service import OrderService
from pickup_hub.pickpoint_service import DummyTransactor, PickPointService
from pickup_hub.pickpoints_shell import PickPointShell, shell_help

ORDERS_FILE = "storage_orders.json"
POINTS_FILE = "storage_points.json"
ORDERS_PER_PAGE = 10

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_DECIMAL = re.compile(r"[+-]?[0-9]+")
_OCTAL = re.compile(r"[+-]?0[0-7_]+")
_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}
_FAILURES = (ServiceError, OSError, ValueError)

USAGE = """
	usage: pickup-hub -command=<help|accept|remove|give|list|return|list-return|pickpoints> [-id=<order id>] [-recipient=<recipient id>] [-weight=<order weight>] [-price=<order price>] [-cover=<order cover>] [-expire=<expire date>] [-t=<bool>] [<args>]

	Command desciption:
		help: список доступных команд с кратким описанием
		accept: принять заказ от курьера
		remove: вернуть заказ курьеру
		give: выдать заказ клиенту
		list: получить список заказов
		return: принять возврат от клиента
		list-return: получить список возвратов
		pickpoints: активация интерактивного режима записи и чтения данных о ПВЗ

	Needed flags or arguments for each command:
		help
		accept 		 -id -recipient -weight -price -cover -expire
		remove  	 -id
		give		 args: order ids to give (example: pickup-hub -command=give 1 2 3 4)
		list		 -recipient (optional flag -t: boolean value for printing orders located in our point (not already given); optional args: number of orders to list or zero for all)
		return  	 -id -recipient
		list-return	 args: page number and number of orders per page (default: all pages and 10 orders per page) (example: "-command=list-return 2 5" prints 2nd page of returned orders grouped by 5 orders in each page)
		pickpoints

	Flags requirements:
		-id, -recipient: positive number
		-expire: date in 'dd.mm.yyyy' format (02.01.2006 for 2nd Jan 2006)
	"""


@dataclass
class Params:
    """Flags and positional arguments of one invocation."""

    command: str | None = ""
    id: int | None = 0
    recipient_id: int | None = 0
    weight_grams: int | None = 0
    price_kopecks: int | None = 0
    cover: str | None = ""
    expire: str | None = ""
    not_given: bool = False
    args: list[str] = field(default_factory=list)


_FLAGS: dict[str, tuple[str, type]] = {
    "command": ("command", str),
    "id": ("id", int),
    "recipient": ("recipient_id", int),
    "weight": ("weight_grams", int),
    "price": ("price_kopecks", int),
    "cover": ("cover", str),
    "expire": ("expire", str),
    "t": ("not_given", bool),
}


def _flag_int(name: str, value: str) -> int:
    try:
        number = int(value, 0)
    except ValueError:
        if not _OCTAL.fullmatch(value):
            raise ValueError(f'invalid value "{value}" for flag -{name}: parse error') from None
        number = int(value, 8)
    if not _INT64_MIN <= number <= _INT64_MAX:
        raise ValueError(f'invalid value "{value}" for flag -{name}: value out of range')
    return number


def _flag_bool(name: str, value: str) -> bool:
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f'invalid boolean value "{value}" for -{name}: parse error')


def parse_args(argv: Sequence[str] | None = None) -> Params:
    """Parse flags up to the first non-flag argument; the rest become args.

    Flags are written -name, --name, -name=value or -name value.
    Raises ValueError for unknown flags and bad values.
    """
    rest = list(sys.argv[1:] if argv is None else argv)
    params = Params()
    while rest:
        arg = rest[0]
        if len(arg) < 2 or not arg.startswith("-"):
            break
        rest.pop(0)
        if arg == "--":
            break
        body = arg[2:] if arg.startswith("--") else arg[1:]
        if not body or body[0] in "-=":
            raise ValueError(f"bad flag syntax: {arg}")
        name, has_value, value = body.partition("=")
        if name not in _FLAGS:
            raise ValueError(f"flag provided but not defined: -{name}")
        attribute, kind = _FLAGS[name]
        if kind is bool:
            setattr(params, attribute, _flag_bool(name, value) if has_value else True)
            continue
        if not has_value:
            if not rest:
                raise ValueError(f"flag needs an argument: -{name}")
            value = rest.pop(0)
        setattr(params, attribute, _flag_int(name, value) if kind is int else value)
    params.args = rest
    return params


def _parse_number(text: str) -> int:
    if not _DECIMAL.fullmatch(text):
        raise ValueError(f'parsing "{text}": invalid syntax')
    number = int(text)
    if not _INT64_MIN <= number <= _INT64_MAX:
        raise ValueError(f'parsing "{text}": value out of range')
    return number


def print_help() -> None:
    """Print the usage of the command line and of the point shell."""
    print(USAGE)
    shell_help()


def _missing(*values: Any) -> bool:
    if any(value is None for value in values):
        print("miss required flags")
        return True
    return False


def accept(service: OrderService, params: Params) -> None:
    if _missing(params.id, params.recipient_id, params.expire, params.weight_grams, params.price_kopecks, params.cover):
        return
    try:
        service.accept_from_courier(
            OrderInput(
                id=params.id,
                recipient_id=params.recipient_id,
                weight_grams=params.weight_grams,
                price_kopecks=params.price_kopecks,
                cover=params.cover,
                expire_date=params.expire,
            )
        )
    except _FAILURES as exc:
        print(exc)
        return
    print("got new order from courier")


def remove(service: OrderService, params: Params) -> None:
    if _missing(params.id, params.recipient_id, params.expire):
        return
    try:
        service.remove(params.id)
    except _FAILURES as exc:
        print(exc)
        return
    print(f"removed order {params.id} from our pick-up point")


def give(service: OrderService, params: Params) -> None:
    if not params.args:
        print("expected at least one argument as order id")
        return
    try:
        ids = [_parse_number(arg) for arg in params.args]
        service.give(ids)
    except _FAILURES as exc:
        print(exc)
        return
    print("all orders have been given to its recipient")


def list_orders(service: OrderService, params: Params) -> None:
    if _missing(params.recipient_id):
        return
    try:
        n = _parse_number(params.args[0]) if params.args else 0
        found = service.list_orders(params.recipient_id, n, params.not_given)
    except _FAILURES as exc:
        print(exc)
        return
    print(f"found {len(found)} orders:")
    for position, order in enumerate(found, start=1):
        print(
            f"{position}.\tid: {order.id}\tprice: {order.price_kopecks}"
            f"\texpires: {order.expire_date.strftime('%m.%d.%Y')}"
        )


def return_order(service: OrderService, params: Params) -> None:
    if _missing(params.id, params.recipient_id):
        return
    try:
        service.return_order(params.id, params.recipient_id)
    except _FAILURES as exc:
        print(exc)
        return
    print(f"order {params.id} is returned successfully")


def list_returned(service: OrderService, params: Params) -> None:
    try:
        page_num = _parse_number(params.args[0]) if params.args else 0
        per_page = _parse_number(params.args[1]) if len(params.args) > 1 else ORDERS_PER_PAGE
        found = service.list_returned(page_num, per_page)
    except _FAILURES as exc:
        print(exc)
        return
    start = 1
    if page_num == 0:
        print("all returned not removed orders:")
    else:
        start = per_page * (page_num - 1) + 1
        print(f"returned not removed orders from page {page_num} ({start}-{start + len(found) - 1}):")
    for position, order in enumerate(found, start=start):
        print(
            f"{position}.\tid: {order.id}\trecipient: {order.recipient_id}\tprice: {order.price_kopecks}"
            f"\texpires: {order.expire_date.strftime('%m.%d.%Y')}"
        )


_ORDER_COMMANDS: dict[str, Callable[[OrderService, Params], None]] = {
    "accept": accept,
    "remove": remove,
    "give": give,
    "list": list_orders,
    "return": return_order,
    "list-return": list_returned,
}


def _run_pickpoints(points: PointStorage) -> None:
    with MemoryCache() as cache:
        service = PickPointService(points, cache, DummyTransactor())
        PickPointShell(service).run(sys.stdin)


def main(argv: Sequence[str] | None = None) -> int:
    try:
        params = parse_args(argv)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 2
    try:
        orders = OrderStorage(ORDERS_FILE)
        points = PointStorage(POINTS_FILE)
    except (OSError, ValueError, KeyError, ServiceError) as exc:
        print(f"can not connect to storage: {exc}")
        return 1

    command = params.command or ""
    if command == "":
        print("expected a command")
    elif command == "help":
        print_help()
    elif command in _ORDER_COMMANDS:
        _ORDER_COMMANDS[command](OrderService(orders), params)
    elif command == "pickpoints":
        _run_pickpoints(points)
    else:
        print("Unknown command")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())