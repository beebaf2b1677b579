from __future__ import annotations

import click
from flask import Blueprint, current_app
from flask.cli import with_appcontext

from zyvero.app.common.validation import parse_item_id
from zyvero.app.extensions import db
from zyvero.modules.cart.storage import FileStorage
from zyvero.modules.cart.store import CartStore

cli_bp = Blueprint("cart_cli", __name__, cli_group="cart")

CLI_CART_EXT = "zyvero.cli_cart"


def _store() -> CartStore:
    """One file-backed cart per process, shared by every command."""
    store = current_app.extensions.get(CLI_CART_EXT)
    if store is None:
        store = CartStore(FileStorage(current_app.config["CART_FILE"]))
        current_app.extensions[CLI_CART_EXT] = store
    return store


def _show(store: CartStore) -> None:
    if not len(store):
        click.echo("Cart is empty.")
    for i in store.items:
        click.echo(f"{i.id}\t{i.title}\t{i.price} x {i.quantity}")
    if len(store):
        click.echo(f"Total: {store.total:.2f} ({store.count} items)")
    if store.last_error is not None:
        click.echo(f"warning: cart not saved ({store.last_error})", err=True)


@cli_bp.cli.command("show")
def show_cart() -> None:
    """Print the cart."""
    _show(_store())


@cli_bp.cli.command("add")
@click.argument("item_id")
@click.argument("title")
@click.argument("price", type=float)
@click.option("--thumbnail", default=None, help="Image URL.")
def add_item(item_id: str, title: str, price: float, thumbnail: str | None) -> None:
    """Add one unit of a product."""
    store = _store()
    store.add_item({"id": parse_item_id(item_id), "title": title, "price": price, "thumbnail": thumbnail})
    _show(store)


@cli_bp.cli.command("remove")
@click.argument("item_id")
def remove_item(item_id: str) -> None:
    store = _store()
    store.remove_item(parse_item_id(item_id))
    _show(store)


@cli_bp.cli.command("inc")
@click.argument("item_id")
def increment(item_id: str) -> None:
    store = _store()
    store.increment(parse_item_id(item_id))
    _show(store)


@cli_bp.cli.command("dec")
@click.argument("item_id")
def decrement(item_id: str) -> None:
    store = _store()
    store.decrement(parse_item_id(item_id))
    _show(store)


@cli_bp.cli.command("clear")
def clear() -> None:
    store = _store()
    store.clear()
    _show(store)


@click.command("init-db")
@with_appcontext
def init_db_command() -> None:
    """Create tables."""
    db.create_all()
    click.echo("DB initialized (tables created).")
