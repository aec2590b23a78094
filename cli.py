# cli.py
import sys
from typing import Any, Dict, List, Optional

import requests
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.columns import Columns
from rich.prompt import IntPrompt, Confirm, Prompt
from rich.text import Text
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from loopcart.config import configure_logging, load_client_settings
from loopcart.errors import LoopCartError
from loopcart_sdk import LocalStorage, Shopper, StoreClient
from loopcart_sdk.shopper import discounted_price, search, totals

console = Console()
settings = load_client_settings()
shop = Shopper(StoreClient(base_url=settings.api_url, timeout=settings.timeout), LocalStorage(settings.storage_path))

CATEGORIES = ["Electronics", "Clothing", "Books", "Furniture", "Second Hand"]

# Global state for status messages and caching
status_message = "Ready"
product_cache: List[Dict[str, Any]] = []

# prompt_toolkit completion menu colours
prompt_style = PromptStyle([
    ("completion-menu.completion", "bg:#1f3b4d #e0e0e0"),
    ("completion-menu.completion.current", "bg:#f0a500 #000000 bold"),
])


# ---------------------------
# Display helpers
# ---------------------------
def show_products(products: List[Dict[str, Any]], title: str = "📦 Products Catalog"):
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=4)
    table.add_column("", width=3)
    table.add_column("Name", style="bold", width=26)
    table.add_column("Price", justify="right", width=10)
    table.add_column("MRP", justify="right", width=10)
    table.add_column("Off", justify="right", width=6)
    table.add_column("Category", width=12)

    for p in products:
        image = p.get("image") or "📦"
        table.add_row(
            str(p.get("id", "N/A")),
            "🖼" if image.startswith("http") else image,
            p.get("name", "N/A"),
            f"[green]₹{discounted_price(p.get('price', 0), p.get('discount', 0))}[/green]",
            f"[dim strike]₹{p.get('price', 0)}[/dim strike]",
            f"{p.get('discount', 0)}%",
            p.get("category", "N/A")
        )
    console.print(table)


def show_cart(cart: List[Dict[str, Any]]):
    user = shop.current_user or {}

    title = Text()
    title.append("🛒 Shopping Cart - ", style="bold")
    title.append(user.get("name", "Guest"), style="bold cyan")

    if not cart:
        console.print(Panel("Your cart is empty 🛍️\nAdd some products to get started!", title=title, style="blue"))
        return

    table = Table(box=box.ROUNDED, header_style="bold blue", show_lines=True)
    table.add_column("ID", style="dim", width=4)
    table.add_column("Product", style="bold", width=28)
    table.add_column("Category", width=12)
    table.add_column("Qty", justify="right", width=6)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Subtotal", justify="right", width=12)

    for it in cart:
        table.add_row(
            str(it.get("productId", "?")),
            it.get("name", "Unknown"),
            it.get("category", ""),
            str(it.get("quantity", 0)),
            f"₹{it.get('price', 0)}",
            f"₹{it.get('price', 0) * it.get('quantity', 0)}"
        )

    summary = totals(cart)
    footer = (
        f"Subtotal: ₹{summary['subtotal']}\n"
        f"Discount: -₹{summary['discount']}\n"
        f"[bold green]Total: ₹{summary['total']}[/bold green]"
    )
    console.print(Panel(table, title=title, border_style="blue"))
    console.print(Panel.fit(footer, border_style="green"))


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# API wrapper with exception handling
# ---------------------------
def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """Run a shop action; storefront errors become a red status line and None."""
    global status_message
    try:
        with console.status("Working...", spinner="dots"):
            result = fn(*args, **kwargs)
    except (LoopCartError, ValueError) as e:
        status_message = f"Error: {e}"
        console.print(show_status(status_message, False))
        return None
    if success_msg:
        status_message = success_msg
        console.print(show_status(success_msg))
    return result


# ---------------------------
# Autocompletion helpers
# ---------------------------
def get_product_completer():
    global product_cache
    if not product_cache:
        product_cache = try_api(shop.load_products) or []
    return WordCompleter([str(p.get("id", "")) for p in product_cache], ignore_case=True)


def get_cart_completer():
    return WordCompleter([str(it.get("productId", "")) for it in shop.cart], ignore_case=True)


def get_category_completer():
    return WordCompleter(CATEGORIES, ignore_case=True, sentence=True)


# ---------------------------
# Layout and Header
# ---------------------------
def create_header():
    user = shop.current_user
    who = f"Hi, {user['name']}" if user else "Not logged in"
    line = Text.assemble(
        ("🛍️ LoopCart", "bold magenta"), "  |  ",
        (who, "bold blue"), "  |  ",
        (settings.api_url, "dim"),
    )
    return Panel(line, border_style="blue")


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=prompt_style, default=default)


def ask_product_id(message: str, completer) -> Optional[int]:
    raw = prompt_with_autocomplete(message, completer=completer).strip()
    try:
        return int(raw)
    except ValueError:
        console.print("[red]Please enter a numeric product ID.[/red]")
        return None


def ensure_login() -> bool:
    if shop.current_user:
        return True
    console.print("[yellow]Please log in first.[/yellow]")
    return do_login()


def do_login() -> bool:
    name = Prompt.ask("👤 Name")
    email = Prompt.ask("✉️ Email")
    user = try_api(shop.login, name, email)
    if user:
        console.print(f"[green]Welcome to LoopCart, {user['name']}![/green]")
        return True
    return False


MENU = [
    ("1", "📦 List products"),
    ("2", "🏷️ Browse category"),
    ("3", "🔍 Search products"),
    ("4", "🛒 Add to cart"),
    ("5", "🧺 View cart"),
    ("6", "🔢 Change quantity"),
    ("7", "➖ Remove from cart"),
    ("8", "✅ Checkout"),
    ("9", "🩺 Server health"),
    ("10", "👤 Login / logout"),
    ("q", "👋 Quit"),
]
MENU_KEYS = [key for key, _ in MENU]


def render_menu():
    entries = []
    for key, label in MENU:
        if key == "5":
            label = f"{label} ({shop.cart_count()})"
        entries.append(Text.assemble((f"[{key}] ", "bold cyan"), label))
    return Panel(Columns(entries, equal=True, expand=True), title="Menu", border_style="yellow")


# ---------------------------
# Main menu
# ---------------------------
def menu():
    global status_message, product_cache

    console.clear()
    console.print(create_header())

    product_cache = try_api(shop.load_products) or []
    if not shop.current_user:
        do_login()

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        console.print(render_menu())
        choice = prompt_with_autocomplete(
            "\nChoose an option", completer=WordCompleter(MENU_KEYS + ["quit", "exit"])
        ).strip()

        if choice == "1":
            products = try_api(shop.load_products, success_msg="Products loaded")
            if products is not None:
                product_cache = products
                show_products(products)

        elif choice == "2":
            category = prompt_with_autocomplete("Category", completer=get_category_completer()).strip()
            products = try_api(shop.load_products, category, success_msg=f"Category '{category}' loaded")
            if products is not None:
                show_products(products, title=f"🏷️ {category}")

        elif choice == "3":
            term = prompt_with_autocomplete("Enter search term")
            if not product_cache:
                product_cache = try_api(shop.load_products) or []
            show_products(search(product_cache, term), title=f"🔍 Results for '{term}'")

        elif choice == "4":
            if not ensure_login():
                continue
            pid = ask_product_id("Enter product ID", get_product_completer())
            if pid is None:
                continue
            cart = try_api(shop.add_to_cart, pid, success_msg="✅ Product added to cart!")
            if cart is not None:
                show_cart(cart)

        elif choice == "5":
            cart = try_api(shop.sync_cart)
            if cart is not None:
                show_cart(cart)

        elif choice == "6":
            pid = ask_product_id("Enter product ID", get_cart_completer())
            if pid is None:
                continue
            change = IntPrompt.ask("Change (e.g. 1 or -1)", default=1)
            cart = try_api(shop.update_quantity, pid, change, success_msg="Quantity updated")
            if cart is not None:
                show_cart(cart)

        elif choice == "7":
            pid = ask_product_id("Enter product ID", get_cart_completer())
            if pid is None:
                continue
            cart = try_api(shop.remove_from_cart, pid, success_msg=f"Product {pid} removed from cart")
            if cart is not None:
                show_cart(cart)

        elif choice == "8":
            summary = try_api(shop.checkout)
            if summary:
                console.print(Panel.fit(
                    f"[green]Order placed successfully![/green]\n"
                    f"Total Amount: [bold]₹{summary['total']}[/bold]\n"
                    f"Thank you for shopping with LoopCart!",
                    title="✅ Order Confirmation"
                ))

        elif choice == "9":
            try:
                console.print(shop.client.health())
            except requests.RequestException as e:
                console.print(show_status(f"Error: server unreachable ({e})", False))

        elif choice == "10":
            if shop.current_user and Confirm.ask("Log out?"):
                shop.logout()
                status_message = "Logged out"
            elif not shop.current_user:
                do_login()

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Thank you for shopping with LoopCart! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    configure_logging("WARNING")
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"\n\n[bold red]Unexpected error: {e}[/bold red]")
        sys.exit(1)
