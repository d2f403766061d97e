# cli.py - interactive catalog shell with autocomplete
import os
import sys
from datetime import datetime
from typing import List, Dict, Any, Optional

import requests
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import IntPrompt, Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from sdk.catalog_client import CatalogClient

console = Console()
c = CatalogClient(base_url=os.getenv("CATALOG_URL", "http://127.0.0.1:3000"))


# Global state for status messages and caching
status_message = "Ready"
product_cache: List[Dict[str, Any]] = []

# Custom prompt style for prompt_toolkit
custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Display helpers
# ---------------------------
def _variant_summary(variants: List[Dict[str, Any]]) -> str:
    if not variants:
        return "[dim]none[/dim]"
    return "\n".join(f"{v.get('color', '?')}/{v.get('size', '?')}: {v.get('stock', 0)}" for v in variants)


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
    table.add_column("ID", style="dim", width=26)
    table.add_column("Name", style="bold", width=20)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Category", width=15)
    table.add_column("Variants (color/size: stock)", width=30)

    for p in products:
        table.add_row(
            p.get("_id", "N/A"),
            p.get("name", "N/A"),
            f"${p.get('price', 0):.2f}",
            p.get("category", "N/A"),
            _variant_summary(p.get("variants", []))
        )
    console.print(table)


def show_result(resp: Dict[str, Any]):
    result = resp.get("result") or {}
    console.print(Panel.fit(
        f"[green]{resp.get('message', 'Done')}[/green]\n"
        f"Matched: [bold]{result.get('matchedCount', '-')}[/bold]  "
        f"Modified: [bold]{result.get('modifiedCount', '-')}[/bold]",
        title="✅ Result"
    ))


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


def _error_text(e: Exception) -> str:
    # Service errors come back as {"error": "..."}
    if isinstance(e, requests.HTTPError) and e.response is not None:
        try:
            return f"HTTP {e.response.status_code}: {e.response.json().get('error', e.response.text)}"
        except ValueError:
            return f"HTTP {e.response.status_code}: {e.response.text}"
    return str(e)


# ---------------------------
# API wrapper with exception handling
# ---------------------------
def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner.
    Returns the decoded result, or None after printing the error.
    """
    global status_message
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)

        if success_msg:
            status_message = success_msg
            console.print(show_status(success_msg, True))
        return result
    except (requests.RequestException, ValueError) as e:
        status_message = f"Error: {_error_text(e)}"
        console.print(show_status(status_message, False))
        return None


# ---------------------------
# Autocompletion helpers
# ---------------------------
def refresh_product_cache():
    global product_cache
    product_cache = try_api(c.list_products) or []


def get_product_completer():
    if not product_cache:
        refresh_product_cache()
    return WordCompleter([p.get("_id", "") for p in product_cache if p.get("_id")], ignore_case=True)


def get_field_completer(field: str):
    if field == "category":
        words = {p.get("category", "") for p in product_cache}
    else:
        words = {v.get(field, "") for p in product_cache for v in p.get("variants", [])}
    return WordCompleter(sorted(w for w in words if w), ignore_case=True)


# ---------------------------
# Layout and Header
# ---------------------------
def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🛍️ Catalog SDK",
        "[bold blue]Product Catalog CLI with Autocomplete[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_float(message: str, default: float = 10.0) -> float:
    while True:
        raw = Prompt.ask(message, default=str(default))
        try:
            return float(raw)
        except ValueError:
            console.print("[red]Please enter a valid number.[/red]")


def ask_variants() -> List[Dict[str, Any]]:
    variants = []
    while Confirm.ask("Add a variant?", default=not variants):
        color = prompt_with_autocomplete("🎨 Color", completer=get_field_completer("color"))
        size = prompt_with_autocomplete("📏 Size", completer=get_field_completer("size"))
        stock = IntPrompt.ask("📦 Stock", default=0)
        variants.append({"color": color, "size": size, "stock": stock})
    return variants


def ask_variant_key():
    pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer())
    color = prompt_with_autocomplete("🎨 Color", completer=get_field_completer("color"))
    size = prompt_with_autocomplete("📏 Size", completer=get_field_completer("size"))
    return pid, color, size


# ---------------------------
# Main menu
# ---------------------------
def menu():
    global status_message

    console.clear()
    console.print(create_header())

    # Preload products for autocomplete
    refresh_product_cache()

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "📦 List products", "5", "➕ Create product"),
            ("2", "🏷️ List by category", "6", "✏️ Update variant stock"),
            ("3", "🎨 List by color", "7", "➖ Delete variant"),
            ("4", "📏 List by size", "8", "🗑️ Delete product"),
            ("", "", "q", "👋 Quit")
        ]

        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 9)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            products = try_api(c.list_products, success_msg="Products loaded successfully")
            if products is not None:
                show_products(products)

        elif choice == "2":
            category = prompt_with_autocomplete("🏷️ Category", completer=get_field_completer("category"))
            products = try_api(c.list_by_category, category, success_msg=f"Category '{category}' loaded")
            if products is not None:
                show_products(products, title=f"🏷️ {category}")

        elif choice == "3":
            color = prompt_with_autocomplete("🎨 Color", completer=get_field_completer("color"))
            products = try_api(c.list_by_color, color, success_msg=f"Products in '{color}' loaded")
            if products is not None:
                show_products(products, title=f"🎨 {color}")

        elif choice == "4":
            size = prompt_with_autocomplete("📏 Size", completer=get_field_completer("size"))
            products = try_api(c.list_by_size, size, success_msg=f"Products in size '{size}' loaded")
            if products is not None:
                show_products(products, title=f"📏 {size}")

        elif choice == "5":
            name = prompt_with_autocomplete("Enter product name")
            price = ask_float("💰 Price", default=10.0)
            category = prompt_with_autocomplete("🏷️ Category", completer=get_field_completer("category"))
            variants = ask_variants()
            resp = try_api(
                c.create_product, name, price, category, variants,
                success_msg=f"Product '{name}' created successfully"
            )
            if resp:
                show_products([resp], title="➕ Created")
                refresh_product_cache()

        elif choice == "6":
            pid, color, size = ask_variant_key()
            stock = IntPrompt.ask("📦 New stock", default=0)
            resp = try_api(c.update_variant_stock, pid, color, size, stock,
                           success_msg=f"Stock of {color}/{size} set to {stock}")
            if resp:
                show_result(resp)
                refresh_product_cache()

        elif choice == "7":
            pid, color, size = ask_variant_key()
            if Confirm.ask(f"[red]Remove every {color}/{size} variant from {pid}?[/red]"):
                resp = try_api(c.delete_variant, pid, color, size, success_msg=f"Variant {color}/{size} deleted")
                if resp:
                    show_result(resp)
                    refresh_product_cache()

        elif choice == "8":
            pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer())
            if Confirm.ask(f"[red]Delete product {pid}?[/red]"):
                resp = try_api(c.delete_product, pid, success_msg=f"Product {pid} deleted")
                if resp:
                    show_products([resp["product"]], title="🗑️ Deleted")
                    refresh_product_cache()

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Goodbye! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
