# cli.py
import argparse
import logging
import sys
from datetime import datetime
from typing import List, Dict, Any, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import IntPrompt, Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from invclient.client import DEFAULT_BASE_URL, InventoryClient
from invclient.session import ActionFailed, InventoryView
from invclient import viewstate as vs

console = Console()

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
def show_products(view: InventoryView):
    groups = view.groups
    if not groups:
        console.print(Panel('No products found. Choose "Add new product" to start!', style="blue"))
        return

    for category, products in groups.items():
        table = Table(
            title=category.upper(),
            box=box.ROUNDED,
            header_style="bold white on grey23",
            title_style="bold",
            show_lines=False,
        )
        table.add_column("#", style="dim", justify="right", width=4)
        table.add_column("Name", style="bold", width=28)
        table.add_column("Price", justify="right", width=12)
        table.add_column("Qty", justify="right", width=8)
        table.add_column("ID", style="dim", width=12)

        for p in products:
            qty_style = "bold white on red" if vs.is_low_stock(p) else "white on grey37"
            table.add_row(
                str(_row_number(view, p)),
                p.get("name", "N/A"),
                f"[green]₹{p.get('price', 0)}[/green]",
                f"[{qty_style}] {p.get('quantity', 0)} [/{qty_style}]",
                p.get("id", "N/A")[:12],
            )
        console.print(table)


def _displayed(view: InventoryView) -> List[Dict[str, Any]]:
    # Products in the order the grouped tables show them
    return [p for products in view.groups.values() for p in products]


def _row_number(view: InventoryView, product: Dict[str, Any]) -> int:
    return _displayed(view).index(product) + 1


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


def alert(message: str):
    # Blocking: the user has to acknowledge before the menu comes back
    console.print(show_status(message, False))
    Prompt.ask("Press enter to continue", default="", show_default=False)


def with_spinner(fn, *args, **kwargs):
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=True,
    ) as progress:
        progress.add_task(description="Processing...", total=None)
        return fn(*args, **kwargs)


def create_header(base_url: str):
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "📦 Shop Inventory",
        f"[bold blue]{base_url}[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_float(message: str, default: float = 0.0) -> float:
    while True:
        raw = Prompt.ask(message, default=str(default))
        try:
            value = float(raw)
        except ValueError:
            console.print("[red]Please enter a valid number.[/red]")
            continue
        if value < 0:
            console.print("[red]Price cannot be negative.[/red]")
            continue
        return value


def pick_product(view: InventoryView) -> Optional[Dict[str, Any]]:
    visible = _displayed(view)
    if not visible:
        console.print("[italic yellow]No products to choose from[/italic yellow]")
        return None
    number = IntPrompt.ask("Product #", default=1)
    if number < 1 or number > len(visible):
        console.print(f"[red]Choose a number between 1 and {len(visible)}[/red]")
        return None
    return visible[number - 1]


# ---------------------------
# Form (add / edit)
# ---------------------------
def fill_form(view: InventoryView):
    draft = view.state.draft
    name = ""
    while not name:
        name = prompt_with_autocomplete("Name", default=draft.name).strip()
    price = ask_float("Price (₹)", default=draft.price)
    category = prompt_with_autocomplete(
        "Category",
        completer=WordCompleter([c for c in view.categories if c != vs.GENERAL], ignore_case=True),
        default=draft.category,
    ).strip()
    view.edit_draft(name=name, price=price, category=category)

    # Quantity stepper: "+" / "-" adjust, a number sets, enter accepts
    while True:
        raw = Prompt.ask(
            f"Quantity [bold]{view.state.draft.quantity}[/bold]  ([cyan]+[/cyan]/[cyan]-[/cyan]/number, enter to accept)",
            default="",
            show_default=False,
        ).strip()
        if raw == "":
            break
        if raw == "+":
            view.increase_qty()
        elif raw == "-":
            view.decrease_qty()
        elif raw.isdigit():
            view.edit_draft(quantity=int(raw))
        else:
            console.print("[red]Enter +, - or a whole number.[/red]")


def run_form(view: InventoryView):
    title = "Add New Product" if isinstance(view.state, vs.Creating) else "Update Product"
    console.print(Panel.fit(f"[bold]{title}[/bold]", border_style="blue"))
    fill_form(view)

    if not Confirm.ask("Save product?", default=True):
        view.cancel()
        console.print(show_status("Cancelled", True))
        return
    try:
        product = with_spinner(view.save)
    except ActionFailed as e:
        alert(str(e))
        # stay in the form state; the user can retry or cancel
        if Confirm.ask("Try again?", default=False):
            run_form(view)
        else:
            view.cancel()
        return
    console.print(show_status(f"Saved '{product.get('name')}'", True))


# ---------------------------
# Main menu
# ---------------------------
def menu(view: InventoryView, base_url: str):
    console.clear()
    console.print(create_header(base_url))
    with_spinner(view.refresh)

    while True:
        show_products(view)

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "🔄 Refresh list", "4", "🗑️ Delete product"),
            ("2", "➕ Add new product", "5", f"🏷️ Filter category ({view.filter})"),
            ("3", "✏️ Edit product", "q", "👋 Quit"),
        ]
        for row in options:
            menu_table.add_row(*row)
        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 6)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            with_spinner(view.refresh)

        elif choice == "2":
            view.start_add()
            run_form(view)

        elif choice == "3":
            product = pick_product(view)
            if product is not None:
                try:
                    view.start_edit(product)
                except vs.MissingIdentifier as e:
                    alert(str(e))
                    continue
                run_form(view)

        elif choice == "4":
            product = pick_product(view)
            if product is not None and Confirm.ask(f"Delete '{product.get('name')}'?"):
                try:
                    with_spinner(view.delete, product["id"])
                except ActionFailed as e:
                    alert(str(e))
                else:
                    console.print(show_status("Product Deleted Successfully!", True))

        elif choice == "5":
            options = [vs.ALL] + view.categories
            category = prompt_with_autocomplete(
                "Category (All to show everything)",
                completer=WordCompleter(options, ignore_case=True),
                default=view.filter,
            ).strip()
            view.set_filter(category)

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Goodbye! 👋[/bold green]", title="Shop Inventory"))
                return

        console.print()
        console.rule(style="dim")


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Shop inventory terminal client")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL, help="Inventory API base URL")
    parser.add_argument("--merge-writes", action="store_true",
                        help="Merge saved records locally instead of re-fetching the list")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    view = InventoryView(InventoryClient(base_url=args.base_url), merge_writes=args.merge_writes)
    try:
        menu(view, args.base_url)
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
