"""
Command-line interface for PDF Pagekit.
"""

import logging
import os
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn, TimeRemainingColumn
from rich.table import Table

from pdf_pagekit import __version__
from pdf_pagekit.backends import PyMuPDFEngine
from pdf_pagekit.config import DEFAULT_SETTINGS, DeliverySettings, RenderSettings
from pdf_pagekit.delivery import deliver
from pdf_pagekit.exceptions import DeliveryCancelled, PagekitError
from pdf_pagekit.extractor import extract_pages, generate_output_file_name
from pdf_pagekit.loader import copy_bytes, read_as_bytes, validate_upload
from pdf_pagekit.merger import MergeQueue
from pdf_pagekit.selection import parse_page_spec
from pdf_pagekit.session import DocumentSession
from pdf_pagekit.thumbnails import render_preview
from pdf_pagekit.utils import format_file_size

console = Console()


def _fail(message):
    console.print(f"\n[bold red]✗ Error:[/bold red] {message}")
    sys.exit(1)


def _cancelled():
    console.print("\n[yellow]Download cancelled.[/yellow]\n")
    sys.exit(0)


def _delivery_settings(download_dir):
    if download_dir:
        return DeliverySettings(download_dir=Path(download_dir))
    return DeliverySettings()


def _progress():
    return Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeRemainingColumn(),
        console=console,
    )


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Show debug logging')
@click.pass_context
def cli(ctx, verbose):
    """
    PDF Pagekit - extract pages from a PDF or merge PDFs together.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )
    ctx.ensure_object(dict)
    ctx.obj.setdefault("engine", PyMuPDFEngine())


@cli.command(name="info")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def show_info(ctx, input_pdf):
    """
    Display information about a PDF file.

    Example:

        pdf-pagekit info input.pdf
    """
    engine = ctx.obj["engine"]
    try:
        data = read_as_bytes(input_pdf)
        validate_upload(input_pdf, data)
        document = engine.parse(data)
        try:
            if document.page_count:
                width, height = document.page_size(1)
                first_page = f"{width:.1f} x {height:.1f} pt"
            else:
                first_page = "-"
            table = Table(title=f"PDF Information: {os.path.basename(input_pdf)}")
            table.add_column("Property", style="cyan", no_wrap=True)
            table.add_column("Value", style="green")

            table.add_row("File Size", format_file_size(len(data)))
            table.add_row("Number of Pages", str(document.page_count))
            table.add_row("First Page Size", first_page)
            table.add_row("Encrypted", "Yes" if document.is_encrypted else "No")
        finally:
            document.release()

        console.print()
        console.print(table)
        console.print()
    except PagekitError as e:
        _fail(e.message)


@cli.command(name="thumbnails")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--output-dir', '-o',
    default='./thumbnails',
    help='Output directory for thumbnail images',
    type=click.Path(file_okay=False)
)
@click.option(
    '--prefix', '-p',
    default='page',
    help='Prefix for output filenames',
    type=str
)
@click.pass_context
def thumbnails(ctx, input_pdf, output_dir, prefix):
    """
    Render a JPEG thumbnail of every page.

    Examples:

        pdf-pagekit thumbnails input.pdf

        pdf-pagekit thumbnails input.pdf -o gallery -p thumb
    """
    try:
        with DocumentSession(ctx.obj["engine"]) as session, _progress() as progress:
            task = progress.add_task("Rendering thumbnails", total=None)

            def update_progress(current, total):
                progress.update(task, completed=current, total=total)

            pages = session.load_file(input_pdf, on_progress=update_progress)

        if not pages:
            _fail("PDF has no pages.")

        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)
        padding = max(3, len(str(len(pages))))
        for page in pages:
            (output_path / f"{prefix}_{page.page_number:0{padding}d}.jpg").write_bytes(page.thumbnail)

        console.print(f"\n[bold green]✓ Rendered {len(pages)} thumbnail(s)[/bold green]")
        console.print(f"[dim]Output directory: {os.path.abspath(output_dir)}[/dim]\n")
    except OSError as e:
        _fail(e.strerror or e)
    except PagekitError as e:
        _fail(e.message)


@cli.command(name="preview")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--page', '-p', required=True, type=int, help='Page number (1-indexed)')
@click.option(
    '--output', '-o',
    required=True,
    help='Output JPEG path',
    type=click.Path(dir_okay=False)
)
@click.pass_context
def preview(ctx, input_pdf, page, output):
    """
    Render an enlarged preview of a single page.

    Example:

        pdf-pagekit preview input.pdf -p 3 -o page3.jpg
    """
    engine = ctx.obj["engine"]
    try:
        data = read_as_bytes(input_pdf)
        validate_upload(input_pdf, data)
        document = engine.parse(data)
        try:
            image = render_preview(document, page)
        finally:
            document.release()

        Path(output).write_bytes(image)
        console.print(f"\n[bold green]✓ Preview of page {page} saved:[/bold green] {output}\n")
    except OSError as e:
        _fail(e.strerror or e)
    except PagekitError as e:
        _fail(e.message)


@cli.command(name="extract")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--pages', '-p',
    required=True,
    help="Pages to extract (e.g., '1,3,5,7-10')",
    type=str
)
@click.option(
    '--output', '-o',
    default=None,
    help='Output PDF path (prompted for when omitted)',
    type=click.Path(dir_okay=False)
)
@click.option(
    '--download-dir', '-d',
    default=None,
    help='Directory for automatic downloads',
    type=click.Path(file_okay=False)
)
@click.option(
    '--dpi',
    default=DEFAULT_SETTINGS.export_dpi,
    show_default=True,
    help='Resolution for pages that have to be converted to images',
    type=click.IntRange(min=36, max=1200)
)
@click.pass_context
def extract(ctx, input_pdf, pages, output, download_dir, dpi):
    """
    Extract specific pages into a single new PDF.

    Pages always come out in ascending order. Encrypted PDFs are converted
    page by page into images at the original page size.

    Examples:

        pdf-pagekit extract input.pdf -p '5,2,8' -o selected.pdf

        pdf-pagekit extract input.pdf --pages '1-5,10' --dpi 200
    """
    engine = ctx.obj["engine"]
    settings = RenderSettings(export_dpi=dpi)
    try:
        page_list = parse_page_spec(pages)
        data = read_as_bytes(input_pdf)
        validate_upload(input_pdf, data)

        console.print(f"[dim]Pages to extract: {', '.join(map(str, page_list))}[/dim]")

        document = engine.parse(copy_bytes(data))
        try:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console
            ) as progress:
                task = progress.add_task(f"Extracting {len(page_list)} page(s)...", total=None)
                output_data = extract_pages(data, page_list, document, settings=settings)
                progress.update(task, completed=True)
        finally:
            document.release()

        target = deliver(
            output_data,
            generate_output_file_name(os.path.basename(input_pdf)),
            destination=output,
            settings=_delivery_settings(download_dir),
        )

        console.print(f"\n[bold green]✓ Successfully created:[/bold green] {target}")
        console.print(f"[dim]Output size: {format_file_size(len(output_data))}[/dim]")
        console.print(f"[dim]Pages extracted: {len(page_list)} of {document.page_count}[/dim]\n")
    except DeliveryCancelled:
        _cancelled()
    except PagekitError as e:
        _fail(e.message)


@cli.command(name="merge")
@click.argument('input_pdfs', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--output', '-o',
    default=None,
    help='Output PDF path (prompted for when omitted)',
    type=click.Path(dir_okay=False)
)
@click.option(
    '--download-dir', '-d',
    default=None,
    help='Directory for automatic downloads',
    type=click.Path(file_okay=False)
)
@click.option(
    '--dpi',
    default=DEFAULT_SETTINGS.export_dpi,
    show_default=True,
    help='Resolution for pages that have to be converted to images',
    type=click.IntRange(min=36, max=1200)
)
@click.pass_context
def merge(ctx, input_pdfs, output, download_dir, dpi):
    """
    Merge PDFs in the order given into one file.

    Examples:

        pdf-pagekit merge a.pdf b.pdf c.pdf

        pdf-pagekit merge intro.pdf body.pdf -o book.pdf
    """
    queue = MergeQueue(ctx.obj["engine"], settings=RenderSettings(export_dpi=dpi))
    try:
        queue.add_files(input_pdfs)

        files_table = Table(title="Files to Merge", show_header=True)
        files_table.add_column("#", style="cyan", width=4)
        files_table.add_column("Filename", style="green")
        files_table.add_column("Pages", style="magenta", justify="right")
        for idx, item in enumerate(queue, 1):
            files_table.add_row(str(idx), item.display_name, str(item.page_count))
        console.print(files_table)

        with _progress() as progress:
            task = progress.add_task("Merging PDFs", total=len(queue))

            def update_progress(current, total):
                progress.update(task, completed=current)

            artifact = queue.merge(on_progress=update_progress)

        target = deliver(
            artifact.data,
            artifact.file_name,
            destination=output,
            settings=_delivery_settings(download_dir),
        )

        console.print(f"\n[bold green]✓ Merged {len(queue)} PDF(s):[/bold green] {target}")
        console.print(f"[dim]Total pages: {queue.total_page_count}[/dim]")
        console.print(f"[dim]Output size: {format_file_size(artifact.size)}[/dim]\n")
    except DeliveryCancelled:
        _cancelled()
    except PagekitError as e:
        _fail(e.message)


if __name__ == '__main__':
    cli()
