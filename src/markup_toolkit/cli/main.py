import asyncio
import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as package_version
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich import print
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from markup_toolkit.batching.api import BatchOperation, resolve_batch_options, style_batch_operation
from markup_toolkit.batching.models import BatchOptions, BatchProgress
from markup_toolkit.cli.callbacks import (
    load_files_callback,
    operation_callback,
    requests_file_callback,
)
from markup_toolkit.cli.completions import (
    complete_dialect,
    complete_operation,
    complete_style_guide,
    complete_tone,
)
from markup_toolkit.config import Config, Environment
from markup_toolkit.exceptions import BatchCancelledError, BatchValidationError
from markup_toolkit.status import BatchItemStatus
from markup_toolkit.style.models import Dialect, StyleAnalysisRequest, Tone
from markup_toolkit.utils.files import read_document, read_jsonl_file
from markup_toolkit.utils.logging import setup_logging

app = typer.Typer(no_args_is_help=True)

PROGRESS_REFRESH_SECONDS = 0.2

StyleGuideOption = Annotated[
    str,
    typer.Option(
        "-s",
        "--style-guide",
        help="Style guide id or name, e.g. ap, chicago, microsoft",
        autocompletion=complete_style_guide,
    ),
]
DialectOption = Annotated[
    str,
    typer.Option(help="Dialect of the documents", autocompletion=complete_dialect),
]
ToneOption = Annotated[
    str,
    typer.Option(help="Target tone of the documents", autocompletion=complete_tone),
]
MaxConcurrentOption = Annotated[
    int,
    typer.Option(help="Maximum number of documents processed at once", rich_help_panel="Batch"),
]
RetryAttemptsOption = Annotated[
    int,
    typer.Option(help="Retries per document after the first attempt", rich_help_panel="Batch"),
]
RetryDelayOption = Annotated[
    float,
    typer.Option(help="Base retry delay in milliseconds, doubled on each retry", rich_help_panel="Batch"),
]
ApiKeyOption = Annotated[
    str | None,
    typer.Option(
        help="API key, defaults to the MARKUP_API_KEY environment variable",
        rich_help_panel="Connection",
    ),
]
PlatformUrlOption = Annotated[
    str | None,
    typer.Option(
        help="Platform URL, defaults to the MARKUP_PLATFORM_URL environment variable",
        rich_help_panel="Connection",
    ),
]
EnvironmentOption = Annotated[
    Environment | None,
    typer.Option(help="Named platform environment", rich_help_panel="Connection"),
]
VerboseOption = Annotated[bool, typer.Option("-v", "--verbose", help="Enable debug logging")]


def build_config(
    api_key: str | None,
    platform_url: str | None,
    environment: Environment | None,
) -> Config:
    try:
        return Config.from_env(
            api_key=api_key,
            platform_url=platform_url,
            environment=environment,
        )
    except (ValueError, ValidationError) as error:
        typer.echo(str(error), err=True)
        raise typer.Exit(1)


def build_options(max_concurrent: int, retry_attempts: int, retry_delay: float) -> BatchOptions:
    try:
        return resolve_batch_options(
            {
                "max_concurrent": max_concurrent,
                "retry_attempts": retry_attempts,
                "retry_delay": retry_delay,
            }
        )
    except BatchValidationError as error:
        raise typer.BadParameter(message=str(error))


async def run_batch(
    requests: list[StyleAnalysisRequest],
    config: Config,
    options: BatchOptions,
    operation: BatchOperation,
) -> BatchProgress:
    handle = style_batch_operation(requests, config, options, operation)
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        transient=True,
    ) as progress:
        task_id = progress.add_task(
            description=f"Running {operation.value} batch...", total=handle.progress.total
        )
        while not handle.done():
            progress.update(
                task_id,
                completed=handle.progress.completed + handle.progress.failed,
            )
            await asyncio.wait({handle.future}, timeout=PROGRESS_REFRESH_SECONDS)
    return await handle


def print_results(result: BatchProgress, labels: list[str], operation: BatchOperation) -> None:
    table = Table(
        "#",
        "Document",
        "Status",
        "Score",
        "Issues",
        "Error",
        title=f"Style {operation.value} results",
    )
    for record in result.results:
        if record.status == BatchItemStatus.COMPLETED:
            score = getattr(record.result, "quality_score", None)
            issues = getattr(record.result, "issues", [])
            table.add_row(
                str(record.index + 1),
                labels[record.index],
                f"[green]{record.status.value}[/green]",
                "" if score is None else str(score),
                str(len(issues)),
                "",
            )
        else:
            table.add_row(
                str(record.index + 1),
                labels[record.index],
                f"[red]{record.status.value}[/red]",
                "",
                "",
                record.error.message if record.error else "",
            )
    console = Console()
    console.print(table)
    print(
        f"[green]{result.completed}[/green] completed, [red]{result.failed}[/red] failed "
        f"out of {result.total}"
    )


def execute(
    requests: list[StyleAnalysisRequest],
    labels: list[str],
    operation: BatchOperation,
    config: Config,
    options: BatchOptions,
) -> None:
    try:
        result = asyncio.run(run_batch(requests, config, options, operation))
    except BatchValidationError as error:
        raise typer.BadParameter(message=str(error))
    except BatchCancelledError as error:
        typer.echo(str(error), err=True)
        raise typer.Exit(1)
    print_results(result, labels, operation)
    if result.failed:
        raise typer.Exit(1)


def run_documents(
    operation: BatchOperation,
    documents: list[Path],
    style_guide: str,
    dialect: str,
    tone: str,
    max_concurrent: int,
    retry_attempts: int,
    retry_delay: float,
    api_key: str | None,
    platform_url: str | None,
    environment: Environment | None,
    verbose: bool,
) -> None:
    setup_logging(level=logging.DEBUG if verbose else logging.WARNING)
    config = build_config(api_key, platform_url, environment)
    options = build_options(max_concurrent, retry_attempts, retry_delay)
    requests = [
        StyleAnalysisRequest(
            content=read_document(path),
            style_guide=style_guide,
            dialect=dialect,
            tone=tone,
            document_name=path.name,
        )
        for path in documents
    ]
    execute(requests, [path.as_posix() for path in documents], operation, config, options)


DocumentsArgument = Annotated[
    list[Path],
    typer.Argument(help="Documents to analyse", callback=load_files_callback),
]


@app.command(name="check")
def check(
    documents: DocumentsArgument,
    style_guide: StyleGuideOption = "ap",
    dialect: DialectOption = Dialect.american_english.value,
    tone: ToneOption = Tone.formal.value,
    max_concurrent: MaxConcurrentOption = 100,
    retry_attempts: RetryAttemptsOption = 2,
    retry_delay: RetryDelayOption = 1000,
    api_key: ApiKeyOption = None,
    platform_url: PlatformUrlOption = None,
    environment: EnvironmentOption = None,
    verbose: VerboseOption = False,
):
    """Run a style check on each document"""
    run_documents(
        BatchOperation.check,
        documents,
        style_guide,
        dialect,
        tone,
        max_concurrent,
        retry_attempts,
        retry_delay,
        api_key,
        platform_url,
        environment,
        verbose,
    )


@app.command(name="suggest")
def suggest(
    documents: DocumentsArgument,
    style_guide: StyleGuideOption = "ap",
    dialect: DialectOption = Dialect.american_english.value,
    tone: ToneOption = Tone.formal.value,
    max_concurrent: MaxConcurrentOption = 100,
    retry_attempts: RetryAttemptsOption = 2,
    retry_delay: RetryDelayOption = 1000,
    api_key: ApiKeyOption = None,
    platform_url: PlatformUrlOption = None,
    environment: EnvironmentOption = None,
    verbose: VerboseOption = False,
):
    """Get style suggestions for each document"""
    run_documents(
        BatchOperation.suggestions,
        documents,
        style_guide,
        dialect,
        tone,
        max_concurrent,
        retry_attempts,
        retry_delay,
        api_key,
        platform_url,
        environment,
        verbose,
    )


@app.command(name="rewrite")
def rewrite(
    documents: DocumentsArgument,
    style_guide: StyleGuideOption = "ap",
    dialect: DialectOption = Dialect.american_english.value,
    tone: ToneOption = Tone.formal.value,
    max_concurrent: MaxConcurrentOption = 100,
    retry_attempts: RetryAttemptsOption = 2,
    retry_delay: RetryDelayOption = 1000,
    api_key: ApiKeyOption = None,
    platform_url: PlatformUrlOption = None,
    environment: EnvironmentOption = None,
    verbose: VerboseOption = False,
):
    """Rewrite each document"""
    run_documents(
        BatchOperation.rewrite,
        documents,
        style_guide,
        dialect,
        tone,
        max_concurrent,
        retry_attempts,
        retry_delay,
        api_key,
        platform_url,
        environment,
        verbose,
    )


@app.command(name="batch")
def batch(
    requests_file: Annotated[
        Path,
        typer.Argument(
            help="JSONL file with one request per line (content, style_guide, dialect, tone, document_name)",
            callback=requests_file_callback,
        ),
    ],
    operation: Annotated[
        str,
        typer.Option(
            "-o",
            "--operation",
            help="The analysis to run: check, suggestions or rewrite",
            callback=operation_callback,
            autocompletion=complete_operation,
        ),
    ] = BatchOperation.check.value,
    max_concurrent: MaxConcurrentOption = 100,
    retry_attempts: RetryAttemptsOption = 2,
    retry_delay: RetryDelayOption = 1000,
    api_key: ApiKeyOption = None,
    platform_url: PlatformUrlOption = None,
    environment: EnvironmentOption = None,
    verbose: VerboseOption = False,
):
    """Run a batch of requests read from a JSONL file"""
    setup_logging(level=logging.DEBUG if verbose else logging.WARNING)
    try:
        requests = [
            StyleAnalysisRequest.model_validate(line) for line in read_jsonl_file(requests_file)
        ]
    except (ValueError, ValidationError) as error:
        raise typer.BadParameter(
            message=f"invalid requests file: {error}", param_hint="REQUESTS_FILE"
        )
    config = build_config(api_key, platform_url, environment)
    options = build_options(max_concurrent, retry_attempts, retry_delay)
    labels = [
        request.document_name or f"{requests_file.name}:{index + 1}"
        for index, request in enumerate(requests)
    ]
    execute(requests, labels, BatchOperation(operation), config, options)


@app.command()
def version():
    """Get the version of the package"""
    try:
        typer.echo(package_version("markup-toolkit"))
    except PackageNotFoundError:
        typer.echo("unknown")
    raise typer.Exit()
