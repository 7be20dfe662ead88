from pathlib import Path

import typer

from markup_toolkit.batching.api import BatchOperation


def operation_callback(ctx: typer.Context, value: str):
    if ctx.resilient_parsing:
        return
    if value not in BatchOperation.__members__.values():
        raise typer.BadParameter(
            message=f"'{value}' is not a valid operation, supported operations are: {', '.join(BatchOperation.__members__.values())}",
            param_hint="--operation, -o",
        )
    return value


def requests_file_callback(ctx: typer.Context, value: Path):
    if ctx.resilient_parsing:
        return
    if not value.is_file():
        raise typer.BadParameter(message=f"no requests file at '{value.as_posix()}'")
    if value.suffix.lower() != ".jsonl":
        raise typer.BadParameter(
            message=f"requests file must be JSONL (one request per line), got '{value.name}'"
        )
    return value


def load_files_callback(ctx: typer.Context, value: list[Path]):
    if ctx.resilient_parsing:
        return
    missing = [path.as_posix() for path in value if not path.is_file()]
    if missing:
        raise typer.BadParameter(
            message=f"file(s) at path: {', '.join(repr(path) for path in missing)} do not exist",
        )
    return value
