import asyncio
import pathlib
import typing

import typer

from bucket_utils import log, storage

main = typer.Typer(
    help='Manage buckets and objects in an S3-compatible object store.',
    no_args_is_help=True,
)


@main.callback()
def configure(
    *,
    debug: typing.Annotated[
        bool, typer.Option(help='Enable debug logging')
    ] = False,
) -> None:
    """Configure logging before any command runs."""
    log.configure_logging(log.get_log_config(debug))


def _finish(ok: bool, message: str) -> None:
    if not ok:
        typer.echo(f'✗ {message}', err=True)
        raise typer.Exit(code=1)
    typer.echo(f'✓ {message}')


@main.command()
def buckets() -> None:
    """List all buckets"""
    for bucket in asyncio.run(storage.list_buckets()):
        created = (
            bucket.creation_date.isoformat() if bucket.creation_date else '-'
        )
        typer.echo(f'{created}  {bucket.name}')


@main.command()
def exists(bucket: str) -> None:
    """Check whether a bucket exists"""
    found = asyncio.run(storage.bucket_exists(bucket))
    _finish(found, f'Bucket {bucket} {"exists" if found else "not found"}')


@main.command()
def create(bucket: str) -> None:
    """Create a bucket with a public policy"""
    _finish(
        asyncio.run(storage.create_bucket(bucket)),
        f'Create bucket {bucket}',
    )


@main.command()
def remove(bucket: str) -> None:
    """Remove an empty bucket"""
    _finish(
        asyncio.run(storage.remove_bucket(bucket)),
        f'Remove bucket {bucket}',
    )


@main.command('ls')
def list_objects(
    bucket: str,
    folder: typing.Annotated[
        str | None, typer.Option(help='Only list objects below FOLDER/')
    ] = None,
    recursive: typing.Annotated[
        bool, typer.Option('--recursive', '-r', help='Include nested folders')
    ] = False,
) -> None:
    """List the objects in a bucket"""
    names = asyncio.run(storage.list_object_names(bucket, folder, recursive))
    if names is None:
        _finish(False, f'Unable to list bucket {bucket}')
        return
    for name in names:
        typer.echo(name)


@main.command()
def put(
    bucket: str,
    path: typing.Annotated[
        pathlib.Path, typer.Argument(exists=True, dir_okay=False)
    ],
    key: typing.Annotated[
        str | None, typer.Option(help='Object name (default: file name)')
    ] = None,
    content_type: typing.Annotated[
        str | None, typer.Option(help='MIME type (default: detected)')
    ] = None,
) -> None:
    """Upload a local file"""
    key = key or path.name
    _finish(
        asyncio.run(storage.upload_file(bucket, key, path, content_type)),
        f'Upload {path} to {bucket}/{key}',
    )


@main.command()
def url(
    bucket: str,
    key: str,
    expires: typing.Annotated[
        int | None,
        typer.Option(help='Lifetime in seconds (default: 7 days)'),
    ] = None,
) -> None:
    """Print a presigned download URL"""
    presigned = asyncio.run(storage.presigned_url(bucket, key, expires))
    if not presigned:
        _finish(False, f'Unable to sign {bucket}/{key}')
    typer.echo(presigned)


@main.command()
def rm(
    bucket: str,
    keys: typing.Annotated[list[str], typer.Argument()],
) -> None:
    """Delete one or more objects"""
    if len(keys) == 1:
        ok = asyncio.run(storage.remove_object(bucket, keys[0]))
    else:
        ok = asyncio.run(storage.remove_objects(bucket, keys))
    _finish(ok, f'Remove {len(keys)} object(s) from {bucket}')
