"""
csv2json CLI commands

This module provides the command-line interface for csv2json: converting
CSV files and querying stored batches.
"""

import json
import logging
from pathlib import Path
from typing import Optional

import click
from dotenv import find_dotenv

from csv2json.config import Csv2JsonConfig, configure_logging
from csv2json.config.csv2json_config import LOG_LEVELS
from csv2json.exceptions import (
    ConfigurationError, EndOfInput, FormatError, NotFoundError,
    StorageError, StoreNotConfiguredError
)
from csv2json.processors.record_mapper import MismatchPolicy
from csv2json.services.conversion_service import ConversionService
from csv2json.storage.store_factory import StoreFactory
from csv2json.storage.store_port import StorePort

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_NOT_CONFIGURED = 3
EXIT_NOT_FOUND = 4


class CLIContext:
    """Configuration and lazily created store port shared by commands"""

    def __init__(self, config: Csv2JsonConfig):
        self.config = config
        self._port: Optional[StorePort] = None

    @property
    def port(self) -> StorePort:
        if self._port is None:
            self._port = StoreFactory.create_port(self.config.get_storage_config())
        return self._port

    def service(self, indent: Optional[int] = None, pad: bool = False) -> ConversionService:
        service = ConversionService.from_config(self.config, store=self.port)
        if indent is not None:
            service.indent = indent
        if pad:
            service.mismatch_policy = MismatchPolicy.PAD_TRUNCATE
        return service

    def close(self) -> None:
        if self._port is not None:
            self._port.close()
            self._port = None


def _fail(message: str, code: int = EXIT_FAILURE) -> None:
    click.echo(f"Error: {message}", err=True)
    click.get_current_context().exit(code)


def _dump(data) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2)


@click.group()
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False), help='Path to configuration file')
@click.option('--env-file', type=click.Path(exists=True, dir_okay=False), help='Path to a .env file')
@click.option('--log-level', type=click.Choice(LOG_LEVELS, case_sensitive=False), help='Logging level')
@click.pass_context
def cli(ctx, config_path, env_file, log_level):
    """csv2json command-line interface"""
    try:
        config = Csv2JsonConfig.load(
            config_path=config_path,
            env_file=env_file or find_dotenv(usecwd=True) or None
        )
    except ConfigurationError as e:
        _fail(str(e))
    configure_logging(config, level=log_level)
    ctx.obj = CLIContext(config)
    ctx.call_on_close(ctx.obj.close)


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.option('--name', help='Batch name used when saving (defaults to the file name)')
@click.option('--output', '-o', type=click.Path(dir_okay=False, writable=True), help='Write JSON to this file instead of stdout')
@click.option('--indent', type=click.IntRange(min=0), default=None, help='Pretty-print with this indentation')
@click.option('--pad', is_flag=True, help='Pad short rows and truncate long rows instead of failing')
@click.pass_obj
def convert(obj: CLIContext, file, name, output, indent, pad):
    """Convert a CSV file to JSON (and store it if storage is configured)"""
    try:
        service = obj.service(indent=indent, pad=pad)
    except StorageError as e:
        _fail(str(e))

    try:
        if file == '-':
            logger.info("Processing CSV from stdin")
            result = service.process(click.get_binary_stream('stdin'), name or 'stdin')
        else:
            path = Path(file)
            logger.info(f"Processing file: {path.name} (size: {path.stat().st_size} bytes)")
            result = service.process_file(path, name)
    except (EndOfInput, FormatError) as e:
        logger.error(f"Failed to process CSV file '{file}': {e}")
        _fail(f"Failed to process CSV: {e}")
    except StorageError as e:
        logger.error(f"Failed to save CSV file '{file}': {e}")
        _fail(f"Failed to process CSV: {e}")

    logger.info(
        f"Successfully processed CSV file: {result.name}, converted {result.record_count} records "
        f"to {len(result.content)} bytes of JSON"
    )
    if result.persisted:
        logger.info(f"Saved as batch {result.batch_id}")

    if output:
        Path(output).write_bytes(result.content)
    else:
        stdout = click.get_binary_stream('stdout')
        stdout.write(result.content + b'\n')
        stdout.flush()


@cli.group()
def data():
    """Query stored CSV data"""
    pass


@data.command('list')
@click.pass_obj
def list_data(obj: CLIContext):
    """Print every stored batch"""
    try:
        batches = obj.service().get_all_data()
    except StoreNotConfiguredError as e:
        _fail(str(e), EXIT_NOT_CONFIGURED)
    except StorageError as e:
        logger.error(f"Failed to retrieve data: {e}")
        _fail(f"Failed to retrieve data: {e}")

    logger.info(f"Successfully retrieved {len(batches)} records")
    click.echo(_dump([b.to_dict() for b in batches]))


@data.command('get')
@click.argument('batch_id', type=int)
@click.pass_obj
def get_data(obj: CLIContext, batch_id: int):
    """Print one stored batch"""
    try:
        batch = obj.service().get_data_by_id(batch_id)
    except StoreNotConfiguredError as e:
        _fail(str(e), EXIT_NOT_CONFIGURED)
    except NotFoundError as e:
        _fail(str(e), EXIT_NOT_FOUND)
    except StorageError as e:
        logger.error(f"Failed to retrieve data for ID {batch_id}: {e}")
        _fail(f"Failed to retrieve data: {e}")

    click.echo(_dump(batch.to_dict()))


@cli.command()
@click.pass_obj
def health(obj: CLIContext):
    """Report service health and storage mode"""
    try:
        mode = obj.port.mode
    except StorageError as e:
        _fail(str(e))
    click.echo(json.dumps({'status': 'healthy', 'storage': mode}))


@cli.command()
@click.pass_obj
def init(obj: CLIContext):
    """Create the database schema for the configured store"""
    storage_config = obj.config.get_storage_config()
    if str(storage_config.get('type', 'none')).lower() in ('none', 'disabled', ''):
        _fail("No storage configured (set storage.type)", EXIT_NOT_CONFIGURED)

    try:
        store = StoreFactory.create_store(storage_config)
        try:
            store.initialize()
        finally:
            store.close()
    except (ConfigurationError, StorageError) as e:
        _fail(f"Failed to initialize storage: {e}")

    click.echo(f"Initialized {storage_config['type']} storage")


def main():
    cli()


if __name__ == '__main__':
    main()
