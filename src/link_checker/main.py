"""CLI entry point and main pipeline."""

import asyncio
import logging
from pathlib import Path
from typing import Iterable, Sequence

import click

from .config import Config
from .errors import ExtractionError, LinkCheckError, ResultChannelClosed
from .extraction.matcher import DEFAULT_MATCHERS, FileMatcher, match_category
from .extraction.scanner import DirectoryScanner
from .reporting.aggregator import ResultAggregator, RunSummary
from .reporting.log import configure_logging
from .verification.http import HttpProber, make_session
from .verification.pool import LinkVerifier, ResultChannel, VerificationPool

logger = logging.getLogger(__name__)


class LinkCheckPipeline:
    """Main pipeline: discover links, verify them, report the results."""

    def __init__(
        self, config: Config, matchers: Sequence[FileMatcher] = DEFAULT_MATCHERS
    ):
        self.config = config
        self.matchers = tuple(matchers)
        self.scanner = DirectoryScanner(config.root, config.max_depth)

    async def run(self, paths: Iterable[Path] | None = None) -> RunSummary:
        """Run the full pipeline over ``paths`` or the configured root."""
        if paths is None:
            paths = self.scanner.scan()

        channel = ResultChannel()
        aggregator = ResultAggregator(sort=self.config.sort)

        async with make_session(
            self.config.timeout_seconds, self.config.concurrency
        ) as session:
            verifier = LinkVerifier(HttpProber(session, self.config.user_agent))
            pool = VerificationPool(verifier, channel, self.config.concurrency)
            consumer = asyncio.create_task(self._consume(aggregator, channel))

            try:
                await self._discover(paths, pool, channel)
                await pool.join()
            except BaseException:
                if not consumer.done():
                    consumer.cancel()
                elif not consumer.cancelled() and consumer.exception() is not None:
                    logger.error(f"Result consumer failed: {consumer.exception()!r}")
                raise

            return await consumer

    async def _discover(
        self, paths: Iterable[Path], pool: VerificationPool, channel: ResultChannel
    ) -> None:
        """Extract links file by file and hand each one to the pool."""
        for path in paths:
            if channel.closed:
                raise ResultChannelClosed("result consumer exited during discovery")

            matcher = match_category(self.matchers, path)
            if matcher is None:
                continue

            logger.debug(f"Searching {path} ({matcher.name})")
            try:
                for link in matcher.iter_links(path):
                    pool.submit(link)
            except ExtractionError as e:
                logger.error(str(e))

            # Let verification of this file's links overlap with the next scan.
            await asyncio.sleep(0)

        logger.debug(f"Discovered {pool.submitted} links")

    async def _consume(
        self, aggregator: ResultAggregator, channel: ResultChannel
    ) -> RunSummary:
        try:
            return await aggregator.consume(channel)
        except BaseException:
            channel.close()
            raise


def build_config(
    config_path: str | None,
    root: Path | None,
    verbose: int,
    no_color: bool,
    depth: int | None,
    concurrency: int | None,
    timeout: float | None,
    sort: bool,
) -> Config:
    """Combine the config file, environment and command-line flags."""
    cfg = Config.from_yaml(config_path) if config_path else Config()
    cfg = cfg.with_env()

    if root is not None:
        cfg.root = root
    if verbose:
        cfg.verbosity = verbose
    if no_color:
        cfg.color = False
    if depth is not None:
        cfg.max_depth = depth
    if concurrency is not None:
        cfg.concurrency = concurrency
    if timeout is not None:
        cfg.timeout_seconds = timeout
    if sort:
        cfg.sort = True

    return cfg.validate()


@click.command()
@click.argument(
    "root", required=False, type=click.Path(exists=True, path_type=Path)
)
@click.option("--config", "-c", default=None, help="Config file path (YAML)")
@click.option("--verbose", "-v", count=True, help="Verbose mode (-v, -vv, -vvv)")
@click.option("--no-color", is_flag=True, help="Don't log in color")
@click.option(
    "--depth", "-d", type=click.IntRange(min=0), help="Maximum directory depth to recurse"
)
@click.option(
    "--concurrency", "-j", type=click.IntRange(min=1), help="Maximum links verified at once"
)
@click.option(
    "--timeout",
    "-t",
    type=click.FloatRange(min=0, min_open=True),
    help="Network timeout in seconds",
)
@click.option("--sort", is_flag=True, help="Report links in file and line order")
@click.pass_context
def cli(
    ctx: click.Context,
    root: Path | None,
    config: str | None,
    verbose: int,
    no_color: bool,
    depth: int | None,
    concurrency: int | None,
    timeout: float | None,
    sort: bool,
) -> None:
    """Check the links in your project's documentation."""
    try:
        cfg = build_config(
            config, root, verbose, no_color, depth, concurrency, timeout, sort
        )
    except (OSError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    configure_logging(cfg.verbosity, cfg.color)
    logger.debug(f"{cfg}")

    pipeline = LinkCheckPipeline(cfg)
    try:
        summary = asyncio.run(pipeline.run())
    except LinkCheckError as e:
        logger.error(f"Aborting: {e}")
        ctx.exit(1)

    ctx.exit(summary.exit_code)


if __name__ == "__main__":
    cli()
