"""Generation engine - drives the per-token pipeline over the whole collection."""

import logging
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed

from ..clients.ffmpeg import FfmpegClient
from ..config import GenerationSettings
from ..errors import ConfigError, GenerationError, TokenError
from ..models.config import Configuration, validate_assets
from ..models.token import Token
from ..services.assembler import MediaAssembler
from ..services.compositor import Compositor
from ..services.metadata import MetadataSynthesizer
from ..services.output import OutputWriter
from ..services.sampler import WeightedSampler, token_rng
from ..utils import format_elapsed
from .registry import UniquenessRegistry
from .report import GenerationReport, TokenStatus

logger = logging.getLogger(__name__)


def new_seed() -> str:
    """Seed from the clock - different each run, but logged so a run can be reproduced."""
    return str(int(time.time() * 1000) % (2**31))


class GenerationEngine:
    """Config-driven collection generator.

    Sampling happens up front in id order, each token drawing from its own
    stream seeded with "{seed}:{id}", so a seed reproduces the same
    collection whatever the worker count. Compositing, encoding and writing
    then run on a thread pool, one token per task.
    """

    def __init__(
        self,
        config: Configuration,
        settings: GenerationSettings,
        client: FfmpegClient | None = None,
    ):
        self.config = config
        self.settings = settings
        self.seed = settings.seed if settings.seed is not None else new_seed()
        self.client = client or FfmpegClient(
            ffmpeg=settings.ffmpeg,
            ffprobe=settings.ffprobe,
            timeout=settings.encoder_timeout,
        )
        self.writer = OutputWriter(
            settings.output_path,
            settings.media_path,
            settings.metadata_path,
        )
        self.sampler = WeightedSampler()
        self.registry = UniquenessRegistry()
        self.compositor = Compositor(settings.source, config.canvas_size)
        self.assembler = MediaAssembler(
            writer=self.writer,
            client=self.client,
            source=settings.source,
            image_format=settings.image_format,
            image_extension=settings.image_extension,
            encoder_workers=settings.encoder_workers,
            retries=settings.encoder_retries,
            background=config.background_color,
        )
        self.synthesizer = MetadataSynthesizer(config, media_dir=settings.media)
        self._stop = threading.Event()
        self._combinations: list[tuple[str, ...]] | None = None

    def cancel(self):
        """Stop between tokens; in-flight tokens finish, the rest are skipped."""
        self._stop.set()

    def generate(self) -> GenerationReport:
        """Generate the whole collection."""
        logger.info(f"starting nifty generation with seed {self.seed}...")
        started = time.monotonic()

        # 1. Fail fast on configuration problems before anything is written
        self._prepare()

        # 2. Pick every token's attributes
        tokens = self.plan()

        # 3. Build media and metadata in parallel
        report = GenerationReport(seed=self.seed)
        with ThreadPoolExecutor(max_workers=self.settings.workers) as executor:
            futures = {executor.submit(self._run_token, token): token.id for token in tokens}
            try:
                for future in as_completed(futures):
                    token_id = futures[future]
                    try:
                        status = future.result()
                    except TokenError as e:
                        logger.error(f"failed to generate nifty {e}")
                        report.record(token_id, TokenStatus.FAILED, e.cause)
                        if self.settings.fail_fast:
                            self.cancel()
                        continue
                    report.record(token_id, status)
            except BaseException:
                # Interrupts and unexpected errors: let running tokens finish, skip the rest
                self.cancel()
                raise

        report.finish(time.monotonic() - started)
        stats = report.get_stats()
        logger.info(
            f"generation completed in {format_elapsed(report.elapsed)}: "
            f"{stats['generated']} generated, {stats['failed']} failed, {stats['skipped']} skipped"
        )

        if report.failures and self.settings.fail_fast:
            raise GenerationError(report)
        return report

    def _prepare(self):
        config = self.config
        validate_assets(config, self.settings.source)
        if config.has_audio():
            self.client.check_available()
        if config.unique:
            combinations = config.combinations()
            if combinations < config.supply:
                raise ConfigError(
                    f"only {combinations} unique combinations available for a supply of {config.supply}",
                    field="supply",
                )
        self.writer.init(clean=self.settings.clean)

    def plan(self) -> list[Token]:
        """Sample every token in id order.

        With uniqueness on, a colliding draw is redrawn from the token's own
        stream up to unique_attempts times, then picked from the combinations
        not used yet, so any space of at least supply combinations succeeds.
        """
        config = self.config
        tokens = []
        for token_id in config.token_ids:
            rng = token_rng(self.seed, token_id)
            token = self.sampler.sample_token(token_id, config.attributes, rng)

            if config.unique:
                attempts = 1
                while not self.registry.add(token.fingerprint):
                    if attempts >= self.settings.unique_attempts:
                        token = self._pick_unused(token_id, rng)
                        break
                    token = self.sampler.sample_token(token_id, config.attributes, rng)
                    attempts += 1

            tokens.append(token)

        logger.info(
            f"selected attributes for {len(tokens)} tokens from "
            f"{config.combinations()} possible combinations"
        )
        return tokens

    def _pick_unused(self, token_id: int, rng: random.Random) -> Token:
        """Draw from the combinations not used yet, once redraws keep colliding."""
        attributes = self.config.attributes
        if self._combinations is None:
            logger.debug(f"enumerating {self.config.combinations()} combinations")
            self._combinations = list(self.sampler.combinations(attributes))

        unused = [names for names in self._combinations if names not in self.registry]
        if not unused:
            raise ConfigError(
                f"no unused combination left for token #{token_id} "
                f"({len(self._combinations)} combinations in total)",
                field="supply",
            )

        names = self.sampler.choose_combination(unused, attributes, rng)
        self.registry.add(names)
        logger.debug(f"token #{token_id}: picked from {len(unused)} unused combinations")
        return self.sampler.token_from_names(token_id, attributes, names)

    def _run_token(self, token: Token) -> TokenStatus:
        """Composite -> assemble -> synthesize -> write. Metadata is written last."""
        if self._stop.is_set():
            return TokenStatus.SKIPPED

        logger.info(f"generating nifty #{token.id}")
        try:
            image = self.compositor.composite(token)
            artifact = self.assembler.assemble(token, image)
            document = self.synthesizer.synthesize(token, artifact)
            self.writer.write_metadata(token.id, document)
        except Exception as e:
            self.writer.discard(token.id)
            raise TokenError(token.id, e)
        return TokenStatus.GENERATED
