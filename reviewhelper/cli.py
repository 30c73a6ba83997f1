"""Command line entry point: open the review page and keep the helper running."""

from __future__ import annotations

import argparse

from reviewhelper.config.loader import ConfigLoader
from reviewhelper.core.browser import BrowserSession
from reviewhelper.core.engine import ReviewHelper
from reviewhelper.logging.artifacts import ArtifactManager
from reviewhelper.logging.audit import SessionAuditLogger
from reviewhelper.logging.console import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="review-helper", description=__doc__)
    parser.add_argument("--config", default="config/review_helper.json", help="Path to the helper config JSON.")
    parser.add_argument("--url", default=None, help="Override environment.base_url.")
    parser.add_argument("--duration", type=float, default=None, help="Stop after this many seconds.")
    parser.add_argument("--log-level", default=None, help="Override the configured log level.")
    parser.add_argument("--reset-artifacts", action="store_true", help="Clear artifacts from earlier runs first.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = ConfigLoader.load(args.config)
    logger = configure_logging(args.log_level or config.log_level)

    artifact_manager = ArtifactManager(config.artifacts_root)
    if args.reset_artifacts:
        artifact_manager.reset()
    audit_logger = SessionAuditLogger(config.artifacts_root)
    driver = BrowserSession(config.environment).start()
    helper = ReviewHelper(config, driver, audit_logger=audit_logger, artifact_manager=artifact_manager)
    try:
        helper.open(args.url)
        state = helper.run(duration=args.duration)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down.")
        state = helper.store.get()
    finally:
        driver.quit()

    path = artifact_manager.write_run_summary(state)
    logger.info("Run summary written to %s", path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
