"""Command-line entry point: fetch, score, and submit."""

import json
import logging
import sys

import click
import requests

from risk_triage.analysis import analyze, submit_assessment
from risk_triage.client import ApiClient
from risk_triage.collector import RetryExhausted, RetryPolicy, fetch_all_patients
from risk_triage.config import load_settings

logger = logging.getLogger("risk_triage")


@click.command()
@click.option("-c", "--config", "config_path", type=click.Path(exists=True, dir_okay=False), default=None, help="YAML settings file")
@click.option("--dry-run", is_flag=True, help="print the payload instead of submitting it")
@click.option("-v", "--verbose", is_flag=True, help="debug logging")
def main(config_path, dry_run, verbose):
    """Score every patient from the assessment API and submit the alert lists."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(config_path)
    except ValueError as exc:
        raise click.ClickException(f"Invalid settings: {exc}")

    if not settings.api_key:
        raise click.ClickException("No API key configured. Set KSENSE_API_KEY or api_key in the config file.")

    client = ApiClient(settings.base_url, settings.api_key, timeout=settings.timeout)
    retry = RetryPolicy(backoff_seconds=settings.backoff_seconds, max_attempts=settings.max_attempts)

    try:
        patients = fetch_all_patients(client, retry=retry, page_size=settings.page_size)
    except (requests.RequestException, RetryExhausted) as exc:
        logger.error("Fetching patients failed: %s", exc)
        sys.exit(1)

    results = analyze(patients)
    logger.info("Scored %d patients: %s", len(patients), results.counts())

    if dry_run:
        click.echo(json.dumps(results.to_payload(), indent=2))
        return

    try:
        resp = submit_assessment(client, results)
    except requests.RequestException as exc:
        logger.error("Submission failed: %s", exc)
        sys.exit(1)

    click.echo(json.dumps(resp, indent=2) if isinstance(resp, (dict, list)) else str(resp))


if __name__ == "__main__":
    main()
