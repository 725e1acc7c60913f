"""Command-line interface: run the blog pipeline for one website."""
import json
import sys

import click

from blogforge import config
from blogforge.entry import create_blog
from blogforge.logs import configure_logging
from blogforge.pipeline.report import format_summary


@click.command()
@click.argument("url")
@click.option("--topic", default=None, help="Topic to write about (chosen automatically when omitted)")
@click.option("--keyword", "keywords", multiple=True, help="Target keyword; repeat for several")
@click.option("--output", type=click.Path(dir_okay=False, writable=True), default=None,
              help="Write the full JSON response to this file")
@click.option("--log-level", default=None, help="Log level (defaults to LOG_LEVEL or INFO)")
@click.option("--json-logs/--console-logs", default=None, help="Log format (defaults to LOG_JSON)")
def main(url, topic, keywords, output, log_level, json_logs):
    """Analyze URL, write a blog post for it and publish the post."""
    configure_logging(level=log_level or config.log_level(), json=json_logs)
    payload = {"url": url, "selected_topic": topic, "target_keywords": list(keywords) or None}
    status, body = create_blog(payload)

    if output:
        with open(output, "w", encoding="utf-8") as f:
            json.dump(body, f, indent=2, default=str)
        click.echo(f"Full response written to {output}", err=True)

    if status == 400:
        click.echo(f"Error: {body['error']}", err=True)
        sys.exit(2)
    if status == 500:
        click.echo(f"Pipeline failed at {body['failed_stage']}: {body['details']}", err=True)
        sys.exit(1)
    click.echo(format_summary(body["summary"]))


if __name__ == "__main__":
    main()
