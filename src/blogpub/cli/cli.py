"""CLI entrypoint: Typer app definition and command registration"""

import typer

from blogpub.cli.commands import (
    export_cmd,
    feed_cmd,
    index_cmd,
    lint_cmd,
    main_callback,
    optimize_cmd,
    process_cmd,
    show_cmd,
    sitemap_cmd,
)


app = typer.Typer(name="blogpub", no_args_is_help=True, help="Markdown blog content pipeline")

app.callback()(main_callback)
app.command(name="process")(process_cmd)
app.command(name="index")(index_cmd)
app.command(name="export")(export_cmd)
app.command(name="feed")(feed_cmd)
app.command(name="sitemap")(sitemap_cmd)
app.command(name="lint")(lint_cmd)
app.command(name="optimize")(optimize_cmd)
app.command(name="show")(show_cmd)
