import os

os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "1"

import typer

from expandable_text.cli.commands.bench import bench_command
from expandable_text.cli.commands.demo import demo_command
from expandable_text.cli.commands.trace import trace_command

app = typer.Typer()

app.command(name="trace")(trace_command)
app.command(name="demo")(demo_command)
app.command(name="bench")(bench_command)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
