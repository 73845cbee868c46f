"""
Alembic entrypoint bound to the ggbench revisions::

    python -m ggbench.migrations upgrade head
    python -m ggbench.migrations revision -m "add prompt difficulty"
"""
from alembic.config import CommandLine, Config


def get_alembic_config():
    alembic_cfg = Config()
    alembic_cfg.set_main_option("script_location", "ggbench:migrations")
    return alembic_cfg


def main(argv=None):
    cli = CommandLine(prog="python -m ggbench.migrations")
    options = cli.parser.parse_args(argv)
    if not hasattr(options, "cmd"):
        cli.parser.error("a command is required")

    cli.run_cmd(get_alembic_config(), options)


if __name__ == "__main__":
    main()
