"""Built-in option table for the ``wrench`` command line.

The table is plain data: a :class:`~wrench.models.CommandSpec` tree whose
:class:`~wrench.models.OptionSpec` entries carry each option's aliases, arity
and coercion rule. :func:`~wrench.args.commands.build_command` turns it into
click commands and :func:`~wrench.args.builder.build` converts against it, so adding
an option means adding a row here (and a field on the config model named by
its ``dest``).

The subcommand names double as the mode discriminators of
:class:`~wrench.models.Config`.
"""

from __future__ import annotations

from wrench.models import CommandSpec, OptionSpec, ValueKind

SHOW = "show"
REPLAY = "replay"

GLOBAL_OPTIONS: tuple[OptionSpec, ...] = (
    OptionSpec(
        name="debug",
        dest="debug",
        short="d",
        long="debug",
        help="Enable debug renderer",
    ),
    OptionSpec(
        name="shaders",
        dest="shaders_path",
        long="shaders",
        kind=ValueKind.PATH,
        value_name="PATH",
        help="Override path for shaders",
    ),
    OptionSpec(
        name="rebuild",
        dest="rebuild",
        short="r",
        long="rebuild",
        help="Rebuild display list from scratch every frame",
    ),
    OptionSpec(
        name="save",
        dest="save_format",
        long="save",
        kind=ValueKind.CHOICE,
        choices=("yaml", "json"),
        help='Save frames, either "yaml" or "json"',
    ),
    OptionSpec(
        name="subpixel_aa",
        dest="subpixel_aa",
        short="a",
        long="subpixel-aa",
        help="Enable subpixel aa",
    ),
    OptionSpec(
        name="dp_ratio",
        dest="device_pixel_ratio",
        short="p",
        long="device-pixel-ratio",
        kind=ValueKind.POSITIVE_FLOAT,
        value_name="FLOAT",
        help="Device pixel ratio",
    ),
    OptionSpec(
        name="size",
        dest="window_size",
        short="s",
        long="size",
        kind=ValueKind.SIZE,
        value_name="WxH",
        help="Window size, specified as widthxheight (e.g. 1024x768), in pixels",
    ),
    OptionSpec(
        name="time",
        dest="time_limit",
        short="t",
        long="time",
        kind=ValueKind.NON_NEGATIVE_FLOAT,
        value_name="SECONDS",
        help="Time limit (in seconds)",
    ),
    OptionSpec(
        name="vsync",
        dest="vsync",
        long="vsync",
        help="Enable vsync for OpenGL window",
    ),
)

SHOW_COMMAND = CommandSpec(
    name=SHOW,
    about="show frame(s) described by YAML",
    options=(
        OptionSpec(
            name="queue",
            dest="queue_depth",
            short="q",
            long="queue",
            kind=ValueKind.POSITIVE_INT,
            default="1",
            value_name="N",
            help="How many frames to submit to WR ahead of time (default 1)",
        ),
        OptionSpec(
            name="INPUT",
            dest="input_path",
            kind=ValueKind.PATH,
            index=1,
            required=True,
            value_name="INPUT",
            help="The input YAML file",
        ),
    ),
)

REPLAY_COMMAND = CommandSpec(
    name=REPLAY,
    about="replay binary recording",
    options=(
        OptionSpec(
            name="api",
            dest="reissue_api",
            long="api",
            help="Reissue Api messsages for each frame",
        ),
        OptionSpec(
            name="skip-uploads",
            dest="skip_uploads",
            long="skip-uploads",
            help="Skip re-uploads while reissuing Api messages (BROKEN)",
        ),
        OptionSpec(
            name="INPUT",
            dest="input_path",
            kind=ValueKind.PATH,
            index=1,
            required=True,
            value_name="INPUT",
            help="The input binary file or directory",
        ),
    ),
)

WRENCH_SCHEMA = CommandSpec(
    name="wrench",
    version="0.1",
    author="Vladimir Vukicevic <vladimir@pobox.com>",
    about="WebRender testing and debugging utility",
    options=GLOBAL_OPTIONS,
    subcommands=(SHOW_COMMAND, REPLAY_COMMAND),
)
