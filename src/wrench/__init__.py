"""wrench -- command-line front end of the WebRender testing and debugging utility.

This package declares wrench's global flags and its two operating modes
(``show`` a YAML frame description, ``replay`` a binary recording), and turns
the process's argument list into a validated, immutable
:class:`~wrench.models.Config` for the renderer driver.

Typical invocations::

    wrench -s 1024x768 -p 2.0 show -q 4 scene.yaml
    wrench --vsync replay --api recording/

Modules:
    app: Console-script entry point.
    args: Option schema, parser, config builder and usage formatter.
    models: Pydantic models shared across the package.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1"
