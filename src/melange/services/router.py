"""Router — classify and fulfil one ``melange://`` request.

This is the trust boundary between UI-issued URIs and the two privileged
resources: the filesystem under ``base_directory`` and the configured
named commands.

INVARIANT: ``route`` never raises for filesystem or process failures.
Every per-request error becomes a :class:`Response` with a
:class:`RouteError`; nothing here may take down the host UI process.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from melange.infrastructure.filesystem import (
    PathForbiddenError,
    guess_mime_type,
    is_under_base,
    read_file_bytes,
    resolve_confined_path,
)
from melange.infrastructure.process import (
    CommandTimeoutError,
    ProcessSpawnError,
    execute_command,
)
from melange.services.response import (
    COMMAND_MIME_TYPE,
    COMMAND_NOT_FOUND_BODY,
    ErrorCode,
    Response,
)
from melange.services.telemetry import traced

if TYPE_CHECKING:
    from melange.config.settings import MelangeSettings

logger = logging.getLogger(__name__)

SCHEME = "melange"
SCHEME_PREFIX = f"{SCHEME}://"


class Router:
    """Stateless request router over an immutable settings value.

    One instance may be shared across threads: the only state is the
    read-only settings reference.  Command requests block the calling
    thread until the child process exits.
    """

    def __init__(self, settings: MelangeSettings) -> None:
        self._settings = settings

    @property
    def settings(self) -> MelangeSettings:
        return self._settings

    @traced
    def route(self, uri: str) -> Response:
        """Route *uri* to a confined file read or a named command."""
        if not uri.startswith(SCHEME_PREFIX):
            logger.debug("Rejected non-%s URI: %s", SCHEME, uri)
            return Response.failure(
                400,
                ErrorCode.UNSUPPORTED_SCHEME,
                f"Unsupported URI scheme: {uri}",
                uri=uri,
            )

        token = uri.removeprefix(SCHEME_PREFIX)
        if is_under_base(token, self._settings.base_directory):
            return self.serve_file(token)
        return self.run_command(token)

    def serve_file(self, token: str) -> Response:
        """Read a file under the base directory."""
        try:
            path = resolve_confined_path(self._settings.base_directory, token)
        except PathForbiddenError as exc:
            logger.warning("Blocked path outside base directory: %s -> %s", token, exc.resolved)
            return Response.failure(
                403,
                ErrorCode.PATH_FORBIDDEN,
                "Path is outside the base directory",
                path=token,
            )

        try:
            content = read_file_bytes(path)
        except (FileNotFoundError, NotADirectoryError, IsADirectoryError):
            logger.debug("File not found: %s", path)
            return Response.failure(
                404,
                ErrorCode.FILE_NOT_FOUND,
                f"File not found: {token}",
                path=str(path),
            )
        except OSError as exc:
            logger.warning("Cannot read %s: %s", path, exc)
            return Response.failure(
                500,
                ErrorCode.IO_ERROR,
                f"Cannot read file: {token}",
                path=str(path),
                reason=exc.strerror or str(exc),
            )

        return Response.success(content, guess_mime_type(path))

    def run_command(self, name: str) -> Response:
        """Run the command registered as *name*, matched verbatim."""
        argv = self._settings.command_argv(name)
        if argv is None:
            logger.debug("No command named %r", name)
            return Response.failure(
                404,
                ErrorCode.COMMAND_NOT_FOUND,
                COMMAND_NOT_FOUND_BODY.decode(),
                body=COMMAND_NOT_FOUND_BODY,
                command=name,
            )

        router_cfg = self._settings.router
        try:
            output = execute_command(argv, timeout=router_cfg.command_timeout)
        except ProcessSpawnError as exc:
            logger.error("Command %r failed to start: %s", name, exc)
            return Response.failure(
                500,
                ErrorCode.PROCESS_SPAWN_ERROR,
                str(exc),
                command=name,
                argv=argv,
            )
        except CommandTimeoutError as exc:
            logger.warning("Command %r killed after %ss", name, exc.timeout)
            return Response.failure(
                504,
                ErrorCode.COMMAND_TIMEOUT,
                str(exc),
                command=name,
                timeout=exc.timeout,
            )

        logger.debug("Command %r exited with %d", name, output.exit_code)
        if router_cfg.strict_exit_status and not output.ok:
            return Response.failure(
                500,
                ErrorCode.COMMAND_FAILED,
                f"Command {name!r} exited with status {output.exit_code}",
                body=output.stdout,
                mime_type=COMMAND_MIME_TYPE,
                command=name,
                exit_code=output.exit_code,
            )
        return Response.success(output.stdout, COMMAND_MIME_TYPE)
