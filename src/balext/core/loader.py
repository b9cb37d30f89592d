"""Extensions discovery and loading infrastructure.

This module defines a mixin responsible for discovering, loading, and
registering compiler extensions exposed via Python entry points.

Extensions are loaded defensively: individual failures do not interrupt
the loading process unless strict mode is enabled. Each extension owns
exactly one namespace.
"""

from typing import TYPE_CHECKING
from warnings import warn

from balext.config import DEFAULT_ENTRYPOINT_GROUP
from balext.errors import PluginError, PluginWarning
from balext.extensions import CompilerExtension

if TYPE_CHECKING:
    from importlib.metadata import EntryPoint


class ExtensionsLoaderMixin:
    """Mixin defining extension loading behavior.

    This mixin encapsulates logic for discovering extensions via entry
    points and registering them by namespace.

    Attributes:
        strict_mode: If True, any loading issue raises an error.
            If False, issues are emitted as warnings and loading continues.
        extensions: Registered extensions by namespace.
    """

    strict_mode: bool = False

    extensions: dict[str, CompilerExtension]

    def add_extension(self, extension: CompilerExtension,
                      entrypoint: 'EntryPoint | None' = None) -> None:
        """Register an extension for its namespace.

        A later registration for the same namespace replaces the earlier one.

        Args:
            extension: Extension instance.
            entrypoint: Entry point from which the extension was loaded,
                if applicable. Used for diagnostics and warnings.

        Raises:
            PluginError: If the namespace is already taken on strict mode.
        """
        module = entrypoint.value if entrypoint else type(extension).__module__

        if extension.namespace in self.extensions and (error := self.emit_plugin_issue(
            f'Extension {extension.name!r} from {module!r} is shadowing an existing',
            entrypoint,
        )):
            raise error

        self.extensions[extension.namespace] = extension

    def emit_plugin_issue(self, message: str,
                          entrypoint: 'EntryPoint | None' = None) -> Exception | None:
        """Emit a plugin warning or return the exception.

        Args:
            message: Warning message to emit.
            entrypoint: Entry point associated with the issue, if applicable.

        Returns:
            PluginError on strict mode, otherwise `None`
                with producing a PluginWarning.
        """
        if self.strict_mode:
            return PluginError(message, entrypoint=entrypoint)

        warn(message, category=PluginWarning, stacklevel=2)

        return None

    def _load_extension(self, entrypoint: 'EntryPoint') -> None:
        """Load and register a single extension entry point.

        The entry point may reference an extension instance or an
        extension class with a no-argument constructor.

        Args:
            entrypoint: Entry point describing the extension to load.

        Raises:
            PluginError: If any loading issues occur on strict mode.
        """
        try:
            extension = entrypoint.load()
            if isinstance(extension, type) and issubclass(extension, CompilerExtension):
                extension = extension()

        except Exception as base:
            if error := self.emit_plugin_issue(
                f'Failed to load entrypoint {entrypoint.name!r}',
                entrypoint,
            ):
                raise error from base
            return None

        if not isinstance(extension, CompilerExtension):
            if error := self.emit_plugin_issue(
                f'Loaded from entrypoint {entrypoint.name!r} object is not an extension',
                entrypoint,
            ):
                raise error
            return None

        self.add_extension(extension, entrypoint)

    def clear_extensions(self) -> None:
        """Clear all registered extensions."""
        self.extensions = {}

    def load_extensions(self, group: str = DEFAULT_ENTRYPOINT_GROUP) -> None:
        """Load extensions via entry points and register them.

        Args:
            group: Entry point group to scan.

        Raises:
            PluginError: If any loading issues occur on strict mode.
        """
        from importlib.metadata import entry_points  # noqa: PLC0415

        for entrypoint in entry_points().select(group=group):
            self._load_extension(entrypoint)
