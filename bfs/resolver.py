"""Module resolution against the buffered file system.

Handles the lookup protocol behind ``BFS.require``:

- Provided modules: caller overrides win before anything else
- Bare specifiers: host import first, then the dependency directory
- Relative specifiers: the path as is, then with the source suffix,
  then through the directory's manifest

Nothing is cached. Every call walks the protocol again and executes the
module again, and a module that requires itself recurses until Python gives
up with a RecursionError.
"""

import json
from typing import TYPE_CHECKING, Any, Dict, Optional

from bfs.config import ResolverConfig
from bfs.errors import (
    BFSError,
    ExecutionError,
    ManifestParseError,
    NativeLoadError,
    NotFoundError,
)
from bfs.executor import PythonExecutor, RequireFunc
from bfs.logger import Logger
from bfs.native import NativeLoader, import_native
from bfs.paths import as_relative, classify, dirname, has_suffix, join

if TYPE_CHECKING:
    from bfs.core import BFS


class ModuleResolver:
    """Resolves and executes modules stored in a BFS.

    Attributes:
        fs: File system modules are read from
        config: Naming conventions (suffixes, index, manifest, dependency dir)
        native_loader: Host import used for bare specifiers
        executor: Runs source text and returns what it exports
    """

    def __init__(
        self,
        fs: "BFS",
        config: Optional[ResolverConfig] = None,
        native_loader: Optional[NativeLoader] = None,
        executor: Optional[PythonExecutor] = None,
        logger: Optional[Logger] = None,
    ):
        self.fs = fs
        self.config = config or ResolverConfig()
        self.native_loader = native_loader or import_native
        self.executor = executor or PythonExecutor()
        self.logger = logger or Logger()

    def require(self, name: str, current_dir: str = ".") -> Any:
        """Resolve a specifier and return what the module exports.

        Args:
            name: Module specifier
            current_dir: Directory of the requiring module; bare specifiers
                that aren't host modules are looked up beneath it

        Returns:
            The provided value, the host module, or the executed module's export
        """
        provided = self.fs.provided_modules
        if name in provided:
            self.logger.debug("Providing module...", {"name": name, "value": provided[name]})
            return provided[name]

        spec = classify(name)
        self.logger.debug("Resolving module...", {
            "module": name,
            "kind": spec.kind.value,
            "current_dir": spec.directory if spec.is_relative else current_dir,
        })
        if spec.is_relative:
            return self._resolve_relative(spec.name)
        return self._resolve_bare(spec.name, current_dir)

    def _resolve_bare(self, name: str, current_dir: str) -> Any:
        try:
            self.logger.debug("Requiring native module...", {"module": name})
            return self.native_loader(name)
        except ModuleNotFoundError as e:
            self.logger.error("Failed to natively require module", {
                "exception": str(e),
                "path": name,
            })
        except NativeLoadError as e:
            self.logger.error("Native module failed to load", {
                "exception": str(e),
                "path": name,
            })
            raise

        fallback = as_relative(join(current_dir, self.config.dependency_dir, name))
        return self.require(fallback)

    def _resolve_relative(self, path: str) -> Any:
        config = self.config

        target = self.fs.index_selector(path)
        try:
            self.logger.debug("Attempting to read file as is...", {"path": target})
            source = self.fs.read_file(target)
        except NotFoundError as e:
            self.logger.error("Failed to require module from FS", {
                "exception": str(e),
                "path": target,
            })
            if has_suffix(path, config.exact_suffixes):
                raise
        else:
            return self._execute(target, source)

        target = as_relative(f"{path}{config.source_suffix}")
        try:
            self.logger.debug("Attempting to read file with source suffix...", {"path": target})
            source = self.fs.read_file(target)
        except NotFoundError as e:
            self.logger.error("Failed to require module from FS with source suffix", {
                "exception": str(e),
                "path": target,
            })
        else:
            return self._execute(target, source)

        return self._resolve_manifest(path)

    def _resolve_manifest(self, path: str) -> Any:
        config = self.config
        manifest_path = as_relative(join(path, config.manifest_file))
        try:
            self.logger.debug("Attempting to read file from manifest...", {"path": manifest_path})
            manifest = parse_manifest(manifest_path, self.fs.read_file(manifest_path))
            entry = as_relative(join(path, entry_point(manifest_path, manifest, config)))
            source = self.fs.read_file(entry)
        except BFSError as e:
            self.logger.error("Failed to require module from manifest", {
                "exception": str(e),
                "path": manifest_path,
            })
            raise

        current_dir = None
        if not self.fs.reader.basedir:
            self.fs.basedir(dirname(entry))
            self.logger.info("Base directory set from manifest", {"basedir": self.fs.reader.basedir})
            current_dir = "."
        return self._execute(entry, source, current_dir)

    def _execute(self, path: str, source: str, current_dir: Optional[str] = None) -> Any:
        if current_dir is None:
            current_dir = dirname(path)

        if has_suffix(path, self.config.data_suffixes):
            try:
                return json.loads(source)
            except json.JSONDecodeError as e:
                raise ExecutionError(path, str(e)) from e

        self.logger.debug("Executing module...", {"path": path, "current_dir": current_dir})
        try:
            return self.executor.execute(source, path, self._nested_require(current_dir))
        except (BFSError, RecursionError):
            raise
        except Exception as e:
            self.logger.error("Module raised while executing", {"exception": repr(e), "path": path})
            raise ExecutionError(path, str(e)) from e

    def _nested_require(self, current_dir: str) -> RequireFunc:
        """Build the ``require`` handed to executed code, bound to its directory."""
        def require(name: str) -> Any:
            self.logger.debug("Requiring module...", {"module": name, "current_dir": current_dir})
            if classify(name).is_relative:
                return self.require(as_relative(join(current_dir, name)))
            return self.require(name, current_dir)

        return require


def parse_manifest(path: str, raw: str) -> Dict[str, Any]:
    """Parse manifest text into a dict.

    Raises:
        ManifestParseError: If the text isn't a JSON object
    """
    try:
        manifest = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ManifestParseError(path, str(e)) from e
    if not isinstance(manifest, dict):
        raise ManifestParseError(path, f"expected an object, got {type(manifest).__name__}")
    return manifest


def entry_point(path: str, manifest: Dict[str, Any], config: ResolverConfig) -> str:
    """Entry file named by a manifest, relative to the manifest's directory."""
    main = manifest.get(config.main_field)
    if not main:
        return config.index_file
    if not isinstance(main, str):
        raise ManifestParseError(path, f"{config.main_field!r} must be a string")
    if not main.endswith(config.source_suffix):
        main = f"{main}{config.source_suffix}"
    return main
