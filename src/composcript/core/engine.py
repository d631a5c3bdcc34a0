#!/usr/bin/env python3
"""
COMPOSCRIPT ENGINE - Build Orchestrator
---------------------------------------
The BuildEngine drives one build pass over the components directory:
discover files, compile each one through the TranspilePipeline, collect
per-file diagnostics, then decide at this boundary whether the bundle is
written (atomically) or the pass is aborted.

It also owns the single-flight guard used by watch mode so overlapping
rebuild requests coalesce into one follow-up build.

Author: Composcript Team
Date: 2026-10-19
"""

import logging
import os
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from composcript.core.config import BuildConfig
from composcript.core.errors import ComposcriptError, ConfigError
from composcript.core.prelude import RUNTIME_PRELUDE
from composcript.core.watcher import ComponentWatcher, Debouncer
from composcript.transpile.pipeline import TranspilePipeline

logger = logging.getLogger("composcript.engine")


class BuildState(Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    REWRITE = "rewrite"
    EXTRACT = "extract"
    GENERATE = "generate"
    APPEND = "append"
    ABORTED = "aborted"


@dataclass
class BuildResult:
    """Outcome of one build pass."""
    state: BuildState
    output_path: Path
    reports: List[Dict[str, Any]] = field(default_factory=list)
    output: str = ""                       # Bundle text (written or not)
    previous_output: Optional[str] = None  # Artifact content before this pass
    written: bool = False

    @property
    def failures(self) -> List[Dict[str, Any]]:
        return [r for r in self.reports if not r.get("success")]

    @property
    def aborted(self) -> bool:
        return self.state is BuildState.ABORTED


class BuildEngine:
    """
    Principal orchestrator of the transpiler. Stateless across passes apart
    from the build-in-progress guard; every pass rebuilds the bundle from
    scratch.
    """

    def __init__(self, config: BuildConfig):
        self.config = config
        self.pipeline = TranspilePipeline(self_render_tag=config.self_render_tag)
        self.state = BuildState.IDLE
        self.watcher: Optional[ComponentWatcher] = None

        self._lock = threading.Lock()
        self._building = False
        self._rebuild_pending = False

    def _transition(self, state: BuildState):
        logger.debug(f"{self.state.value} -> {state.value}")
        self.state = state

    def discover(self) -> List[Path]:
        """Component files directly inside the components directory, sorted by name."""
        directory = self.config.components_path
        if not directory.is_dir():
            raise ConfigError(f"Components directory not found: {directory}")
        return sorted(
            (p for p in directory.iterdir()
             if p.is_file() and p.suffix == self.config.extension
             and p.name != self.config.output_name),
            key=lambda p: p.name,
        )

    def compile_file(self, path: Path) -> Dict[str, Any]:
        """Compiles one component file into a report dict (never raises ComposcriptError)."""
        tag_name = path.stem
        phases = {
            "rewrite": BuildState.REWRITE,
            "extract": BuildState.EXTRACT,
            "generate": BuildState.GENERATE,
        }
        try:
            source = path.read_text(encoding="utf-8-sig")
            context = self.pipeline.run(
                source,
                tag_name=tag_name,
                file_path=path.name,
                on_phase=lambda phase: self._transition(phases[phase]),
            )
        except ComposcriptError as e:
            return self._file_error(path.name, tag_name, e)
        except (OSError, UnicodeDecodeError) as e:
            return self._file_error(path.name, tag_name, ComposcriptError(f"Unreadable file: {e}", path.name))

        descriptor = context.descriptor
        return {
            "file_path": path.name,
            "tag_name": descriptor.tag_name,
            "class_name": descriptor.class_name,
            "status": "COMPILED",
            "success": True,
            "attributes": len(descriptor.attributes),
            "required": descriptor.required_attributes,
            "markup_blocks": context.markup_blocks,
            "compiled": context.compiled,
        }

    def build(self, quiet: bool = False, dry_run: bool = False,
              progress_callback: Optional[Callable[[int, int], None]] = None) -> BuildResult:
        """
        Runs one full pass. Every file is compiled so all diagnostics are
        collected; the error policy is applied afterwards:
            abort - any failure leaves the existing artifact untouched
            skip  - failed files are left out of the bundle
        """
        log = logger.debug if quiet else logger.info
        output_path = self.config.output_path

        # --- PHASE 1: DISCOVERY ---
        self._transition(BuildState.SCANNING)
        try:
            files = self.discover()
        except ComposcriptError:
            self._transition(BuildState.ABORTED)
            raise

        # --- PHASE 2: PER-FILE COMPILE, APPENDED IN TRAVERSAL ORDER ---
        buffer = [RUNTIME_PRELUDE]
        reports = []
        for index, path in enumerate(files, 1):
            log(f"Compiling {path.name}")
            report = self.compile_file(path)
            reports.append(report)
            if report["success"]:
                self._transition(BuildState.APPEND)
                buffer.append("\n" + report["compiled"])
            self._transition(BuildState.SCANNING)
            if progress_callback:
                progress_callback(index, len(files))

        result = BuildResult(
            state=BuildState.IDLE,
            output_path=output_path,
            reports=reports,
            output="".join(buffer),
            previous_output=self._read_previous(output_path),
        )

        # --- PHASE 3: POLICY GATE ---
        for failure in result.failures:
            logger.debug(failure["error"])
        if result.failures and self.config.on_error == "abort":
            logger.error(f"Build aborted: {len(result.failures)} file(s) failed, {output_path.name} not written")
            self._transition(BuildState.ABORTED)
            result.state = BuildState.ABORTED
            return result

        # --- PHASE 4: PERSISTENCE ---
        if not dry_run:
            self._atomic_write(output_path, result.output)
            result.written = True
            log(f"Wrote {output_path}")

        self._transition(BuildState.IDLE)
        return result

    def request_build(self, quiet: bool = True) -> Optional[BuildResult]:
        """
        Single-flight entry point for rebuild triggers. If a build is already
        running, the request is recorded and None is returned; the running
        caller then performs exactly one follow-up build however many
        requests arrived meanwhile.
        """
        with self._lock:
            if self._building:
                self._rebuild_pending = True
                return None
            self._building = True

        try:
            while True:
                result = self.build(quiet=quiet)
                with self._lock:
                    if not self._rebuild_pending:
                        self._building = False
                        return result
                    self._rebuild_pending = False
        except Exception:
            with self._lock:
                self._building = False
                self._rebuild_pending = False
            raise

    def watch(self, on_result: Optional[Callable[[BuildResult], None]] = None,
              interval: float = 0.25):
        """Initial quiet build, then debounced rebuilds until stop_watching()."""

        def rebuild():
            try:
                result = self.request_build(quiet=True)
            except ComposcriptError as e:
                logger.error(str(e))
                return
            if result is not None and on_result:
                on_result(result)

        def changed(names):
            logger.info(f"Change detected in {', '.join(sorted(names))}")
            debouncer.trigger()

        debouncer = Debouncer(self.config.debounce_seconds, rebuild)
        rebuild()

        self.watcher = ComponentWatcher(
            self.config.components_path, self.config.extension, changed, interval=interval
        )
        try:
            self.watcher.run()
        finally:
            debouncer.cancel()

    def stop_watching(self):
        if self.watcher:
            self.watcher.stop()

    def generate_summary(self, result: BuildResult) -> Dict[str, Any]:
        reports = result.reports
        compiled = [r for r in reports if r.get("success")]
        return {
            "total_files": len(reports),
            "compiled": len(compiled),
            "failed": len(reports) - len(compiled),
            "attributes": sum(r.get("attributes", 0) for r in compiled),
            "markup_blocks": sum(r.get("markup_blocks", 0) for r in compiled),
            "written": result.written,
            "bytes": len(result.output.encode("utf-8")) if result.written else 0,
            "state": result.state.value,
            "summary_timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
        }

    def _read_previous(self, path: Path) -> Optional[str]:
        try:
            return path.read_text(encoding="utf-8")
        except (FileNotFoundError, UnicodeDecodeError):
            return None

    def _atomic_write(self, target_path: Path, content: str):
        if not os.access(target_path.parent, os.W_OK):
            raise PermissionError(f"No write access to {target_path.parent}")
        temp_file = target_path.with_name(target_path.name + ".tmp")
        try:
            temp_file.write_text(content, encoding="utf-8")
            os.replace(temp_file, target_path)
        except OSError as e:
            if temp_file.exists():
                temp_file.unlink()
            raise IOError(f"Atomic write failed: {str(e)}")

    def _file_error(self, path: str, tag_name: str, error: ComposcriptError) -> Dict[str, Any]:
        if error.file_path is None:
            error.file_path = path
        return {
            "file_path": path, "tag_name": tag_name, "status": error.code,
            "error": str(error), "line": error.line, "success": False,
        }
