# shotframe/app/main.py
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from ..adapters.image_codec import PngCodec, TempDirWriter
from ..adapters.library_local import DirectoryFiles, DirectoryLibrary, FileSelectionLoader
from ..adapters.library_mock import ClipboardMock, ReviewPromptMock
from ..adapters.pillow_renderer import PillowRenderer
from ..adapters.storage_local import StorageLocal
from ..domain.entities import DisplayMode, ImageQuality, PickerItem
from ..domain.view_state import CombinedResults, IndividualResults
from ..usecases.pipeline_coordinator import PipelineCoordinator, PipelineHooks, build_coordinator
from ..utils import logging as logging_utils
from ..viewmodels.home_vm import HomeVM

_log = logging.getLogger(__name__)


def build_home_vm(out_dir: Path, settings: StorageLocal) -> HomeVM:
    """Compose the home view-model with directory-backed adapters."""
    codec = PngCodec()
    library = DirectoryLibrary(out_dir / "Photos")

    def _factory(hooks: PipelineHooks) -> PipelineCoordinator:
        return build_coordinator(
            settings=settings,
            renderer=PillowRenderer(),
            encoder=codec,
            writer=TempDirWriter(out_dir),
            decoder=codec,
            files=DirectoryFiles(out_dir / "Files"),
            library=library,
            review_prompt=ReviewPromptMock(),
            loader=FileSelectionLoader(codec),
            hooks=hooks,
        )

    return HomeVM(
        settings=settings,
        library=library,
        clipboard=ClipboardMock(),
        coordinator_factory=_factory,
    )


async def run_selection(vm: HomeVM, images: Sequence[Path], combined: bool) -> List[Path]:
    """Frame ``images`` through the view-model and return the output paths."""
    items = [PickerItem(item_id=str(path)) for path in images]
    await vm.image_selections_did_change(items)
    if vm.error is not None:
        return []
    if combined:
        await vm.set_display_mode(DisplayMode.COMBINED)
        if vm.error is not None:
            return []

    state = vm.view_state
    if isinstance(state, CombinedResults):
        return [state.result.path]
    if not combined:
        task = vm.coordinator.combine_task
        if task is not None:
            task.cancel()
    if isinstance(state, IndividualResults):
        return [result.path for result in state.results]
    # Combined mode with a single screenshot has no composite.
    return [result.path for result in vm.coordinator.store.individual_results]


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse CLI args for a one-shot framing run."""
    parser = argparse.ArgumentParser(description="Frame screenshots and optionally combine them.")
    parser.add_argument("images", nargs="+", type=Path)
    parser.add_argument("--combined", action="store_true", help="Also build one combined image.")
    parser.add_argument(
        "--quality",
        choices=[quality.value for quality in ImageQuality],
        default=None,
        help="Override the stored image quality.",
    )
    parser.add_argument("--out", type=Path, default=Path("framed"))
    parser.add_argument("--settings-dir", default=".")
    parser.add_argument(
        "--log-level",
        type=logging_utils.parse_level,
        default=logging.WARNING,
        metavar="LEVEL",
        help="Log level name or number (default: WARNING).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entrypoint."""
    args = _parse_args(argv)
    level = logging_utils.configure_root(args.log_level)
    _log.debug("Logging configured at %s.", logging.getLevelName(level))

    settings = StorageLocal(root_dir=args.settings_dir)
    settings.launch_count += 1
    settings.activation_count += 1
    if args.quality:
        settings.image_quality = ImageQuality(args.quality)

    vm = build_home_vm(args.out, settings)
    if not settings.can_save_result:
        print(
            f"Free tier used up ({settings.render_count} framed screenshots).",
            file=sys.stderr,
        )
        return 2

    paths = asyncio.run(run_selection(vm, args.images, args.combined))
    if vm.error is not None:
        print(f"{vm.error.title} {vm.error.message}", file=sys.stderr)
        return 1
    for path in paths:
        print(path)
    _log.info("Framed %d screenshots.", len(args.images))
    return 0


if __name__ == "__main__":
    sys.exit(main())
