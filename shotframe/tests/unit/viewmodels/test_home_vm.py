from __future__ import annotations

import asyncio
from typing import List

from shotframe.adapters.image_codec import PayloadSelectionLoader
from shotframe.adapters.library_mock import ClipboardMock, LibraryMock
from shotframe.adapters.settings_memory import SettingsMemory
from shotframe.domain.entities import (
    DisplayMode,
    ImageQuality,
    LibraryPermission,
    PickerItem,
    SelectionFilter,
)
from shotframe.domain.errors import ImageIOError
from shotframe.domain.view_state import (
    CombinedResults,
    IndividualPlaceholder,
    IndividualResults,
)
from shotframe.usecases.error_mapping import ALERT_MESSAGE
from shotframe.viewmodels.home_vm import HomeVM
from shotframe.tests.unit.helpers import Harness, make_image, png_bytes


def _make_vm(tmp_path, settings=None, library=None):
    settings = settings or SettingsMemory()
    library = library or LibraryMock()
    changes: List[str] = []
    harnesses = []

    def factory(hooks):
        harness = Harness(tmp_path, settings=settings, library=library, hooks=hooks)
        harness.coordinator.loader = PayloadSelectionLoader(harness.codec)
        harnesses.append(harness)
        return harness.coordinator

    vm = HomeVM(
        settings=settings,
        library=library,
        clipboard=ClipboardMock(),
        coordinator_factory=factory,
        on_change=changes.append,
    )
    return vm, harnesses[0], changes


def _items(count: int) -> List[PickerItem]:
    return [PickerItem(f"asset-{i}", png_bytes(20 + i, 30)) for i in range(count)]


def test_toast_text_follows_settings(tmp_path) -> None:
    settings = SettingsMemory()
    vm, _, _ = _make_vm(tmp_path, settings=settings)

    assert vm.toast_text is None
    settings.auto_save_to_photos = True
    assert vm.toast_text == "Saved to photos"
    assert vm.photo_filter is SelectionFilter.ALL


def test_select_photos_shows_purchase_when_free_tier_used(tmp_path) -> None:
    vm, _, changes = _make_vm(tmp_path, settings=SettingsMemory(render_count=31))

    vm.select_photos()

    assert vm.show_purchase_view is True
    assert vm.show_photos_picker is False
    assert changes == ["show_purchase_view"]


def test_select_photos_ignored_while_loading(tmp_path) -> None:
    vm, _, _ = _make_vm(tmp_path)
    vm.is_loading = True

    vm.select_photos()

    assert vm.show_photos_picker is False


def test_selection_updates_view_state(tmp_path) -> None:
    vm, harness, changes = _make_vm(tmp_path)

    async def scenario():
        await vm.image_selections_did_change(_items(2))
        await vm.set_display_mode(DisplayMode.COMBINED)

    asyncio.run(scenario())

    assert isinstance(vm.view_state, CombinedResults)
    assert vm.display_mode is DisplayMode.COMBINED
    assert vm.is_loading is False
    assert "is_loading" in changes
    assert vm.error is None
    assert len(harness.coordinator.store.individual_results) == 2


def test_unreadable_selection_maps_to_alert(tmp_path) -> None:
    vm, _, _ = _make_vm(tmp_path)

    asyncio.run(vm.image_selections_did_change([PickerItem("broken", b"garbage")]))

    assert vm.error is not None
    assert vm.error.code == "UNSUPPORTED_IMAGE"
    assert vm.error.message == ALERT_MESSAGE
    assert vm.is_loading is False

    vm.dismiss_error()
    assert vm.error is None


def test_dropped_items_append_to_current_mode(tmp_path) -> None:
    vm, _, _ = _make_vm(tmp_path)

    asyncio.run(vm.did_drop_items([png_bytes(), b"junk"]))

    assert isinstance(vm.view_state, IndividualResults)
    assert len(vm.view_state.results) == 1


def test_quality_change_replays_selection(tmp_path) -> None:
    settings = SettingsMemory()
    vm, harness, _ = _make_vm(tmp_path, settings=settings)

    async def scenario():
        await vm.image_selections_did_change(_items(1))
        settings.image_quality = ImageQuality.HIGH
        await vm.change_image_quality_if_needed()

    asyncio.run(scenario())

    assert [quality for _, quality in harness.renderer.rendered] == [
        ImageQuality.ORIGINAL,
        ImageQuality.HIGH,
    ]


def test_auto_save_toast_flag(tmp_path) -> None:
    vm, _, _ = _make_vm(tmp_path, settings=SettingsMemory(auto_save_to_files=True))

    asyncio.run(vm.image_selections_did_change(_items(1)))

    assert vm.show_auto_save_toast is True


def test_clear_on_background_respects_setting(tmp_path) -> None:
    settings = SettingsMemory()
    vm, _, _ = _make_vm(tmp_path, settings=settings)
    asyncio.run(vm.image_selections_did_change(_items(1)))

    vm.clear_images_on_app_background()
    assert isinstance(vm.view_state, IndividualResults)

    settings.clear_images_on_background = True
    vm.clear_images_on_app_background()
    assert vm.view_state == IndividualPlaceholder()
    assert vm.image_selections == []


def test_copy_and_save(tmp_path) -> None:
    library = LibraryMock()
    vm, _, _ = _make_vm(tmp_path, library=library)
    image = make_image(4, 4)

    vm.copy(image)
    asyncio.run(vm.save(image))

    assert vm.clipboard.images == [image]
    assert vm.show_copy_toast is True
    assert library.saved_images == [image]
    assert vm.show_quick_save_toast is True


def test_save_failure_sets_error(tmp_path) -> None:
    library = LibraryMock(fail_on=["save_image"], error=ImageIOError("disk full"))
    vm, _, _ = _make_vm(tmp_path, library=library)

    asyncio.run(vm.save(make_image(4, 4)))

    assert vm.show_quick_save_toast is False
    assert vm.error.code == "IO_ERROR"


def test_copy_requires_entitlement(tmp_path) -> None:
    vm, _, _ = _make_vm(tmp_path, settings=SettingsMemory(render_count=99))

    vm.copy(make_image(4, 4))

    assert vm.clipboard.images == []
    assert vm.show_purchase_view is True


def test_request_library_permission(tmp_path) -> None:
    library = LibraryMock(permission=LibraryPermission.DENIED)
    vm, _, _ = _make_vm(tmp_path, library=library)

    asyncio.run(vm.request_library_permission())

    assert library.calls == ["permission"]
