"""文件扫描、路径映射与去重规划测试。"""

from __future__ import annotations

from pathlib import Path

import pytest

from image_slimmer.core.exceptions import PathMappingError
from image_slimmer.core.models import WorkItem
from image_slimmer.core.planner import (
    is_supported_image,
    map_output_path,
    plan_work_items,
    prepare_output_dirs,
    walk_input_tree,
)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("a.jpg", True),
        ("a.jpeg", True),
        ("a.png", True),
        ("a.JPG", False),
        ("a.Png", False),
        ("a.gif", False),
        ("png", False),
    ],
)
def test_extension_filter_is_exact_and_case_sensitive(name: str, expected: bool) -> None:
    assert is_supported_image(Path("/data") / name) is expected


def test_output_path_mirrors_relative_structure(tmp_path: Path) -> None:
    input_root = tmp_path / "in"
    output_root = tmp_path / "out"

    mapped = map_output_path(input_root / "sub" / "photo.jpeg", input_root, output_root, "webp")

    assert mapped == output_root / "sub" / "photo.webp"


def test_output_path_outside_input_root_fails(tmp_path: Path) -> None:
    with pytest.raises(PathMappingError):
        map_output_path(tmp_path / "elsewhere" / "a.png", tmp_path / "in", tmp_path / "out", "avif")


def test_plan_filters_and_splits_existing(tmp_path: Path) -> None:
    input_root = tmp_path / "in"
    output_root = tmp_path / "out"
    (output_root / "sub").mkdir(parents=True)
    (output_root / "sub" / "done.avif").write_bytes(b"")

    paths = [
        input_root / "new.png",
        input_root / "sub" / "done.jpg",
        input_root / "notes.txt",
        input_root / "LOUD.PNG",
        tmp_path / "outside.png",
    ]

    plan = plan_work_items(paths, input_root, output_root, "avif")

    assert plan.pending == [WorkItem(input_root / "new.png", output_root / "new.avif")]
    assert plan.existing == [WorkItem(input_root / "sub" / "done.jpg", output_root / "sub" / "done.avif")]


def test_walk_yields_sorted_files_only(tmp_path: Path) -> None:
    (tmp_path / "b").mkdir()
    (tmp_path / "b" / "z.png").write_bytes(b"")
    (tmp_path / "a.png").write_bytes(b"")
    (tmp_path / "dir.png").mkdir()

    assert list(walk_input_tree(tmp_path)) == [tmp_path / "a.png", tmp_path / "b" / "z.png"]


def test_walk_missing_root_yields_nothing(tmp_path: Path) -> None:
    assert list(walk_input_tree(tmp_path / "missing")) == []


def test_prepare_output_dirs_creates_each_parent_once(tmp_path: Path) -> None:
    (tmp_path / "exists").mkdir()
    items = [
        WorkItem(tmp_path / "in" / "a.png", tmp_path / "deep" / "er" / "a.avif"),
        WorkItem(tmp_path / "in" / "b.png", tmp_path / "deep" / "er" / "b.avif"),
        WorkItem(tmp_path / "in" / "c.png", tmp_path / "exists" / "c.avif"),
    ]

    created = prepare_output_dirs(items)

    assert created == {tmp_path / "deep" / "er", tmp_path / "exists"}
    assert (tmp_path / "deep" / "er").is_dir()


def test_inputs_sharing_a_stem_claim_one_output(tmp_path: Path) -> None:
    input_root = tmp_path / "in"
    output_root = tmp_path / "out"
    paths = [input_root / "photo.jpg", input_root / "photo.png", input_root / "other.png"]

    plan = plan_work_items(paths, input_root, output_root, "png")

    assert plan.pending == [
        WorkItem(input_root / "photo.jpg", output_root / "photo.png"),
        WorkItem(input_root / "other.png", output_root / "other.png"),
    ]
    assert plan.duplicates == [WorkItem(input_root / "photo.png", output_root / "photo.png")]
    outputs = [item.output_path for item in plan.pending]
    assert len(outputs) == len(set(outputs))


def test_duplicate_of_existing_output_is_not_requeued(tmp_path: Path) -> None:
    input_root = tmp_path / "in"
    output_root = tmp_path / "out"
    output_root.mkdir()
    (output_root / "photo.avif").write_bytes(b"")

    plan = plan_work_items(
        [input_root / "photo.jpeg", input_root / "photo.png"], input_root, output_root, "avif"
    )

    assert plan.pending == []
    assert len(plan.existing) == 1
    assert len(plan.duplicates) == 1
