import shutil

import pytest

from conftest import DOUBLE_PENDULUM_PATH, PLAYGROUND_PATH
from skelload.scripts.show_skeleton import (
    find_sdf_documents,
    main,
    resolve_sdf_path,
    select_option,
)


def _silent_print(_: str) -> None:  # pragma: no cover - helper for tests
    return None


@pytest.fixture
def models_dir(tmp_path):
    pendulum = tmp_path / "pendulum"
    pendulum.mkdir()
    shutil.copy(DOUBLE_PENDULUM_PATH, pendulum / "model.sdf")

    playground = tmp_path / "Playground" / "sdf"
    playground.mkdir(parents=True)
    shutil.copy(DOUBLE_PENDULUM_PATH, playground / "a_pendulum.sdf")
    shutil.copy(PLAYGROUND_PATH, playground / "playground.world")
    (playground / "notes.txt").write_text("not a document")
    return tmp_path


def test_documents_are_found_recursively(models_dir):
    documents = find_sdf_documents(models_dir)

    assert [d.relative_to(models_dir).as_posix() for d in documents] == [
        "pendulum/model.sdf",
        "Playground/sdf/a_pendulum.sdf",
        "Playground/sdf/playground.world",
    ]


def test_case_insensitive_sdf_suffix(tmp_path):
    uppercase = tmp_path / "ExampleBot" / "example.SDF"
    uppercase.parent.mkdir()
    uppercase.write_text("<sdf version='1.5'/>")

    assert find_sdf_documents(tmp_path) == [uppercase]


def test_resolve_by_direct_path(models_dir):
    explicit = models_dir / "pendulum" / "model.sdf"
    resolved = resolve_sdf_path(str(explicit), models_dir, print_fn=_silent_print)
    assert resolved == explicit.resolve()


def test_resolve_by_directory_name(models_dir):
    resolved = resolve_sdf_path("pendulum", models_dir, print_fn=_silent_print)
    assert resolved == (models_dir / "pendulum" / "model.sdf").resolve()


def test_resolve_by_document_stem(models_dir):
    resolved = resolve_sdf_path("A_Pendulum", models_dir, print_fn=_silent_print)
    assert resolved.name == "a_pendulum.sdf"


def test_ambiguous_name_prompts_for_document(models_dir):
    inputs = iter(["2"])
    resolved = resolve_sdf_path(
        "playground",
        models_dir,
        input_fn=lambda _: next(inputs),
        print_fn=_silent_print,
    )
    assert resolved.name == "playground.world"


def test_interactive_selection_retries_bad_input(models_dir):
    inputs = iter(["x", "7", "pendulum/model.sdf"])
    resolved = resolve_sdf_path(
        None,
        models_dir,
        input_fn=lambda _: next(inputs),
        print_fn=_silent_print,
    )
    assert resolved.name == "model.sdf"


def test_directory_target_limits_the_search(models_dir):
    inputs = iter(["1"])
    resolved = resolve_sdf_path(
        str(models_dir / "Playground"),
        models_dir,
        input_fn=lambda _: next(inputs),
        print_fn=_silent_print,
    )
    assert resolved.name == "a_pendulum.sdf"


def test_unknown_document_name(models_dir):
    with pytest.raises(FileNotFoundError):
        resolve_sdf_path("does_not_exist", models_dir, print_fn=_silent_print)


def test_select_option_accepts_names_case_insensitively():
    answers = iter(["BETA"])
    chosen = select_option(
        "Pick:", ["alpha", "beta"], input_fn=lambda _: next(answers), print_fn=_silent_print
    )
    assert chosen == "beta"
    with pytest.raises(ValueError):
        select_option("Pick:", [])


def test_main_prints_tree(capsys):
    assert main([str(DOUBLE_PENDULUM_PATH)]) == 0

    out = capsys.readouterr().out
    assert "synthesized_root_joint" in out
    assert "Skeleton 'double_pendulum': 3 bodies, 8 dofs" in out
    assert "    lower <- elbow (revolute, 1 dof)" in out


def test_main_reports_assembly_failure(tmp_path, capsys):
    path = tmp_path / "broken.sdf"
    path.write_text(
        "<sdf version='1.5'><model name='broken'><link name='b'/>"
        "<joint name='j' type='revolute'><parent>ghost</parent><child>b</child></joint>"
        "</model></sdf>"
    )

    assert main([str(path)]) == 1
    captured = capsys.readouterr()
    assert "[FAIL] missing_parent_link" in captured.out
    assert "failed" in captured.err


def test_main_assembles_every_model_of_a_world(capsys):
    assert main([str(PLAYGROUND_PATH)]) == 1

    out = capsys.readouterr().out
    assert "World 'playground': 3 models, time step 0.002 s, gravity (0, 0, -9.8)" in out
    assert "Skeleton 'box': 1 bodies, 6 dofs" in out
    assert "Skeleton 'cube_mesh': 1 bodies, 6 dofs" in out
    assert "Failed models: broken" in out


def test_main_can_pick_one_model_of_a_world(capsys):
    assert main([str(PLAYGROUND_PATH), "--model", "box"]) == 0

    out = capsys.readouterr().out
    assert "  box_link <- root (free, 6 dof)" in out
    assert "cube_mesh" not in out


def test_main_rejects_unknown_model(capsys):
    assert main([str(PLAYGROUND_PATH), "--model", "nope"]) == 1
    assert "no model 'nope'" in capsys.readouterr().err
