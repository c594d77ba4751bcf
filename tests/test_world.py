from pathlib import Path

from pytest import approx

from conftest import FIXTURES_DIR, PLAYGROUND_PATH
from skelload.assembly import JointType
from skelload.assembly import diagnostics as codes
from skelload.model.transforms import translation
from skelload.world import load_world


def test_double_pendulum_skeleton(double_pendulum):
    skeleton = double_pendulum.unwrap()

    assert skeleton.name == "double_pendulum"
    assert skeleton.mobile
    assert skeleton.body_names == ("base", "upper", "lower")
    assert [joint.name for joint in skeleton.joints] == ["root", "shoulder", "elbow"]
    assert skeleton.num_dofs == 6 + 1 + 1
    elbow = skeleton.parent_joint(skeleton.body("lower"))
    assert elbow.axes[0].xyz == approx((0.0, 1.0, 0.0))
    assert translation(skeleton.body("lower").world_transform) == approx((0.0, 0.0, 0.0))
    assert [d.code for d in double_pendulum.diagnostics] == [codes.SYNTHESIZED_ROOT_JOINT]


def test_soft_blob_skeleton(soft_blob):
    skeleton = soft_blob.unwrap()

    assert not skeleton.mobile
    ground, blob = skeleton.bodies
    assert skeleton.parent_joint(ground).type is JointType.WELD
    assert skeleton.parent_joint(ground).is_root
    assert blob.is_soft
    assert blob.soft.kv == 500.0
    assert skeleton.parent_of(blob) is ground
    assert soft_blob.diagnostics == ()


def test_world_skips_models_that_fail_to_assemble():
    world = load_world(PLAYGROUND_PATH)

    assert world.name == "playground"
    assert world.time_step == 0.002
    assert world.gravity == (0.0, 0.0, -9.8)
    assert [skeleton.name for skeleton in world.skeletons] == ["box", "cube_mesh"]
    assert world.failed_models == ("broken",)
    errors = [d for d in world.diagnostics if d.severity == codes.ERROR]
    assert [(d.code, d.name) for d in errors] == [(codes.MISSING_PARENT_LINK, "ghost")]


def test_world_models_are_closed_with_free_roots():
    world = load_world(PLAYGROUND_PATH)
    box = world.skeleton("box")

    (body,) = box.bodies
    joint = box.parent_joint(body)
    assert joint.name == "root"
    assert joint.type is JointType.FREE
    assert translation(joint.parent_to_joint) == approx((1.0, 0.0, 0.0))


def test_mesh_filenames_are_resolved_against_document():
    world = load_world(PLAYGROUND_PATH)
    (body,) = world.skeleton("cube_mesh").bodies

    geometry = body.visuals[0].geometry
    assert geometry.type == "mesh"
    assert Path(geometry.filename) == FIXTURES_DIR.resolve() / "meshes" / "cube.dae"
    assert geometry.size == (2.0, 2.0, 2.0)
