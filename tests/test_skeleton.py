import numpy as np
import pytest

from skelload.assembly import BodyNode, Joint, JointType, LinkKind, Skeleton


def _pair(index, name, parent_index=None, joint_type=JointType.FREE):
    joint = Joint(name=f"{name}_joint", type=joint_type, parent_index=parent_index, child_index=index)
    body = BodyNode(
        name=name,
        index=index,
        parent_index=parent_index,
        joint_index=index,
        kind=LinkKind.RIGID,
        world_transform=np.eye(4),
    )
    return joint, body


def _skeleton():
    skeleton = Skeleton("tree")
    skeleton.attach(*_pair(0, "root"))
    skeleton.attach(*_pair(1, "left", 0, JointType.REVOLUTE))
    skeleton.attach(*_pair(2, "left_tip", 1, JointType.WELD))
    skeleton.attach(*_pair(3, "right", 0, JointType.BALL))
    skeleton.attach(*_pair(4, "floating"))
    return skeleton


def test_depth_first_traversal_covers_every_tree():
    skeleton = _skeleton()

    assert [body.name for body in skeleton.descendants()] == [
        "root",
        "left",
        "left_tip",
        "right",
        "floating",
    ]
    assert [body.name for body in skeleton.roots()] == ["root", "floating"]
    assert skeleton.num_dofs == 6 + 1 + 0 + 3 + 6


def test_attach_rejects_child_before_parent():
    skeleton = Skeleton("tree")
    joint, body = _pair(0, "orphan", parent_index=0)

    with pytest.raises(ValueError):
        skeleton.attach(joint, body)
    assert len(skeleton) == 0


def test_attach_rejects_duplicate_body_name():
    skeleton = _skeleton()

    with pytest.raises(ValueError):
        skeleton.attach(*_pair(5, "left", 0))


def test_body_lookup():
    skeleton = _skeleton()

    assert skeleton.body("left_tip").parent_index == 1
    assert skeleton.find_body("missing") is None
    with pytest.raises(KeyError):
        skeleton.body("missing")


def test_to_networkx_edges_follow_joints():
    pytest.importorskip("networkx")
    graph = _skeleton().to_networkx()

    assert set(graph.nodes) == {"root", "left", "left_tip", "right", "floating"}
    assert graph.edges["root", "left"]["type"] == "revolute"
    assert graph.edges["left", "left_tip"]["joint"] == "left_tip_joint"
    assert graph.in_degree("floating") == 0
