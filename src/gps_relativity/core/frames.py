"""Hierarchy of nested rotating reference frames.

Every node stores only its transform relative to its parent: a rotation matrix
applied first, then a translation. World transforms are composed from the root
down to the requested node on every query, so a reading always reflects the
latest local updates of all ancestors.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from .errors import NotFoundError

TAU = 2.0 * math.pi

NodeRef = int | str


def normalize_angle(angle: float) -> float:
    """Wrap *angle* into ``[0, 2π)``."""

    wrapped = math.fmod(angle, TAU)
    if wrapped < 0.0:
        wrapped += TAU
    # fmod of a tiny negative value can round back up to exactly TAU
    if wrapped >= TAU:
        wrapped = 0.0
    return wrapped


def rotation_x(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])


def rotation_y(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]])


def rotation_z(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def euler_xyz(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> np.ndarray:
    """Rotation matrix for intrinsic X, then Y, then Z Euler angles."""

    return rotation_x(x) @ rotation_y(y) @ rotation_z(z)


def prograde_rotation(angle: float) -> np.ndarray:
    """Rotation about +y that carries +x onto ``(cos a, 0, sin a)``.

    This is the sense in which orbital phase and body spin advance.
    """

    return rotation_y(-angle)


def look_at_rotation(
    position: Sequence[float],
    target: Sequence[float] = (0.0, 0.0, 0.0),
    up: Sequence[float] = (0.0, 1.0, 0.0),
) -> np.ndarray:
    """Rotation whose local +z axis points from *position* towards *target*."""

    forward = np.asarray(target, dtype=float) - np.asarray(position, dtype=float)
    norm = float(np.linalg.norm(forward))
    if norm == 0.0:
        return np.eye(3)
    forward /= norm
    up_vec = np.asarray(up, dtype=float)
    right = np.cross(up_vec, forward)
    if float(np.linalg.norm(right)) < 1e-12:
        # forward is parallel to up; nudge the reference axis
        right = np.cross(np.array([0.0, 0.0, 1.0]), forward)
        if float(np.linalg.norm(right)) < 1e-12:
            right = np.cross(np.array([1.0, 0.0, 0.0]), forward)
    right /= np.linalg.norm(right)
    true_up = np.cross(forward, right)
    return np.column_stack((right, true_up, forward))


@dataclass
class FrameNode:
    name: str
    parent: int | None
    position: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=float))
    rotation: np.ndarray = field(default_factory=lambda: np.eye(3, dtype=float))


class TransformGraph:
    """Arena of frame nodes addressed by integer handles or unique names."""

    def __init__(self) -> None:
        self._nodes: list[FrameNode] = []
        self._index: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, ref: object) -> bool:
        if isinstance(ref, str):
            return ref in self._index
        if isinstance(ref, int):
            return 0 <= ref < len(self._nodes)
        return False

    @property
    def names(self) -> list[str]:
        return [node.name for node in self._nodes]

    def add_frame(
        self,
        name: str,
        parent: NodeRef | None = None,
        *,
        position: Sequence[float] = (0.0, 0.0, 0.0),
        rotation: np.ndarray | None = None,
    ) -> int:
        if name in self._index:
            raise ValueError(f"Frame {name!r} already exists")
        parent_id = None if parent is None else self.node_id(parent)
        node = FrameNode(name=name, parent=parent_id)
        node.position[:] = position
        if rotation is not None:
            node.rotation[:] = rotation
        self._nodes.append(node)
        node_id = len(self._nodes) - 1
        self._index[name] = node_id
        return node_id

    def node_id(self, ref: NodeRef) -> int:
        if isinstance(ref, str):
            try:
                return self._index[ref]
            except KeyError:
                raise NotFoundError(f"Unknown frame: {ref!r}") from None
        if isinstance(ref, (int, np.integer)) and 0 <= ref < len(self._nodes):
            return int(ref)
        raise NotFoundError(f"Unknown frame handle: {ref!r}")

    def node(self, ref: NodeRef) -> FrameNode:
        return self._nodes[self.node_id(ref)]

    def name_of(self, ref: NodeRef) -> str:
        return self.node(ref).name

    def parent_of(self, ref: NodeRef) -> int | None:
        return self.node(ref).parent

    def chain(self, ref: NodeRef) -> list[int]:
        """Node handles from the root down to *ref*, inclusive."""

        node_id: int | None = self.node_id(ref)
        path: list[int] = []
        while node_id is not None:
            path.append(node_id)
            node_id = self._nodes[node_id].parent
        path.reverse()
        return path

    def set_position(self, ref: NodeRef, position: Sequence[float]) -> None:
        self.node(ref).position[:] = position

    def set_rotation(self, ref: NodeRef, rotation: np.ndarray) -> None:
        self.node(ref).rotation[:] = rotation

    def set_euler(self, ref: NodeRef, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> None:
        self.set_rotation(ref, euler_xyz(x, y, z))

    def local_matrix(self, ref: NodeRef) -> np.ndarray:
        node = self.node(ref)
        matrix = np.eye(4)
        matrix[:3, :3] = node.rotation
        matrix[:3, 3] = node.position
        return matrix

    def world_matrix(self, ref: NodeRef) -> np.ndarray:
        matrix = np.eye(4)
        for node_id in self.chain(ref):
            matrix = matrix @ self.local_matrix(node_id)
        return matrix

    def world_position_of(self, ref: NodeRef) -> np.ndarray:
        return self.world_matrix(ref)[:3, 3].copy()

    def world_rotation_of(self, ref: NodeRef) -> np.ndarray:
        return self.world_matrix(ref)[:3, :3].copy()

    def to_world(self, ref: NodeRef, points: np.ndarray) -> np.ndarray:
        """Map an ``(N, 3)`` array of points in *ref*'s local space to world space."""

        matrix = self.world_matrix(ref)
        pts = np.atleast_2d(np.asarray(points, dtype=float))
        return pts @ matrix[:3, :3].T + matrix[:3, 3]

    def look_at_origin(self, ref: NodeRef) -> None:
        """Turn the node's local +z towards its parent's origin."""

        node = self.node(ref)
        node.rotation[:] = look_at_rotation(node.position)


__all__ = [
    "FrameNode",
    "NodeRef",
    "TAU",
    "TransformGraph",
    "euler_xyz",
    "look_at_rotation",
    "normalize_angle",
    "prograde_rotation",
    "rotation_x",
    "rotation_y",
    "rotation_z",
]
