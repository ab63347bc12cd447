"""Python-side scene description and serialization.

A Scene is a plain list of spheres with their materials. It is validated as
it is built and only touches the world fields when ``apply()`` uploads it,
so scenes can be constructed, compared and serialized without rendering.

The dictionary form mirrors a JSON scene file:

    {
        "materials": [{"type": "lambertian", "albedo": [0.8, 0.8, 0.0]}, ...],
        "spheres": [{"center": [0, -100.5, -1], "radius": 100, "material_id": 0}, ...],
        "camera": {"lookfrom": [...], "lookat": [...], "vfov": 20, ...}
    }

Materials shared by several spheres are written once. The camera entry is
optional.

Example:
    >>> from spheretrace.materials import Lambertian, Metal
    >>> from spheretrace.scene.builder import Scene
    >>> scene = Scene()
    >>> scene.add_sphere((0.0, 0.0, -1.0), 0.5, Lambertian((0.1, 0.2, 0.5)))
    0
    >>> scene.add_sphere((1.0, 0.0, -1.0), 0.5, Metal((0.8, 0.6, 0.2)))
    1
    >>> scene.apply()  # after ti.init
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from spheretrace.camera.thin_lens import ThinLensCamera
from spheretrace.materials.material import MaterialSpec, material_from_dict
from spheretrace.scene import world


@dataclass(frozen=True)
class SphereSpec:
    """A sphere together with its material.

    Attributes:
        center: Center point of the sphere (x, y, z).
        radius: Radius of the sphere (> 0).
        material: Surface material description.
    """

    center: tuple[float, float, float]
    radius: float
    material: MaterialSpec


def _as_vec3(values: Any, name: str) -> tuple[float, float, float]:
    if len(values) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(values)}")
    return (float(values[0]), float(values[1]), float(values[2]))


@dataclass
class Scene:
    """An ordered collection of spheres.

    Attributes:
        spheres: Spheres in insertion order.
        camera: Optional camera stored alongside the geometry.
    """

    spheres: list[SphereSpec] = field(default_factory=list)
    camera: Optional[ThinLensCamera] = None

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material: MaterialSpec,
    ) -> int:
        """Append a sphere to the scene.

        Args:
            center: Center point of the sphere.
            radius: Radius of the sphere (must be positive).
            material: A Lambertian, Metal or Dielectric description.

        Returns:
            The index of the new sphere.

        Raises:
            ValueError: If the radius is not positive or the material is invalid.
        """
        if not radius > 0.0:
            raise ValueError(f"Sphere radius = {radius} must be positive")
        material.validate()
        self.spheres.append(SphereSpec(_as_vec3(center, "Center"), float(radius), material))
        return len(self.spheres) - 1

    def __len__(self) -> int:
        return len(self.spheres)

    def apply(self) -> None:
        """Replace the world contents with this scene's spheres.

        Raises:
            RuntimeError: If the scene holds more spheres than the world
                storage supports.
        """
        world.clear_world()
        for sphere in self.spheres:
            world.add_sphere(sphere.center, sphere.radius, sphere.material)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        materials: list[dict[str, Any]] = []
        spheres: list[dict[str, Any]] = []
        for sphere in self.spheres:
            mat_config = sphere.material.to_dict()
            if mat_config in materials:
                material_id = materials.index(mat_config)
            else:
                materials.append(mat_config)
                material_id = len(materials) - 1
            spheres.append(
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "material_id": material_id,
                }
            )

        data: dict[str, Any] = {"materials": materials, "spheres": spheres}
        if self.camera is not None:
            data["camera"] = self.camera.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Scene":
        """Build a scene from a dictionary produced by ``to_dict``.

        Raises:
            ValueError: If a material is unknown, a sphere refers to a missing
                material, or an entry is missing a required key.
        """
        materials = [material_from_dict(mat_config) for mat_config in data.get("materials", [])]

        scene = cls()
        for i, sphere_config in enumerate(data.get("spheres", [])):
            try:
                center = sphere_config["center"]
                radius = float(sphere_config["radius"])
                material_id = int(sphere_config["material_id"])
            except KeyError as e:
                raise ValueError(f"Sphere {i} is missing required key {e}") from e
            if not 0 <= material_id < len(materials):
                raise ValueError(f"Sphere {i} refers to unknown material_id {material_id}")
            scene.add_sphere(center, radius, materials[material_id])

        camera_config = data.get("camera")
        if camera_config is not None:
            try:
                scene.camera = ThinLensCamera.from_dict(camera_config)
            except KeyError as e:
                raise ValueError(f"Camera is missing required key {e}") from e
        return scene


def load_scene(path: Union[str, Path]) -> Scene:
    """Read a scene from a JSON file."""
    with open(path) as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Scene file {path} must contain a JSON object")
    return Scene.from_dict(data)


def save_scene(scene: Scene, path: Union[str, Path]) -> None:
    """Write a scene to a JSON file."""
    with open(path, "w") as f:
        json.dump(scene.to_dict(), f, indent=2)
