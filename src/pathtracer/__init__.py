"""CPU path tracer built on NumPy.

This package renders scenes of spheres and quads with a recursive Monte
Carlo path sampler:
- Stratified sampling at the first hit, one sample per deeper bounce
- Fresnel-weighted diffuse / specular / refractive bounces with glossy cones
- Next-event estimation toward emissive shapes
- Progressive, multi-threaded accumulation and PNG export

Subpackages:
    core: Vectors, colors, the bounce protocol, direct lighting, the sampler
        and the progressive renderer
    geometry: Shape protocol, spheres, quads and bounding boxes
    materials: The Material parameter set and presets
    scene: Scene container, hit records, textures and the Cornell box
    camera: Pinhole camera
    preview: Tone mapping and PNG export
"""

from pathtracer.core.sampler import PathSampler, SpecularMode
from pathtracer.core.bounce import BounceMode
from pathtracer.camera.pinhole import PinholeCamera
from pathtracer.core.progressive import ProgressiveRenderer
from pathtracer.scene.scene import Scene

__version__ = "0.1.0"

__all__ = [
    "BounceMode",
    "PathSampler",
    "PinholeCamera",
    "ProgressiveRenderer",
    "Scene",
    "SpecularMode",
    "__version__",
]
